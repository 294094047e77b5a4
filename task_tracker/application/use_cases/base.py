"""
Base Use Case

Provides the foundation for all use cases in the application layer.
Implements common patterns like logging, validation, and error handling.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from uuid import UUID, uuid4

from task_tracker.application.interfaces.exceptions import (
    DuplicateEntityError,
    RepositoryError,
    is_retryable,
)
from task_tracker.application.interfaces.unit_of_work import IUnitOfWork
from task_tracker.domain.exceptions import ConcurrencyException
from task_tracker.domain.result import DomainError

logger = logging.getLogger(__name__)

# Type variables for request and response
TRequest = TypeVar("TRequest")
TResponse = TypeVar("TResponse")

# Response error kinds
VALIDATION = "validation"
BUSINESS_RULE = "business_rule"
NOT_FOUND = "not_found"
CONFLICT = "conflict"
INTERNAL = "internal"


@dataclass
class UseCaseRequest:
    """Base class for use case requests."""

    request_id: UUID | None = None
    correlation_id: UUID | None = None
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        """Initialize request with defaults."""
        if self.request_id is None:
            self.request_id = uuid4()
        if self.metadata is None:
            self.metadata = {}


@dataclass
class UseCaseResponse:
    """Base class for use case responses."""

    success: bool
    data: Any | None = None
    error: str | None = None
    error_kind: str | None = None
    request_id: UUID | None = None

    @classmethod
    def success_response(cls, data: Any, request_id: UUID | None) -> "UseCaseResponse":
        """Create a successful response."""
        return cls(success=True, data=data, request_id=request_id)

    @classmethod
    def error_response(
        cls, error: str, request_id: UUID | None, error_kind: str = INTERNAL
    ) -> "UseCaseResponse":
        """Create an error response."""
        return cls(success=False, error=error, error_kind=error_kind, request_id=request_id)

    @classmethod
    def from_domain_error(cls, error: DomainError | None, request_id: UUID | None) -> "UseCaseResponse":
        """Map a failed domain Result onto a client-error response."""
        if error is None:
            return cls.error_response("Unknown domain error", request_id)
        return cls.error_response(error.message, request_id, error.kind.value)

    @classmethod
    def not_found(cls, entity: str, identifier: Any, request_id: UUID | None) -> "UseCaseResponse":
        return cls.error_response(f"{entity} '{identifier}' not found", request_id, NOT_FOUND)


def error_kind_for(error: BaseException) -> str:
    """Classify an exception escaping a use case."""
    if isinstance(error, (ConcurrencyException, DuplicateEntityError)) or is_retryable(error):
        return CONFLICT
    return INTERNAL


class UseCase(ABC, Generic[TRequest, TResponse]):
    """
    Abstract base class for all use cases.

    Provides a consistent interface and common functionality for
    business logic orchestration.
    """

    def __init__(self, name: str | None = None) -> None:
        """
        Initialize use case.

        Args:
            name: Optional name for the use case (defaults to class name)
        """
        self.name = name or self.__class__.__name__
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    async def execute(self, request: TRequest) -> TResponse:
        """
        Execute the use case.

        This method provides the template for use case execution with
        logging, validation, and error handling.

        Args:
            request: The use case request

        Returns:
            The use case response
        """
        request_id = getattr(request, "request_id", None) or uuid4()

        self.logger.info(
            f"Executing {self.name}",
            extra={
                "request_id": str(request_id),
                "use_case": self.name,
            },
        )

        try:
            # Validate the request
            validation_error = await self.validate(request)
            if validation_error:
                self.logger.warning(
                    f"Validation failed for {self.name}: {validation_error}",
                    extra={"request_id": str(request_id)},
                )
                return self._create_error_response(validation_error, request_id, VALIDATION)

            # Execute the business logic
            response = await self.process(request)

            self.logger.info(
                f"Successfully executed {self.name}",
                extra={
                    "request_id": str(request_id),
                    "success": getattr(response, "success", True),
                },
            )

            return response

        except Exception as e:
            kind = error_kind_for(e)
            self.logger.error(
                f"Error executing {self.name}: {e}",
                extra={"request_id": str(request_id), "error_kind": kind},
                exc_info=kind == INTERNAL,
            )
            return self._create_error_response(str(e), request_id, kind)

    @abstractmethod
    async def validate(self, request: TRequest) -> str | None:
        """
        Validate the request.

        Args:
            request: The request to validate

        Returns:
            Error message if validation fails, None otherwise
        """
        pass

    @abstractmethod
    async def process(self, request: TRequest) -> TResponse:
        """
        Process the request and execute business logic.

        Args:
            request: The validated request

        Returns:
            The response
        """
        pass

    def _create_error_response(
        self, error: str, request_id: UUID, error_kind: str = INTERNAL
    ) -> TResponse:
        """
        Create an error response.

        Args:
            error: Error message
            request_id: Request ID
            error_kind: Response error classification

        Returns:
            Error response
        """
        return UseCaseResponse.error_response(error, request_id, error_kind)  # type: ignore


class TransactionalUseCase(UseCase[TRequest, TResponse]):
    """
    Base class for use cases that require database transactions.

    Automatically manages transaction lifecycle. Committing saves tracked
    changes and dispatches the domain events registered during ``process``.
    """

    def __init__(self, unit_of_work: IUnitOfWork, name: str | None = None) -> None:
        """
        Initialize transactional use case.

        Args:
            unit_of_work: Unit of work for transaction management
            name: Optional name for the use case
        """
        super().__init__(name)
        self.unit_of_work = unit_of_work

    async def execute(self, request: TRequest) -> TResponse:
        """
        Execute the use case within a transaction.

        Args:
            request: The use case request

        Returns:
            The use case response
        """
        request_id = getattr(request, "request_id", None) or uuid4()

        self.logger.info(
            f"Starting transaction for {self.name}", extra={"request_id": str(request_id)}
        )

        async with self.unit_of_work as uow:
            try:
                # Call parent execute which handles validation and processing
                response = await super().execute(request)

                # Commit if successful
                if getattr(response, "success", True):
                    await uow.commit()
                    self.logger.info(
                        f"Transaction committed for {self.name}",
                        extra={"request_id": str(request_id)},
                    )
                else:
                    await uow.rollback()
                    self.logger.info(
                        f"Transaction rolled back for {self.name}",
                        extra={"request_id": str(request_id)},
                    )

                return response

            except RepositoryError as e:
                if await uow.is_active():
                    await uow.rollback()
                kind = error_kind_for(e)
                self.logger.warning(
                    f"Transaction failed for {self.name}: {e}",
                    extra={"request_id": str(request_id), "error_kind": kind},
                )
                return self._create_error_response(str(e), request_id, kind)

            except Exception as e:
                if await uow.is_active():
                    await uow.rollback()
                self.logger.error(
                    f"Transaction rolled back due to error in {self.name}: {e}",
                    extra={"request_id": str(request_id)},
                    exc_info=True,
                )
                raise
