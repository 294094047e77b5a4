"""
Domain-level exceptions for the task tracker.

Expected rule violations are returned as failed Results, never raised. The
exceptions here are the unrecoverable-fault channel: programming errors and
storage-level concurrency conflicts surfaced through the domain vocabulary.
"""

from typing import Any
from uuid import UUID


class DomainException(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class InvalidResultAccessError(DomainException):
    """Raised when the value of a failed Result is read."""

    pass


class ConcurrencyException(DomainException):
    """
    General concurrency-related exception for domain operations.

    Used when two writers race on the same aggregate, e.g. the project
    task-number sequence.
    """

    def __init__(
        self,
        message: str,
        entity_type: str | None = None,
        entity_id: UUID | str | None = None,
        operation: str | None = None,
    ) -> None:
        details = {}
        if entity_type:
            details["entity_type"] = entity_type
        if entity_id:
            details["entity_id"] = str(entity_id)
        if operation:
            details["operation"] = operation

        super().__init__(message, details)
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.operation = operation


class OptimisticLockException(ConcurrencyException):
    """
    Raised when optimistic locking fails after maximum retries.
    """

    def __init__(
        self,
        entity_type: str,
        entity_id: UUID | str,
        retries: int,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"Failed to update {entity_type} {entity_id} after {retries} retries "
                "due to concurrent modifications"
            )

        super().__init__(
            message=message,
            entity_type=entity_type,
            entity_id=entity_id,
            operation="update",
        )
        self.retries = retries
