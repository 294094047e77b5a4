"""
Repository Exception Definitions

Defines exceptions that repositories may raise.
Following clean architecture principles - these are application-level exceptions.
"""

# Standard library imports
from uuid import UUID


class RepositoryError(Exception):
    """Base exception for repository operations."""

    retryable = False

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class EntityNotFoundError(RepositoryError):
    """Raised when an entity is not found in the repository."""

    def __init__(self, entity_type: str, identifier: UUID | str) -> None:
        super().__init__(f"{entity_type} with identifier '{identifier}' not found")
        self.entity_type = entity_type
        self.identifier = identifier


class DuplicateEntityError(RepositoryError):
    """
    Raised when a write would violate a unique index.

    Collisions on the per-project task number are retryable: the writer
    lost a race for the sequence and can reload the project and try again.
    """

    def __init__(
        self,
        entity_type: str,
        identifier: UUID | str,
        index: str | None = None,
        retryable: bool = False,
    ) -> None:
        message = f"{entity_type} with identifier '{identifier}' already exists"
        if index:
            message += f" (unique index '{index}')"
        super().__init__(message)
        self.entity_type = entity_type
        self.identifier = identifier
        self.index = index
        self.retryable = retryable


class ConcurrencyError(RepositoryError):
    """Raised when a concurrency conflict occurs."""

    retryable = True

    def __init__(
        self,
        entity_type: str,
        identifier: UUID | str,
        expected_version: int | None = None,
        actual_version: int | None = None,
    ) -> None:
        super().__init__(
            f"{entity_type} with identifier '{identifier}' was modified by another process"
        )
        self.entity_type = entity_type
        self.identifier = identifier
        self.expected_version = expected_version
        self.actual_version = actual_version


class TransactionError(RepositoryError):
    """Base exception for transaction operations."""

    pass


class TransactionNotActiveError(TransactionError):
    """Raised when operation requires active transaction but none exists."""

    def __init__(self) -> None:
        super().__init__("No active transaction")


class TransactionAlreadyActiveError(TransactionError):
    """Raised when attempting to start transaction when one is already active."""

    def __init__(self) -> None:
        super().__init__("Transaction is already active")


class TransactionCommitError(TransactionError):
    """Raised when transaction commit fails."""

    def __init__(self, cause: Exception | None = None) -> None:
        super().__init__("Transaction commit failed", cause)


class ConfigurationError(Exception):
    """Raised when configuration-related errors occur."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


def is_retryable(error: BaseException) -> bool:
    """Whether a storage error may succeed if the operation is re-run."""
    return isinstance(error, RepositoryError) and error.retryable
