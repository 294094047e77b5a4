"""
Unit of Work Interface

Defines the contract for managing transactions across multiple repositories.
Implements the Unit of Work pattern for atomic operations.
"""

# Standard library imports
from abc import abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol, TypeVar

from task_tracker.domain.events import DomainEvent

from .repositories import (
    IProjectRepository,
    ITaskRepository,
    IUserRepository,
    IWorkspaceRepository,
)

T = TypeVar("T")


class IUnitOfWork(Protocol):
    """
    Unit of Work interface for transaction management.

    Provides atomic operations across multiple repositories and owns the
    queue of domain events produced during the unit's lifetime.
    """

    # Repository access
    users: IUserRepository
    workspaces: IWorkspaceRepository
    projects: IProjectRepository
    tasks: ITaskRepository

    @abstractmethod
    def register_events(self, events: Iterable[DomainEvent]) -> None:
        """
        Queue domain events for dispatch on the next successful save.

        Args:
            events: Events returned on a domain operation's Result
        """
        ...

    @property
    @abstractmethod
    def pending_events(self) -> tuple[DomainEvent, ...]:
        """Events queued and not yet dispatched."""
        ...

    @abstractmethod
    async def save_changes(self) -> int:
        """
        Persist all tracked changes atomically, then dispatch queued events once.

        Returns:
            Number of aggregates written

        Raises:
            ConcurrencyError: If a tracked aggregate changed in storage since it was loaded
            DuplicateEntityError: If a write violates a unique index
        """
        ...

    @abstractmethod
    async def begin_transaction(self) -> None:
        """
        Begin a new transaction.

        Raises:
            TransactionAlreadyActiveError: If a transaction is already active
        """
        ...

    @abstractmethod
    async def commit(self) -> None:
        """
        Save pending changes and end the transaction.

        Raises:
            TransactionNotActiveError: If no transaction is active
        """
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """
        Discard tracked changes and queued events and end the transaction.

        Rolling back without an active transaction is a logged no-op.
        """
        ...

    @abstractmethod
    async def is_active(self) -> bool:
        """
        Check if a transaction is currently active.

        Returns:
            True if transaction is active, False otherwise
        """
        ...

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        """
        Async context manager entry.

        Automatically begins a transaction.

        Returns:
            Self for use in async with statement
        """
        ...

    @abstractmethod
    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """
        Async context manager exit.

        Commits a still-open transaction on success, rolls back on exception.
        """
        ...


class IUnitOfWorkFactory(Protocol):
    """
    Factory interface for creating Unit of Work instances.

    Allows for different implementations (e.g., for testing vs production).
    """

    @abstractmethod
    def create_unit_of_work(self) -> IUnitOfWork:
        """Create a new Unit of Work instance."""
        ...


class ITransactionManager(Protocol):
    """
    High-level transaction management interface.

    Provides convenience methods for common transaction patterns.
    """

    @abstractmethod
    async def execute_in_transaction(self, operation: Callable[[IUnitOfWork], Awaitable[T]]) -> T:
        """
        Execute an operation within a fresh unit of work.

        Commits when the operation returns, rolls back if it raises.

        Args:
            operation: Async callable that takes a UnitOfWork parameter

        Returns:
            Result of the operation
        """
        ...

    @abstractmethod
    async def execute_with_retry(
        self,
        operation: Callable[[IUnitOfWork], Awaitable[T]],
        max_retries: int | None = None,
    ) -> T:
        """
        Execute an operation, re-running it in a new unit of work on retryable
        storage conflicts.

        Args:
            operation: Async callable that takes a UnitOfWork parameter
            max_retries: Maximum number of retry attempts (configured default if None)

        Returns:
            Result of the operation

        Raises:
            OptimisticLockException: If all retries fail
        """
        ...
