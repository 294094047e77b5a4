"""
In-Memory Unit of Work Implementation

Concrete implementation of IUnitOfWork over the in-memory database.
Tracks the aggregates loaded through its repositories, writes every change
in one atomic batch and dispatches the queued domain events once the batch
is stored.
"""

# Standard library imports
import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from contextlib import nullcontext
from typing import Any, TypeVar

from opentelemetry.trace import Tracer

# Local imports
from task_tracker.application.config import ConcurrencyConfig
from task_tracker.application.interfaces.events import IEventDispatcher
from task_tracker.application.interfaces.exceptions import (
    RepositoryError,
    TransactionAlreadyActiveError,
    TransactionCommitError,
    TransactionNotActiveError,
    is_retryable,
)
from task_tracker.application.interfaces.repositories import (
    IProjectRepository,
    ITaskRepository,
    IUserRepository,
    IWorkspaceRepository,
)
from task_tracker.application.interfaces.unit_of_work import (
    ITransactionManager,
    IUnitOfWork,
    IUnitOfWorkFactory,
)
from task_tracker.domain.events import DomainEvent
from task_tracker.domain.exceptions import OptimisticLockException
from task_tracker.domain.services import ConcurrencyService
from task_tracker.infrastructure.database import InMemoryDatabase

from .change_tracker import ChangeTracker
from .project_repository import InMemoryProjectRepository
from .task_repository import InMemoryTaskRepository
from .user_repository import InMemoryUserRepository
from .workspace_repository import InMemoryWorkspaceRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InMemoryUnitOfWork(IUnitOfWork):
    """
    In-memory implementation of IUnitOfWork.

    Aggregates handed out by the repositories are private copies; nothing
    reaches the shared database until ``save_changes``. Rolling back simply
    forgets the tracked copies and the queued events.
    """

    def __init__(
        self,
        database: InMemoryDatabase,
        dispatcher: IEventDispatcher | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        """
        Initialize Unit of Work.

        Args:
            database: Shared committed store
            dispatcher: Receives the domain events of each successful save
            tracer: Wraps each save in a span when tracing is enabled
        """
        self.database = database
        self.dispatcher = dispatcher
        self.tracer = tracer
        self._tracker = ChangeTracker()
        self._events: list[DomainEvent] = []
        self._active = False

        self._users = InMemoryUserRepository(database, self._tracker)
        self._workspaces = InMemoryWorkspaceRepository(database, self._tracker)
        self._projects = InMemoryProjectRepository(database, self._tracker)
        self._tasks = InMemoryTaskRepository(database, self._tracker)

    @property
    def users(self) -> IUserRepository:
        """Get the users repository."""
        return self._users

    @property
    def workspaces(self) -> IWorkspaceRepository:
        """Get the workspaces repository."""
        return self._workspaces

    @property
    def projects(self) -> IProjectRepository:
        """Get the projects repository."""
        return self._projects

    @property
    def tasks(self) -> ITaskRepository:
        """Get the tasks repository."""
        return self._tasks

    def register_events(self, events: Iterable[DomainEvent]) -> None:
        queued = {e.event_id for e in self._events}
        for event in events:
            if event.event_id not in queued:
                self._events.append(event)
                queued.add(event.event_id)

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._events)

    async def save_changes(self) -> int:
        """
        Persist tracked changes, then dispatch queued events.

        Events are only dispatched after the write succeeds; on a storage
        error they stay queued and are discarded by the rollback.

        Returns:
            Number of aggregates written

        Raises:
            ConcurrencyError: If a tracked aggregate changed in storage since it was loaded
            DuplicateEntityError: If a write violates a unique index
        """
        span = (
            self.tracer.start_as_current_span("unit_of_work.save_changes")
            if self.tracer is not None
            else nullcontext()
        )
        with span:
            writes = self._tracker.pending_writes()
            self.database.apply(writes)
            self._tracker.accept_changes()

            events, self._events = self._events, []
            if events and self.dispatcher is not None:
                await self.dispatcher.dispatch(events)

        logger.debug(
            "Unit of Work saved changes",
            extra={"writes": len(writes), "events": len(events)},
        )
        return len(writes)

    async def begin_transaction(self) -> None:
        """
        Begin a new transaction with an empty identity map.

        Raises:
            TransactionAlreadyActiveError: If a transaction is already active
        """
        if self._active:
            raise TransactionAlreadyActiveError()

        self._tracker.clear()
        self._events.clear()
        self._active = True
        logger.debug("Unit of Work transaction started")

    async def commit(self) -> None:
        """
        Save pending changes and end the transaction.

        The transaction stays active if saving fails so that the caller can
        roll back.

        Raises:
            TransactionNotActiveError: If no transaction is active
            RepositoryError: If storage rejects the change set
            TransactionCommitError: If saving fails for any other reason
        """
        if not self._active:
            raise TransactionNotActiveError()

        try:
            await self.save_changes()
        except RepositoryError:
            raise
        except Exception as e:
            logger.error(f"Failed to commit transaction: {e}")
            raise TransactionCommitError(e) from e

        self._active = False
        logger.debug("Unit of Work transaction committed")

    async def rollback(self) -> None:
        if not self._active:
            logger.warning("No active transaction to rollback")
            return

        self._tracker.clear()
        self._events.clear()
        self._active = False
        logger.debug("Unit of Work transaction rolled back")

    async def is_active(self) -> bool:
        return self._active

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        await self.begin_transaction()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        """
        Async context manager exit.

        Commits a transaction that is still open on success, rolls back on
        exception. A use case that already committed or rolled back leaves
        nothing to do here.
        """
        if exc_type is None:
            if self._active:
                try:
                    await self.commit()
                except Exception as commit_error:
                    logger.warning(f"Failed to commit in context manager: {commit_error}")
                    await self.rollback()
                    raise
        elif self._active:
            await self.rollback()

        return False  # Don't suppress exceptions


class InMemoryUnitOfWorkFactory(IUnitOfWorkFactory):
    """Creates units of work that share one database and one dispatcher."""

    def __init__(
        self,
        database: InMemoryDatabase,
        dispatcher: IEventDispatcher | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self.database = database
        self.dispatcher = dispatcher
        self.tracer = tracer

    def create_unit_of_work(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.database, self.dispatcher, self.tracer)


class InMemoryTransactionManager(ITransactionManager):
    """
    High-level transaction management implementation.

    Every attempt runs in a brand-new unit of work, so a retry reloads the
    aggregates it depends on (most importantly the project whose task
    sequence was contended).
    """

    def __init__(
        self,
        factory: IUnitOfWorkFactory,
        config: ConcurrencyConfig | None = None,
        concurrency_service: ConcurrencyService | None = None,
    ) -> None:
        """
        Initialize transaction manager.

        Args:
            factory: Unit of Work factory
            config: Retry policy; defaults apply when omitted
            concurrency_service: Backoff calculation and conflict metrics
        """
        self.factory = factory
        self.config = config or ConcurrencyConfig()
        self.concurrency = concurrency_service or ConcurrencyService(
            max_retries=self.config.max_retries,
            base_delay=self.config.base_delay,
            max_delay=self.config.max_delay,
            jitter=self.config.jitter,
        )

    async def execute_in_transaction(self, operation: Callable[[IUnitOfWork], Awaitable[T]]) -> T:
        uow = self.factory.create_unit_of_work()
        async with uow:
            result = await operation(uow)
            logger.debug("Transaction operation completed successfully")
            return result

    async def execute_with_retry(
        self,
        operation: Callable[[IUnitOfWork], Awaitable[T]],
        max_retries: int | None = None,
    ) -> T:
        """
        Execute an operation with automatic retry on retryable conflicts.

        Non-retryable errors propagate unchanged on the first occurrence.

        Args:
            operation: Async callable that takes a UnitOfWork parameter
            max_retries: Maximum number of retry attempts

        Returns:
            Result of the operation

        Raises:
            OptimisticLockException: If all retries fail
        """
        retries = self.config.max_retries if max_retries is None else max_retries
        last_error: RepositoryError | None = None

        for attempt in range(retries + 1):
            try:
                result = await self.execute_in_transaction(operation)
                if attempt > 0:
                    self.concurrency.record_retry_outcome(succeeded=True)
                    logger.info(f"Transaction succeeded after {attempt} retries")
                return result

            except RepositoryError as e:
                if not is_retryable(e):
                    raise
                last_error = e
                self.concurrency.record_conflict()

                if attempt < retries:
                    delay = self.concurrency.calculate_backoff_delay(attempt)
                    logger.warning(
                        f"Transaction attempt {attempt + 1}/{retries + 1} hit a conflict, "
                        f"retrying in {delay:.3f}s: {e}"
                    )
                    await asyncio.sleep(delay)

        self.concurrency.record_retry_outcome(succeeded=False)
        logger.error(f"All {retries + 1} transaction attempts failed: {last_error}")
        raise OptimisticLockException(
            entity_type=getattr(last_error, "entity_type", "Unknown"),
            entity_id=getattr(last_error, "identifier", "unknown"),
            retries=retries,
        ) from last_error
