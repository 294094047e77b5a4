"""Unit tests for the transaction manager's retry loop."""

from uuid import uuid4

import pytest

from task_tracker.application.config import ConcurrencyConfig
from task_tracker.application.interfaces.exceptions import ConcurrencyError, DuplicateEntityError
from task_tracker.domain.exceptions import OptimisticLockException
from task_tracker.domain.services import ConcurrencyService
from task_tracker.infrastructure.database import USERS, InMemoryDatabase
from task_tracker.infrastructure.repositories import (
    InMemoryTransactionManager,
    InMemoryUnitOfWorkFactory,
)


@pytest.fixture
def database():
    return InMemoryDatabase()


@pytest.fixture
def concurrency():
    return ConcurrencyService(base_delay=0.0, max_delay=0.0, jitter=False)


@pytest.fixture
def manager(database, concurrency):
    return InMemoryTransactionManager(
        InMemoryUnitOfWorkFactory(database),
        ConcurrencyConfig(max_retries=3, base_delay=0.0, max_delay=0.0, jitter=False),
        concurrency,
    )


def failing(times: int, error_factory):
    """Operation that raises for its first ``times`` attempts, recording each unit of work."""
    seen = []

    async def operation(uow):
        seen.append(uow)
        if len(seen) <= times:
            raise error_factory()
        return "done"

    operation.seen = seen
    return operation


@pytest.mark.unit
class TestExecuteInTransaction:
    @pytest.mark.asyncio
    async def test_commits(self, manager, database, user):
        async def operation(uow):
            await uow.users.add(user)
            return user.id

        assert await manager.execute_in_transaction(operation) == user.id
        assert database.get(USERS, user.id) is not None

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, manager, database, user):
        async def operation(uow):
            await uow.users.add(user)
            raise ValueError("nope")

        with pytest.raises(ValueError):
            await manager.execute_in_transaction(operation)

        assert database.get(USERS, user.id) is None


@pytest.mark.unit
class TestExecuteWithRetry:
    @pytest.mark.asyncio
    async def test_retries_conflicts_with_fresh_unit_of_work(self, manager, concurrency):
        operation = failing(2, lambda: ConcurrencyError("Project", uuid4()))

        assert await manager.execute_with_retry(operation) == "done"

        assert len(operation.seen) == 3
        assert len({id(uow) for uow in operation.seen}) == 3
        assert concurrency.get_metrics() == {
            "version_conflicts": 2,
            "successful_retries": 1,
            "failed_retries": 0,
        }

    @pytest.mark.asyncio
    async def test_retryable_duplicate_is_retried(self, manager):
        operation = failing(
            1, lambda: DuplicateEntityError("TaskItem", uuid4(), index="task_number", retryable=True)
        )

        assert await manager.execute_with_retry(operation) == "done"
        assert len(operation.seen) == 2

    @pytest.mark.asyncio
    async def test_non_retryable_error_propagates_immediately(self, manager):
        operation = failing(5, lambda: DuplicateEntityError("User", "alice", index="user_email"))

        with pytest.raises(DuplicateEntityError):
            await manager.execute_with_retry(operation)

        assert len(operation.seen) == 1

    @pytest.mark.asyncio
    async def test_other_errors_propagate_immediately(self, manager):
        operation = failing(5, lambda: KeyError("x"))

        with pytest.raises(KeyError):
            await manager.execute_with_retry(operation)

        assert len(operation.seen) == 1

    @pytest.mark.asyncio
    async def test_exhausted_retries(self, manager, concurrency):
        project_id = uuid4()
        operation = failing(10, lambda: ConcurrencyError("Project", project_id))

        with pytest.raises(OptimisticLockException) as exc_info:
            await manager.execute_with_retry(operation)

        assert len(operation.seen) == 4
        assert isinstance(exc_info.value.__cause__, ConcurrencyError)
        assert concurrency.get_metrics()["failed_retries"] == 1

    @pytest.mark.asyncio
    async def test_max_retries_override(self, manager):
        operation = failing(10, lambda: ConcurrencyError("Project", uuid4()))

        with pytest.raises(OptimisticLockException):
            await manager.execute_with_retry(operation, max_retries=0)

        assert len(operation.seen) == 1
