"""
Integration tests for concurrent task creation.

Each worker thread runs its own event loop against one shared container, so
units of work genuinely race for the project's task counter.
"""

import asyncio

import pytest

from task_tracker.application.use_cases import (
    CreateTaskRequest,
    CreateTaskUseCase,
    GetTaskRequest,
    GetTaskUseCase,
)
from task_tracker.domain.services import ConcurrencyService
from task_tracker.infrastructure.database import PROJECTS, InMemoryDatabase

WORKERS = 8
TASKS_PER_WORKER = 5


@pytest.mark.integration
class TestConcurrentTaskCreation:
    @pytest.mark.asyncio
    async def test_task_numbers_are_unique_and_gapless(self, api, container):
        seeded = await api.seeded()

        def create_batch(worker: int) -> list:
            async def run():
                responses = []
                for i in range(TASKS_PER_WORKER):
                    request = CreateTaskRequest(
                        project_id=seeded.project.id,
                        title=f"Worker {worker} task {i}",
                        acting_user_id=seeded.owner.id,
                    )
                    responses.append(await container.get(CreateTaskUseCase).execute(request))
                return responses

            return asyncio.run(run())

        batches = await asyncio.gather(
            *(asyncio.to_thread(create_batch, worker) for worker in range(WORKERS))
        )

        responses = [r for batch in batches for r in batch]
        total = WORKERS * TASKS_PER_WORKER

        assert all(r.success for r in responses), [r.error for r in responses if not r.success]
        assert sorted(int(r.data.friendly_id.split("-")[1]) for r in responses) == list(range(1, total + 1))
        assert {r.data.friendly_id for r in responses} == {f"ENG-{n}" for n in range(1, total + 1)}

        project = container.get(InMemoryDatabase).get(PROJECTS, seeded.project.id)
        assert project.next_task_number == total + 1

        metrics = container.get(ConcurrencyService).get_metrics()
        assert metrics["failed_retries"] == 0

    @pytest.mark.asyncio
    async def test_each_task_resolves_by_friendly_id(self, api):
        seeded = await api.seeded()
        created = await asyncio.gather(
            *(api.task(seeded.project.id, seeded.owner.id, f"Task {i}") for i in range(5))
        )

        for task in created:
            fetched = await api.ok(GetTaskUseCase, GetTaskRequest(friendly_id=task.friendly_id))
            assert fetched.id == task.id
