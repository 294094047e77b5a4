"""
In-memory task repository.

Task rows carry their comments, attachments, label links and history.
Listings are ordered newest first: by creation time, then by task number
for tasks created within the same instant.
"""

from uuid import UUID

from task_tracker.application.interfaces.repositories import ITaskRepository
from task_tracker.domain.entities import TaskItem
from task_tracker.domain.value_objects import FriendlyId
from task_tracker.infrastructure.database import TASKS

from .base import InMemoryRepository


def _newest_first(tasks: list[TaskItem]) -> list[TaskItem]:
    return sorted(tasks, key=lambda t: (t.created_at, t.sequence_number), reverse=True)


def _matches_search(task: TaskItem, term: str) -> bool:
    needle = term.lower()
    if needle in task.title.lower():
        return True
    return task.description is not None and needle in task.description.lower()


class InMemoryTaskRepository(InMemoryRepository[TaskItem], ITaskRepository):
    table = TASKS

    async def get_by_friendly_id(
        self, friendly_id: FriendlyId, project_id: UUID | None = None
    ) -> TaskItem | None:
        # Prefixes are unique per workspace only; unscoped, the earliest task wins
        return self._first(
            lambda t: t.friendly_id == friendly_id and (project_id is None or t.project_id == project_id)
        )

    async def get_by_project_id(self, project_id: UUID) -> list[TaskItem]:
        return _newest_first(self._query(lambda t: t.project_id == project_id))

    async def get_by_sprint_id(self, sprint_id: UUID) -> list[TaskItem]:
        return _newest_first(self._query(lambda t: t.sprint_id == sprint_id))

    async def get_by_assignee_id(self, assignee_id: UUID) -> list[TaskItem]:
        return _newest_first(self._query(lambda t: t.assignee_id == assignee_id))

    async def get_subtasks(self, parent_task_id: UUID) -> list[TaskItem]:
        subtasks = self._query(lambda t: t.parent_task_id == parent_task_id)
        return sorted(subtasks, key=lambda t: t.sequence_number)

    async def get_paged(
        self,
        project_id: UUID,
        page: int,
        page_size: int,
        status_id: UUID | None = None,
        assignee_id: UUID | None = None,
        sprint_id: UUID | None = None,
        search_term: str | None = None,
    ) -> tuple[list[TaskItem], int]:
        term = search_term.strip() if search_term else ""

        def matches(task: TaskItem) -> bool:
            return (
                task.project_id == project_id
                and (status_id is None or task.status_id == status_id)
                and (assignee_id is None or task.assignee_id == assignee_id)
                and (sprint_id is None or task.sprint_id == sprint_id)
                and (not term or _matches_search(task, term))
            )

        tasks = _newest_first(self._query(matches))
        start = (page - 1) * page_size
        return tasks[start : start + page_size], len(tasks)
