"""
In-memory project repository.

A project row holds the whole aggregate (statuses with their transitions,
custom field definitions, sprints and labels), so every read returns the
full workflow graph.
"""

from uuid import UUID

from task_tracker.application.interfaces.repositories import IProjectRepository
from task_tracker.domain.entities import Project
from task_tracker.domain.value_objects import Slug
from task_tracker.infrastructure.database import PROJECTS

from .base import InMemoryRepository


class InMemoryProjectRepository(InMemoryRepository[Project], IProjectRepository):
    table = PROJECTS

    async def get_with_statuses(self, project_id: UUID) -> Project | None:
        return await self.get_by_id(project_id)

    async def get_by_slug(self, workspace_id: UUID, slug: Slug) -> Project | None:
        return self._first(lambda p: p.workspace_id == workspace_id and p.slug == slug.value)

    async def get_by_workspace_id(self, workspace_id: UUID) -> list[Project]:
        projects = self._query(lambda p: p.workspace_id == workspace_id)
        return sorted(projects, key=lambda p: p.created_at)

    async def exists(self, workspace_id: UUID, slug: Slug) -> bool:
        return await self.get_by_slug(workspace_id, slug) is not None

    async def prefix_exists(self, workspace_id: UUID, prefix: str) -> bool:
        wanted = prefix.strip().upper()
        return self._first(lambda p: p.workspace_id == workspace_id and p.prefix == wanted) is not None
