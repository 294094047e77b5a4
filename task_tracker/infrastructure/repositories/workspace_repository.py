"""In-memory workspace repository. Workspaces are stored with their members."""

from uuid import UUID

from task_tracker.application.interfaces.repositories import IWorkspaceRepository
from task_tracker.domain.entities import Workspace
from task_tracker.domain.value_objects import Slug
from task_tracker.infrastructure.database import WORKSPACES

from .base import InMemoryRepository


class InMemoryWorkspaceRepository(InMemoryRepository[Workspace], IWorkspaceRepository):
    table = WORKSPACES

    async def get_by_slug(self, slug: Slug) -> Workspace | None:
        return self._first(lambda w: w.slug == slug.value)

    async def exists(self, slug: Slug) -> bool:
        return await self.get_by_slug(slug) is not None

    async def get_by_user_id(self, user_id: UUID) -> list[Workspace]:
        workspaces = self._query(lambda w: w.is_member(user_id))
        return sorted(workspaces, key=lambda w: w.created_at)
