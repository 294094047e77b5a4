"""Workspace Entity - tenant root owning projects and memberships"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from ..enums import WorkspaceRole
from ..events import WorkspaceCreated
from ..result import Result
from ..value_objects import Slug
from .base import AuditableEntity, utc_now

MAX_WORKSPACE_NAME_LENGTH = 100


def _validate_workspace_name(name: str | None) -> str | None:
    if name is None or not name.strip():
        return "Workspace name cannot be empty"
    if len(name) > MAX_WORKSPACE_NAME_LENGTH:
        return f"Workspace name cannot exceed {MAX_WORKSPACE_NAME_LENGTH} characters"
    return None


@dataclass(kw_only=True, eq=False)
class WorkspaceMember(AuditableEntity):
    """A user's membership in a workspace."""

    workspace_id: UUID
    user_id: UUID
    role: WorkspaceRole = WorkspaceRole.MEMBER
    joined_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls, workspace_id: UUID, user_id: UUID, role: WorkspaceRole, created_by: UUID
    ) -> WorkspaceMember:
        member = cls(workspace_id=workspace_id, user_id=user_id, role=role)
        member.set_created(created_by)
        return member

    @property
    def is_owner(self) -> bool:
        return self.role == WorkspaceRole.OWNER

    def change_role(self, new_role: WorkspaceRole, changed_by: UUID) -> Result[None]:
        """Change the member's role. An owner can never be demoted."""
        if self.is_owner and new_role != WorkspaceRole.OWNER:
            return Result.business_rule("Cannot demote the workspace owner")

        self.role = new_role
        self.set_updated(changed_by)
        return Result.success()


@dataclass(kw_only=True, eq=False)
class Workspace(AuditableEntity):
    """
    Workspace aggregate.

    Memberships are soft-deleted on removal, so ``members`` keeps the full
    membership record; use ``active_members`` for the current roster.
    """

    name: str
    slug: str
    owner_id: UUID
    description: str | None = None
    logo_url: str | None = None

    members: list[WorkspaceMember] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        name: str,
        slug: Slug,
        owner_id: UUID,
        description: str | None = None,
    ) -> Result[Workspace]:
        error = _validate_workspace_name(name)
        if error:
            return Result.failure(error)

        workspace = cls(
            name=name.strip(),
            slug=slug.value,
            owner_id=owner_id,
            description=description.strip() if description else None,
        )
        workspace.set_created(owner_id)

        event = WorkspaceCreated(
            workspace_id=workspace.id,
            name=workspace.name,
            slug=workspace.slug,
            owner_id=owner_id,
        )
        return Result.success(workspace, events=[event])

    def update(
        self,
        name: str,
        description: str | None,
        logo_url: str | None,
        updated_by: UUID,
    ) -> Result[None]:
        error = _validate_workspace_name(name)
        if error:
            return Result.failure(error)

        self.name = name.strip()
        self.description = description.strip() if description else None
        self.logo_url = logo_url.strip() if logo_url else None
        self.set_updated(updated_by)
        return Result.success()

    @property
    def active_members(self) -> list[WorkspaceMember]:
        return [m for m in self.members if not m.is_deleted]

    def get_member(self, user_id: UUID) -> WorkspaceMember | None:
        """Active membership for ``user_id``, if any."""
        return next((m for m in self.active_members if m.user_id == user_id), None)

    def is_member(self, user_id: UUID) -> bool:
        return self.get_member(user_id) is not None

    def add_member(
        self, user_id: UUID, role: WorkspaceRole, added_by: UUID
    ) -> Result[WorkspaceMember]:
        if self.is_member(user_id):
            return Result.business_rule("User is already a member of this workspace")

        member = WorkspaceMember.create(self.id, user_id, role, added_by)
        self.members.append(member)
        self.set_updated(added_by)
        return Result.success(member)

    def remove_member(self, user_id: UUID, removed_by: UUID) -> Result[None]:
        member = self.get_member(user_id)
        if member is None:
            return Result.business_rule("User is not a member of this workspace")

        if member.is_owner:
            return Result.business_rule("Cannot remove the workspace owner")

        member.mark_as_deleted(removed_by)
        self.set_updated(removed_by)
        return Result.success()

    def change_member_role(
        self, user_id: UUID, new_role: WorkspaceRole, changed_by: UUID
    ) -> Result[None]:
        member = self.get_member(user_id)
        if member is None:
            return Result.business_rule("User is not a member of this workspace")

        result = member.change_role(new_role, changed_by)
        if result.is_success:
            self.set_updated(changed_by)
        return result

    def __str__(self) -> str:
        return f"Workspace({self.name} /{self.slug})"
