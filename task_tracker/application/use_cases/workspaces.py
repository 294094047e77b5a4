"""
Workspace Use Cases

Implements workspace creation and membership management.
"""

from dataclasses import dataclass
from uuid import UUID

from task_tracker.application.dtos import WorkspaceDto, WorkspaceMemberDto
from task_tracker.application.interfaces.unit_of_work import IUnitOfWork
from task_tracker.domain.entities import Workspace
from task_tracker.domain.enums import WorkspaceRole
from task_tracker.domain.value_objects import Slug

from .base import CONFLICT, TransactionalUseCase, UseCaseResponse
from .base_request import BaseRequestDTO, missing_actor

_ROLES = {role.value for role in WorkspaceRole}


def _role_error(role: str) -> str | None:
    if role not in _ROLES:
        return f"Invalid role: {role}"
    return None


# Request DTOs
@dataclass(kw_only=True)
class CreateWorkspaceRequest(BaseRequestDTO):
    """Request to create a workspace owned by the acting user.

    The slug is derived from the name when not given.
    """

    name: str
    slug: str | None = None
    description: str | None = None


@dataclass(kw_only=True)
class AddWorkspaceMemberRequest(BaseRequestDTO):
    workspace_id: UUID
    user_id: UUID
    role: str = WorkspaceRole.MEMBER.value


@dataclass(kw_only=True)
class RemoveWorkspaceMemberRequest(BaseRequestDTO):
    workspace_id: UUID
    user_id: UUID


@dataclass(kw_only=True)
class ChangeMemberRoleRequest(BaseRequestDTO):
    workspace_id: UUID
    user_id: UUID
    role: str


# Use Case Implementations
class CreateWorkspaceUseCase(TransactionalUseCase[CreateWorkspaceRequest, UseCaseResponse]):
    """
    Use case for creating workspaces.

    The acting user becomes the owner and the first member.
    """

    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "CreateWorkspaceUseCase")

    async def validate(self, request: CreateWorkspaceRequest) -> str | None:
        return missing_actor(request)

    async def process(self, request: CreateWorkspaceRequest) -> UseCaseResponse:
        owner_id: UUID = request.acting_user_id  # type: ignore[assignment]

        owner = await self.unit_of_work.users.get_by_id(owner_id)
        if owner is None:
            return UseCaseResponse.not_found("User", owner_id, request.request_id)

        slug_result = Slug.create(request.slug or request.name)
        if slug_result.is_failure:
            return UseCaseResponse.from_domain_error(slug_result.error, request.request_id)

        if await self.unit_of_work.workspaces.exists(slug_result.value):
            return UseCaseResponse.error_response(
                f"Workspace slug '{slug_result.value}' is already taken",
                request.request_id,
                CONFLICT,
            )

        workspace_result = Workspace.create(
            request.name, slug_result.value, owner.id, description=request.description
        )
        if workspace_result.is_failure:
            return UseCaseResponse.from_domain_error(workspace_result.error, request.request_id)
        workspace = workspace_result.value

        member_result = workspace.add_member(owner.id, WorkspaceRole.OWNER, owner.id)
        if member_result.is_failure:
            return UseCaseResponse.from_domain_error(member_result.error, request.request_id)

        await self.unit_of_work.workspaces.add(workspace)
        self.unit_of_work.register_events(workspace_result.events)

        return UseCaseResponse.success_response(
            WorkspaceDto.from_entity(workspace), request.request_id
        )


class AddWorkspaceMemberUseCase(TransactionalUseCase[AddWorkspaceMemberRequest, UseCaseResponse]):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "AddWorkspaceMemberUseCase")

    async def validate(self, request: AddWorkspaceMemberRequest) -> str | None:
        return missing_actor(request) or _role_error(request.role)

    async def process(self, request: AddWorkspaceMemberRequest) -> UseCaseResponse:
        workspace = await self.unit_of_work.workspaces.get_by_id(request.workspace_id)
        if workspace is None:
            return UseCaseResponse.not_found("Workspace", request.workspace_id, request.request_id)

        user = await self.unit_of_work.users.get_by_id(request.user_id)
        if user is None:
            return UseCaseResponse.not_found("User", request.user_id, request.request_id)

        result = workspace.add_member(
            user.id, WorkspaceRole(request.role), request.acting_user_id  # type: ignore[arg-type]
        )
        if result.is_failure:
            return UseCaseResponse.from_domain_error(result.error, request.request_id)

        return UseCaseResponse.success_response(
            WorkspaceMemberDto.from_entity(result.value), request.request_id
        )


class RemoveWorkspaceMemberUseCase(
    TransactionalUseCase[RemoveWorkspaceMemberRequest, UseCaseResponse]
):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "RemoveWorkspaceMemberUseCase")

    async def validate(self, request: RemoveWorkspaceMemberRequest) -> str | None:
        return missing_actor(request)

    async def process(self, request: RemoveWorkspaceMemberRequest) -> UseCaseResponse:
        workspace = await self.unit_of_work.workspaces.get_by_id(request.workspace_id)
        if workspace is None:
            return UseCaseResponse.not_found("Workspace", request.workspace_id, request.request_id)

        result = workspace.remove_member(request.user_id, request.acting_user_id)  # type: ignore[arg-type]
        if result.is_failure:
            return UseCaseResponse.from_domain_error(result.error, request.request_id)

        return UseCaseResponse.success_response(None, request.request_id)


class ChangeMemberRoleUseCase(TransactionalUseCase[ChangeMemberRoleRequest, UseCaseResponse]):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "ChangeMemberRoleUseCase")

    async def validate(self, request: ChangeMemberRoleRequest) -> str | None:
        return missing_actor(request) or _role_error(request.role)

    async def process(self, request: ChangeMemberRoleRequest) -> UseCaseResponse:
        workspace = await self.unit_of_work.workspaces.get_by_id(request.workspace_id)
        if workspace is None:
            return UseCaseResponse.not_found("Workspace", request.workspace_id, request.request_id)

        result = workspace.change_member_role(
            request.user_id, WorkspaceRole(request.role), request.acting_user_id  # type: ignore[arg-type]
        )
        if result.is_failure:
            return UseCaseResponse.from_domain_error(result.error, request.request_id)

        member = workspace.get_member(request.user_id)
        return UseCaseResponse.success_response(
            WorkspaceMemberDto.from_entity(member), request.request_id  # type: ignore[arg-type]
        )
