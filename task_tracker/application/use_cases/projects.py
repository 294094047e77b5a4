"""
Project Use Cases

Implements project creation and maintenance of the project-owned parts of
the aggregate: the workflow graph and sprints.
"""

from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from task_tracker.application.dtos import ProjectDto, SprintDto, StatusTransitionDto, WorkflowStatusDto
from task_tracker.application.interfaces.unit_of_work import IUnitOfWork
from task_tracker.domain.entities import Project, Sprint, WorkflowStatus
from task_tracker.domain.entities.workflow import DEFAULT_STATUS_COLOR
from task_tracker.domain.result import Result
from task_tracker.domain.enums import StatusCategory
from task_tracker.domain.value_objects import Slug

from .base import CONFLICT, TransactionalUseCase, UseCaseResponse
from .base_request import BaseRequestDTO, missing_actor

_CATEGORIES = {category.value for category in StatusCategory}


# Request DTOs
@dataclass(kw_only=True)
class CreateProjectRequest(BaseRequestDTO):
    """Request to create a project. The slug is derived from the name when not given."""

    workspace_id: UUID
    name: str
    prefix: str
    slug: str | None = None
    description: str | None = None


@dataclass(kw_only=True)
class AddWorkflowStatusRequest(BaseRequestDTO):
    """Request to add a status; ``order`` defaults to the end of the workflow."""

    project_id: UUID
    name: str
    category: str
    order: int | None = None
    color: str = DEFAULT_STATUS_COLOR
    description: str | None = None
    is_default: bool = False


@dataclass(kw_only=True)
class AddStatusTransitionRequest(BaseRequestDTO):
    project_id: UUID
    from_status_id: UUID
    to_status_id: UUID
    name: str | None = None
    auto_assign_user_id: UUID | None = None
    requires_comment: bool = False


@dataclass(kw_only=True)
class CreateSprintRequest(BaseRequestDTO):
    project_id: UUID
    name: str
    start_date: datetime
    end_date: datetime
    goal: str | None = None


@dataclass(kw_only=True)
class SprintLifecycleRequest(BaseRequestDTO):
    """Request to start or complete a sprint."""

    project_id: UUID
    sprint_id: UUID


class _ProjectUseCase(TransactionalUseCase):
    """Shared project lookup for use cases operating inside a project."""

    async def _load_project(self, project_id: UUID) -> Project | None:
        return await self.unit_of_work.projects.get_with_statuses(project_id)


# Use Case Implementations
class CreateProjectUseCase(TransactionalUseCase[CreateProjectRequest, UseCaseResponse]):
    """
    Use case for creating projects.

    Slug and task prefix must both be unique within the workspace.
    """

    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "CreateProjectUseCase")

    async def validate(self, request: CreateProjectRequest) -> str | None:
        return missing_actor(request)

    async def process(self, request: CreateProjectRequest) -> UseCaseResponse:
        workspace = await self.unit_of_work.workspaces.get_by_id(request.workspace_id)
        if workspace is None:
            return UseCaseResponse.not_found("Workspace", request.workspace_id, request.request_id)

        slug_result = Slug.create(request.slug or request.name)
        if slug_result.is_failure:
            return UseCaseResponse.from_domain_error(slug_result.error, request.request_id)
        slug = slug_result.value

        if await self.unit_of_work.projects.exists(workspace.id, slug):
            return UseCaseResponse.error_response(
                f"Project slug '{slug}' is already taken in this workspace",
                request.request_id,
                CONFLICT,
            )

        project_result = Project.create(
            workspace,
            request.name,
            slug,
            request.prefix,
            request.acting_user_id,  # type: ignore[arg-type]
            description=request.description,
        )
        if project_result.is_failure:
            return UseCaseResponse.from_domain_error(project_result.error, request.request_id)
        project = project_result.value

        if await self.unit_of_work.projects.prefix_exists(workspace.id, project.prefix):
            return UseCaseResponse.error_response(
                f"Project prefix '{project.prefix}' is already taken in this workspace",
                request.request_id,
                CONFLICT,
            )

        await self.unit_of_work.projects.add(project)
        self.unit_of_work.register_events(project_result.events)

        return UseCaseResponse.success_response(ProjectDto.from_entity(project), request.request_id)


class AddWorkflowStatusUseCase(_ProjectUseCase):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "AddWorkflowStatusUseCase")

    async def validate(self, request: AddWorkflowStatusRequest) -> str | None:
        if request.category not in _CATEGORIES:
            return f"Invalid status category: {request.category}"
        return missing_actor(request)

    async def process(self, request: AddWorkflowStatusRequest) -> UseCaseResponse:
        project = await self._load_project(request.project_id)
        if project is None:
            return UseCaseResponse.not_found("Project", request.project_id, request.request_id)

        order = request.order if request.order is not None else len(project.statuses)
        status_result = WorkflowStatus.create(
            project,
            request.name,
            StatusCategory(request.category),
            order,
            request.acting_user_id,  # type: ignore[arg-type]
            description=request.description,
            color=request.color,
            is_default=request.is_default,
        )
        if status_result.is_failure:
            return UseCaseResponse.from_domain_error(status_result.error, request.request_id)

        added = project.add_status(status_result.value)
        if added.is_failure:
            return UseCaseResponse.from_domain_error(added.error, request.request_id)

        return UseCaseResponse.success_response(
            WorkflowStatusDto.from_entity(status_result.value, project), request.request_id
        )


class AddStatusTransitionUseCase(_ProjectUseCase):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "AddStatusTransitionUseCase")

    async def validate(self, request: AddStatusTransitionRequest) -> str | None:
        return missing_actor(request)

    async def process(self, request: AddStatusTransitionRequest) -> UseCaseResponse:
        project = await self._load_project(request.project_id)
        if project is None:
            return UseCaseResponse.not_found("Project", request.project_id, request.request_id)

        if request.auto_assign_user_id is not None:
            user = await self.unit_of_work.users.get_by_id(request.auto_assign_user_id)
            if user is None:
                return UseCaseResponse.not_found(
                    "User", request.auto_assign_user_id, request.request_id
                )

        result = project.add_transition(
            request.from_status_id,
            request.to_status_id,
            request.acting_user_id,  # type: ignore[arg-type]
            name=request.name,
            auto_assign_user_id=request.auto_assign_user_id,
            requires_comment=request.requires_comment,
        )
        if result.is_failure:
            return UseCaseResponse.from_domain_error(result.error, request.request_id)

        target = project.get_status(request.to_status_id)
        return UseCaseResponse.success_response(
            StatusTransitionDto.from_entity(result.value, target.name),  # type: ignore[union-attr]
            request.request_id,
        )


class CreateSprintUseCase(_ProjectUseCase):
    def __init__(self, unit_of_work: IUnitOfWork, sprints_enabled: bool = True) -> None:
        super().__init__(unit_of_work, "CreateSprintUseCase")
        self.sprints_enabled = sprints_enabled

    async def validate(self, request: CreateSprintRequest) -> str | None:
        if not self.sprints_enabled:
            return "Sprints are disabled"
        return missing_actor(request)

    async def process(self, request: CreateSprintRequest) -> UseCaseResponse:
        project = await self._load_project(request.project_id)
        if project is None:
            return UseCaseResponse.not_found("Project", request.project_id, request.request_id)

        sprint_result = Sprint.create(
            project,
            request.name,
            request.start_date,
            request.end_date,
            request.acting_user_id,  # type: ignore[arg-type]
            goal=request.goal,
        )
        if sprint_result.is_failure:
            return UseCaseResponse.from_domain_error(sprint_result.error, request.request_id)

        added = project.add_sprint(sprint_result.value)
        if added.is_failure:
            return UseCaseResponse.from_domain_error(added.error, request.request_id)

        return UseCaseResponse.success_response(
            SprintDto.from_entity(sprint_result.value), request.request_id
        )


class _SprintLifecycleUseCase(_ProjectUseCase):
    async def validate(self, request: SprintLifecycleRequest) -> str | None:
        return missing_actor(request)

    async def process(self, request: SprintLifecycleRequest) -> UseCaseResponse:
        project = await self._load_project(request.project_id)
        if project is None:
            return UseCaseResponse.not_found("Project", request.project_id, request.request_id)

        sprint = project.get_sprint(request.sprint_id)
        if sprint is None:
            return UseCaseResponse.not_found("Sprint", request.sprint_id, request.request_id)

        result = self._transition(sprint, request.acting_user_id)  # type: ignore[arg-type]
        if result.is_failure:
            return UseCaseResponse.from_domain_error(result.error, request.request_id)

        return UseCaseResponse.success_response(SprintDto.from_entity(sprint), request.request_id)

    @abstractmethod
    def _transition(self, sprint: Sprint, acting_user_id: UUID) -> Result[None]:
        """Apply the lifecycle step to ``sprint``."""


class StartSprintUseCase(_SprintLifecycleUseCase):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "StartSprintUseCase")

    def _transition(self, sprint: Sprint, acting_user_id: UUID) -> Result[None]:
        return sprint.start(acting_user_id)


class CompleteSprintUseCase(_SprintLifecycleUseCase):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "CompleteSprintUseCase")

    def _transition(self, sprint: Sprint, acting_user_id: UUID) -> Result[None]:
        return sprint.complete(acting_user_id)
