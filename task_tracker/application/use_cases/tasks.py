"""
Task Use Cases

Implements task creation, workflow moves, field updates, comments and the
read-side queries over tasks.

Task creation consumes the project's task-number sequence. It runs through
the transaction manager so that a creation that loses a race for a number
is re-run against fresh state instead of failing.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from task_tracker.application.dtos import CommentDto, PagedResult, TaskDto, TaskHistoryDto
from task_tracker.application.interfaces.unit_of_work import ITransactionManager, IUnitOfWork
from task_tracker.domain.entities import Project, TaskItem
from task_tracker.domain.entities.task import MAX_TITLE_LENGTH
from task_tracker.domain.enums import TaskPriority, TaskType
from task_tracker.domain.events import DomainEvent
from task_tracker.domain.result import Result
from task_tracker.domain.value_objects import FriendlyId

from .base import TransactionalUseCase, UseCase, UseCaseResponse
from .base_request import BaseRequestDTO, missing_actor

MAX_DESCRIPTION_LENGTH = 50000
DEFAULT_PAGE_SIZE = 20

_PRIORITIES = {p.value for p in TaskPriority}
_TYPES = {t.value for t in TaskType}


def _title_error(title: str | None) -> str | None:
    if title is None or not title.strip():
        return "Title is required"
    if len(title) > MAX_TITLE_LENGTH:
        return f"Title cannot exceed {MAX_TITLE_LENGTH} characters"
    return None


def _description_error(description: str | None) -> str | None:
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        return f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
    return None


def _due_date_error(due_date: datetime | None) -> str | None:
    # Naive datetimes are taken as UTC; one minute of clock skew is tolerated.
    if due_date is None:
        return None
    value = due_date if due_date.tzinfo else due_date.replace(tzinfo=UTC)
    if value < datetime.now(UTC) - timedelta(minutes=1):
        return "Due date cannot be in the past"
    return None


def _story_points_error(story_points: int | None) -> str | None:
    if story_points is not None and story_points < 0:
        return "Story points must be non-negative"
    return None


def _first_error(*errors: str | None) -> str | None:
    return next((e for e in errors if e), None)


def _custom_field_definitions(project: Project) -> list | None:
    """Definitions to check values against; projects without a schema accept free-form values."""
    return list(project.custom_fields) if project.custom_fields else None


# Request DTOs
@dataclass(kw_only=True)
class CreateTaskRequest(BaseRequestDTO):
    """Request to create a task; the acting user is the reporter."""

    project_id: UUID
    title: str
    task_type: str = TaskType.TASK.value
    priority: str = TaskPriority.NONE.value
    description: str | None = None
    assignee_id: UUID | None = None
    parent_task_id: UUID | None = None
    sprint_id: UUID | None = None
    due_date: datetime | None = None
    story_points: int | None = None
    custom_fields: dict[str, Any] | None = None


@dataclass(kw_only=True)
class ChangeTaskStatusRequest(BaseRequestDTO):
    task_id: UUID
    new_status_id: UUID
    comment: str | None = None


@dataclass(kw_only=True)
class UpdateTaskRequest(BaseRequestDTO):
    """
    Request to update any subset of a task's fields.

    Fields left as None are not touched. To clear an optional field use the
    matching ``unassign``/``clear_*`` flag.
    """

    task_id: UUID
    title: str | None = None
    description: str | None = None
    priority: str | None = None
    assignee_id: UUID | None = None
    unassign: bool = False
    due_date: datetime | None = None
    clear_due_date: bool = False
    story_points: int | None = None
    clear_story_points: bool = False
    sprint_id: UUID | None = None
    clear_sprint: bool = False
    custom_fields: dict[str, Any] | None = None


@dataclass(kw_only=True)
class AddTaskCommentRequest(BaseRequestDTO):
    task_id: UUID
    content: str


@dataclass(kw_only=True)
class GetTaskRequest(BaseRequestDTO):
    """Look a task up by id or by its friendly id (e.g. ``ENG-42``).

    Project prefixes repeat across workspaces, so a friendly id lookup can be
    narrowed to one workspace or one project.
    """

    task_id: UUID | None = None
    friendly_id: str | None = None
    workspace_id: UUID | None = None
    project_id: UUID | None = None


@dataclass(kw_only=True)
class GetTaskHistoryRequest(BaseRequestDTO):
    task_id: UUID


@dataclass(kw_only=True)
class ListTasksRequest(BaseRequestDTO):
    project_id: UUID
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    status_id: UUID | None = None
    assignee_id: UUID | None = None
    sprint_id: UUID | None = None
    search_term: str | None = None


# Use Case Implementations
class CreateTaskUseCase(UseCase[CreateTaskRequest, UseCaseResponse]):
    """
    Use case for creating tasks.

    Resolves the project's initial status, the reporter and the optional
    assignee, parent task and sprint, then applies the optional due date,
    story points and custom fields. The whole operation is re-run on a
    storage conflict, so concurrent creations in one project always receive
    distinct task numbers.
    """

    def __init__(
        self,
        transaction_manager: ITransactionManager,
        custom_fields_enabled: bool = True,
        sprints_enabled: bool = True,
    ) -> None:
        super().__init__("CreateTaskUseCase")
        self.transaction_manager = transaction_manager
        self.custom_fields_enabled = custom_fields_enabled
        self.sprints_enabled = sprints_enabled

    async def validate(self, request: CreateTaskRequest) -> str | None:
        if request.task_type not in _TYPES:
            return "Invalid task type"
        if request.priority not in _PRIORITIES:
            return "Invalid priority"
        if request.custom_fields and not self.custom_fields_enabled:
            return "Custom fields are disabled"
        if request.sprint_id is not None and not self.sprints_enabled:
            return "Sprints are disabled"
        return _first_error(
            missing_actor(request),
            _title_error(request.title),
            _description_error(request.description),
            _story_points_error(request.story_points),
            _due_date_error(request.due_date),
        )

    async def process(self, request: CreateTaskRequest) -> UseCaseResponse:
        async def operation(uow: IUnitOfWork) -> UseCaseResponse:
            response = await self._create(uow, request)
            if not response.success:
                await uow.rollback()
            return response

        return await self.transaction_manager.execute_with_retry(operation)

    async def _create(self, uow: IUnitOfWork, request: CreateTaskRequest) -> UseCaseResponse:
        request_id = request.request_id
        actor: UUID = request.acting_user_id  # type: ignore[assignment]

        project = await uow.projects.get_with_statuses(request.project_id)
        if project is None:
            return UseCaseResponse.not_found("Project", request.project_id, request_id)

        reporter = await uow.users.get_by_id(actor)
        if reporter is None:
            return UseCaseResponse.not_found("User", actor, request_id)

        status_result = project.initial_status()
        if status_result.is_failure:
            return UseCaseResponse.from_domain_error(status_result.error, request_id)

        assignee = None
        if request.assignee_id is not None:
            assignee = await uow.users.get_by_id(request.assignee_id)
            if assignee is None:
                return UseCaseResponse.not_found("User", request.assignee_id, request_id)

        parent_task = None
        if request.parent_task_id is not None:
            parent_task = await uow.tasks.get_by_id(request.parent_task_id)
            if parent_task is None:
                return UseCaseResponse.not_found("Task", request.parent_task_id, request_id)

        sprint = None
        if request.sprint_id is not None:
            sprint = project.get_sprint(request.sprint_id)
            if sprint is None:
                return UseCaseResponse.not_found("Sprint", request.sprint_id, request_id)

        task_result = TaskItem.create(
            project,
            request.title,
            status_result.value,
            reporter,
            TaskType(request.task_type),
            actor,
            description=request.description,
            priority=TaskPriority(request.priority),
            assignee=assignee,
            parent_task=parent_task,
        )
        if task_result.is_failure:
            return UseCaseResponse.from_domain_error(task_result.error, request_id)
        task = task_result.value

        optional_steps: list[Result[None]] = []
        if request.due_date is not None:
            optional_steps.append(task.set_due_date(request.due_date, actor))
        if request.story_points is not None:
            optional_steps.append(task.set_story_points(request.story_points, actor))
        if request.custom_fields:
            optional_steps.append(
                task.set_custom_fields(
                    request.custom_fields, actor, _custom_field_definitions(project)
                )
            )
        if sprint is not None:
            optional_steps.append(task.set_sprint(sprint, actor))
        if parent_task is not None:
            optional_steps.append(parent_task.add_subtask(task))

        failed = next((r for r in optional_steps if r.is_failure), None)
        if failed is not None:
            return UseCaseResponse.from_domain_error(failed.error, request_id)

        await uow.tasks.add(task)
        uow.register_events(task_result.events)

        self.logger.info(
            f"Created task {task.friendly_id}",
            extra={"request_id": str(request_id), "project_id": str(project.id)},
        )
        return UseCaseResponse.success_response(TaskDto.from_entity(task), request_id)


class ChangeTaskStatusUseCase(TransactionalUseCase[ChangeTaskStatusRequest, UseCaseResponse]):
    """
    Use case for moving a task through its project's workflow.

    A comment supplied with the move is also added to the task's comments.
    """

    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "ChangeTaskStatusUseCase")

    async def validate(self, request: ChangeTaskStatusRequest) -> str | None:
        return missing_actor(request)

    async def process(self, request: ChangeTaskStatusRequest) -> UseCaseResponse:
        actor: UUID = request.acting_user_id  # type: ignore[assignment]

        task = await self.unit_of_work.tasks.get_by_id(request.task_id)
        if task is None:
            return UseCaseResponse.not_found("Task", request.task_id, request.request_id)

        project = await self.unit_of_work.projects.get_with_statuses(task.project_id)
        if project is None:
            return UseCaseResponse.not_found("Project", task.project_id, request.request_id)

        new_status = project.get_status(request.new_status_id)
        if new_status is None:
            return UseCaseResponse.not_found("Status", request.new_status_id, request.request_id)

        result = task.change_status(project, new_status, actor, request.comment)
        if result.is_failure:
            return UseCaseResponse.from_domain_error(result.error, request.request_id)

        if task.assignee_id is not None and task.assignee_name is None:
            assignee = await self.unit_of_work.users.get_by_id(task.assignee_id)
            if assignee is not None:
                task.refresh_assignee_name(assignee)

        if request.comment and request.comment.strip():
            comment_result = task.add_comment(actor, request.comment, actor)
            if comment_result.is_failure:
                return UseCaseResponse.from_domain_error(comment_result.error, request.request_id)

        self.unit_of_work.register_events(result.events)
        return UseCaseResponse.success_response(TaskDto.from_entity(task), request.request_id)


class UpdateTaskUseCase(TransactionalUseCase[UpdateTaskRequest, UseCaseResponse]):
    """Use case for updating task fields. Every change is audited in history."""

    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "UpdateTaskUseCase")

    async def validate(self, request: UpdateTaskRequest) -> str | None:
        if request.priority is not None and request.priority not in _PRIORITIES:
            return "Invalid priority"
        if request.unassign and request.assignee_id is not None:
            return "Cannot assign and unassign in the same request"
        if request.clear_sprint and request.sprint_id is not None:
            return "Cannot set and clear the sprint in the same request"
        return _first_error(
            missing_actor(request),
            _title_error(request.title) if request.title is not None else None,
            _description_error(request.description),
            _story_points_error(request.story_points),
            _due_date_error(request.due_date),
        )

    async def process(self, request: UpdateTaskRequest) -> UseCaseResponse:
        actor: UUID = request.acting_user_id  # type: ignore[assignment]
        uow = self.unit_of_work

        task = await uow.tasks.get_by_id(request.task_id)
        if task is None:
            return UseCaseResponse.not_found("Task", request.task_id, request.request_id)

        results: list[Result[None]] = []

        if request.title is not None:
            results.append(task.update_title(request.title, actor))
        if request.description is not None:
            results.append(task.update_description(request.description, actor))
        if request.priority is not None:
            results.append(task.change_priority(TaskPriority(request.priority), actor))

        if request.unassign:
            results.append(task.assign(None, actor))
        elif request.assignee_id is not None:
            assignee = await uow.users.get_by_id(request.assignee_id)
            if assignee is None:
                return UseCaseResponse.not_found("User", request.assignee_id, request.request_id)
            results.append(task.assign(assignee, actor))

        if request.clear_due_date:
            results.append(task.set_due_date(None, actor))
        elif request.due_date is not None:
            results.append(task.set_due_date(request.due_date, actor))

        if request.clear_story_points:
            results.append(task.set_story_points(None, actor))
        elif request.story_points is not None:
            results.append(task.set_story_points(request.story_points, actor))

        project = None
        if request.sprint_id is not None or request.custom_fields is not None:
            project = await uow.projects.get_with_statuses(task.project_id)
            if project is None:
                return UseCaseResponse.not_found("Project", task.project_id, request.request_id)

        if request.clear_sprint:
            results.append(task.set_sprint(None, actor))
        elif request.sprint_id is not None:
            sprint = project.get_sprint(request.sprint_id)  # type: ignore[union-attr]
            if sprint is None:
                return UseCaseResponse.not_found("Sprint", request.sprint_id, request.request_id)
            results.append(task.set_sprint(sprint, actor))

        if request.custom_fields is not None:
            results.append(
                task.set_custom_fields(
                    request.custom_fields, actor, _custom_field_definitions(project)  # type: ignore[arg-type]
                )
            )

        failed = next((r for r in results if r.is_failure), None)
        if failed is not None:
            return UseCaseResponse.from_domain_error(failed.error, request.request_id)

        events: list[DomainEvent] = [e for r in results for e in r.events]
        uow.register_events(events)
        return UseCaseResponse.success_response(TaskDto.from_entity(task), request.request_id)


class AddTaskCommentUseCase(TransactionalUseCase[AddTaskCommentRequest, UseCaseResponse]):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "AddTaskCommentUseCase")

    async def validate(self, request: AddTaskCommentRequest) -> str | None:
        return missing_actor(request)

    async def process(self, request: AddTaskCommentRequest) -> UseCaseResponse:
        task = await self.unit_of_work.tasks.get_by_id(request.task_id)
        if task is None:
            return UseCaseResponse.not_found("Task", request.task_id, request.request_id)

        actor: UUID = request.acting_user_id  # type: ignore[assignment]
        result = task.add_comment(actor, request.content, actor)
        if result.is_failure:
            return UseCaseResponse.from_domain_error(result.error, request.request_id)

        return UseCaseResponse.success_response(CommentDto.from_entity(result.value), request.request_id)


class GetTaskUseCase(TransactionalUseCase[GetTaskRequest, UseCaseResponse]):
    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "GetTaskUseCase")

    async def validate(self, request: GetTaskRequest) -> str | None:
        if request.task_id is None and not request.friendly_id:
            return "Either task_id or friendly_id is required"
        return None

    async def process(self, request: GetTaskRequest) -> UseCaseResponse:
        if request.task_id is not None:
            task = await self.unit_of_work.tasks.get_by_id(request.task_id)
            identifier: Any = request.task_id
        else:
            parsed = FriendlyId.parse(request.friendly_id)
            if parsed.is_failure:
                return UseCaseResponse.from_domain_error(parsed.error, request.request_id)
            task = await self._find_by_friendly_id(parsed.value, request)
            identifier = parsed.value

        if task is None:
            return UseCaseResponse.not_found("Task", identifier, request.request_id)

        return UseCaseResponse.success_response(TaskDto.from_entity(task), request.request_id)

    async def _find_by_friendly_id(
        self, friendly_id: FriendlyId, request: GetTaskRequest
    ) -> TaskItem | None:
        project_id = request.project_id
        if request.workspace_id is not None:
            projects = await self.unit_of_work.projects.get_by_workspace_id(request.workspace_id)
            project = next((p for p in projects if p.prefix == friendly_id.project_prefix), None)
            if project is None or (project_id is not None and project.id != project_id):
                return None
            project_id = project.id
        return await self.unit_of_work.tasks.get_by_friendly_id(friendly_id, project_id)


class GetTaskHistoryUseCase(TransactionalUseCase[GetTaskHistoryRequest, UseCaseResponse]):
    """Returns a task's audit trail, oldest change first."""

    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "GetTaskHistoryUseCase")

    async def validate(self, request: GetTaskHistoryRequest) -> str | None:
        return None

    async def process(self, request: GetTaskHistoryRequest) -> UseCaseResponse:
        task = await self.unit_of_work.tasks.get_by_id(request.task_id)
        if task is None:
            return UseCaseResponse.not_found("Task", request.task_id, request.request_id)

        entries = sorted(task.history, key=lambda h: h.changed_at)
        return UseCaseResponse.success_response(
            [TaskHistoryDto.from_entity(h) for h in entries], request.request_id
        )


class ListTasksUseCase(TransactionalUseCase[ListTasksRequest, UseCaseResponse]):
    """Paged, filtered task listing for one project."""

    def __init__(self, unit_of_work: IUnitOfWork, max_page_size: int = 100) -> None:
        super().__init__(unit_of_work, "ListTasksUseCase")
        self.max_page_size = max_page_size

    async def validate(self, request: ListTasksRequest) -> str | None:
        if request.page < 1:
            return "Page must be at least 1"
        if not 1 <= request.page_size <= self.max_page_size:
            return f"Page size must be between 1 and {self.max_page_size}"
        return None

    async def process(self, request: ListTasksRequest) -> UseCaseResponse:
        items, total = await self.unit_of_work.tasks.get_paged(
            request.project_id,
            request.page,
            request.page_size,
            status_id=request.status_id,
            assignee_id=request.assignee_id,
            sprint_id=request.sprint_id,
            search_term=request.search_term,
        )
        page = PagedResult(
            items=[TaskDto.from_entity(t) for t in items],
            total_count=total,
            page=request.page,
            page_size=request.page_size,
        )
        return UseCaseResponse.success_response(page, request.request_id)
