"""
TaskItem Entity - the main unit of work in the system

A task moves through its project's workflow graph via ``change_status``.
Every audited mutation appends a TaskHistory entry, and the mutators that
other parts of the system react to also return a domain event on the Result.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

from ..enums import StatusCategory, TaskPriority, TaskType
from ..events import DomainEvent, TaskAssigned, TaskCreated, TaskStatusChanged, TaskUpdated
from ..result import Result
from ..value_objects import FriendlyId
from .attachment import TaskAttachment
from .base import AuditableEntity, utc_now
from .comment import TaskComment
from .label import TaskLabel
from .task_history import TaskHistory

if TYPE_CHECKING:
    from .custom_field import CustomFieldDefinition
    from .label import Label
    from .project import Project
    from .sprint import Sprint
    from .user import User
    from .workflow import WorkflowStatus

MAX_TITLE_LENGTH = 500


def _validate_title(title: str | None) -> str | None:
    if title is None or not title.strip():
        return "Task title cannot be empty"
    if len(title) > MAX_TITLE_LENGTH:
        return f"Task title cannot exceed {MAX_TITLE_LENGTH} characters"
    return None


def _as_text(value: Any) -> str:
    """String rendering used for history rows; absent values become ""."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _custom_fields_text(values: Mapping[str, Any]) -> str:
    if not values:
        return ""
    return json.dumps(values, sort_keys=True, default=str)


@dataclass(kw_only=True, eq=False)
class TaskItem(AuditableEntity):
    """
    Task aggregate root.

    References to other aggregates are held by id, with display names cached
    alongside (``status_name``, ``assignee_name`` ...). Operations that need
    the workflow graph receive the owning Project as an argument.
    """

    project_id: UUID
    friendly_id: FriendlyId
    title: str
    task_type: TaskType
    status_id: UUID
    status_name: str
    reporter_id: UUID
    reporter_name: str
    description: str | None = None
    priority: TaskPriority = TaskPriority.NONE
    story_points: int | None = None
    due_date: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    assignee_id: UUID | None = None
    assignee_name: str | None = None
    parent_task_id: UUID | None = None
    sprint_id: UUID | None = None
    sprint_name: str | None = None
    custom_fields: dict[str, Any] = field(default_factory=dict)

    subtask_ids: list[UUID] = field(default_factory=list)
    comments: list[TaskComment] = field(default_factory=list)
    attachments: list[TaskAttachment] = field(default_factory=list)
    labels: list[TaskLabel] = field(default_factory=list)
    history: list[TaskHistory] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        project: Project,
        title: str,
        status: WorkflowStatus,
        reporter: User,
        task_type: TaskType,
        created_by: UUID,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.NONE,
        assignee: User | None = None,
        parent_task: TaskItem | None = None,
    ) -> Result[TaskItem]:
        """
        Create a task and consume the project's next task number.

        Everything is validated before the project sequence is advanced, so
        a failed creation leaves the project untouched.

        Args:
            project: Owning project (its sequence is advanced on success)
            title: Non-empty, up to 500 characters
            status: Initial status, normally ``project.initial_status()``
            reporter: User reporting the task
            task_type: Kind of work item
            created_by: Acting user
            description: Optional free text
            priority: Initial priority
            assignee: Optional initial assignee
            parent_task: Optional parent in the same project

        Returns:
            Result holding the new task and its TaskCreated event
        """
        error = _validate_title(title)
        if error:
            return Result.failure(error)

        if status.project_id != project.id:
            return Result.business_rule("Status does not belong to the same project")

        if parent_task is not None and parent_task.project_id != project.id:
            return Result.business_rule("Parent task must belong to the same project")

        friendly_id_result = FriendlyId.create(project.prefix, project.next_task_number)
        if friendly_id_result.is_failure:
            return Result.from_error(friendly_id_result.error)  # type: ignore[arg-type]
        project.get_and_increment_task_number()

        task = cls(
            project_id=project.id,
            friendly_id=friendly_id_result.value,
            title=title.strip(),
            description=description.strip() if description else None,
            task_type=task_type,
            priority=priority,
            status_id=status.id,
            status_name=status.name,
            reporter_id=reporter.id,
            reporter_name=reporter.display_name,
            assignee_id=assignee.id if assignee else None,
            assignee_name=assignee.display_name if assignee else None,
            parent_task_id=parent_task.id if parent_task else None,
        )
        task.set_created(created_by)

        event = TaskCreated(
            task_id=task.id,
            friendly_id=task.friendly_id.value,
            project_id=project.id,
            title=task.title,
            task_type=task_type,
            status_id=status.id,
        )
        return Result.success(task, events=[event])

    # Read-only projections

    @property
    def sequence_number(self) -> int:
        return self.friendly_id.sequence_number

    @property
    def is_started(self) -> bool:
        return self.started_at is not None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def current_status(self, project: Project) -> WorkflowStatus:
        self._require_own_project(project)
        status = project.get_status(self.status_id)
        if status is None:
            raise ValueError(
                f"Project {project.id} is missing status {self.status_id} of task {self.friendly_id}"
            )
        return status

    # Workflow

    def change_status(
        self,
        project: Project,
        new_status: WorkflowStatus,
        changed_by: UUID,
        comment: str | None = None,
    ) -> Result[None]:
        """
        Move the task along an edge of its project's workflow graph.

        Args:
            project: The task's project, loaded with its statuses and transitions
            new_status: Target status
            changed_by: Acting user
            comment: Required when the edge is marked ``requires_comment``

        Returns:
            Result carrying a TaskStatusChanged event on success

        Raises:
            ValueError: If ``project`` is not this task's project
        """
        current = self.current_status(project)

        if new_status.project_id != self.project_id:
            return Result.business_rule("Status does not belong to the same project")

        transition = current.transition_to(new_status.id)
        if transition is None:
            return Result.business_rule(
                f"Transition from '{current.name}' to '{new_status.name}' is not allowed"
            )

        if transition.requires_comment and (comment is None or not comment.strip()):
            return Result.business_rule("This transition requires a comment")

        old_status_id = self.status_id
        self.status_id = new_status.id
        self.status_name = new_status.name

        now = utc_now()
        if new_status.category == StatusCategory.IN_PROGRESS and self.started_at is None:
            self.started_at = now
        if new_status.category == StatusCategory.DONE and self.completed_at is None:
            self.completed_at = now

        if transition.auto_assign_user_id is not None:
            self.assignee_id = transition.auto_assign_user_id
            self.assignee_name = None

        self.set_updated(changed_by, now)
        self._record_change("status_id", str(old_status_id), str(new_status.id), changed_by)

        event = TaskStatusChanged(
            task_id=self.id,
            friendly_id=self.friendly_id.value,
            project_id=self.project_id,
            old_status_id=old_status_id,
            old_status_name=current.name,
            new_status_id=new_status.id,
            new_status_name=new_status.name,
        )
        return Result.success(events=[event])

    # Field mutators

    def update_title(self, title: str, updated_by: UUID) -> Result[None]:
        error = _validate_title(title)
        if error:
            return Result.failure(error)

        old_value = self.title
        self.title = title.strip()
        return self._updated("title", old_value, self.title, updated_by)

    def update_description(self, description: str | None, updated_by: UUID) -> Result[None]:
        old_value = self.description
        self.description = description.strip() if description else None
        return self._updated("description", old_value, self.description, updated_by)

    def change_priority(self, priority: TaskPriority, changed_by: UUID) -> Result[None]:
        old_value = self.priority
        self.priority = priority
        return self._updated("priority", old_value, priority, changed_by)

    def assign(self, assignee: User | None, assigned_by: UUID) -> Result[None]:
        """Assign the task, or unassign it when ``assignee`` is None."""
        old_value = self.assignee_id
        self.assignee_id = assignee.id if assignee else None
        self.assignee_name = assignee.display_name if assignee else None
        self.set_updated(assigned_by)
        self._record_change("assignee_id", _as_text(old_value), _as_text(self.assignee_id), assigned_by)

        event = TaskAssigned(
            task_id=self.id,
            friendly_id=self.friendly_id.value,
            project_id=self.project_id,
            assignee_id=self.assignee_id,
            assignee_name=self.assignee_name,
        )
        return Result.success(events=[event])

    def refresh_assignee_name(self, assignee: User) -> None:
        """Fill the cached display name, e.g. after an auto-assigning transition."""
        if assignee.id == self.assignee_id:
            self.assignee_name = assignee.display_name

    # The following mutators record history but emit no event.

    def set_due_date(self, due_date: datetime | None, updated_by: UUID) -> Result[None]:
        old_value = self.due_date
        self.due_date = due_date
        self.set_updated(updated_by)
        self._record_change("due_date", _as_text(old_value), _as_text(due_date), updated_by)
        return Result.success()

    def set_story_points(self, story_points: int | None, updated_by: UUID) -> Result[None]:
        if story_points is not None and story_points < 0:
            return Result.failure("Story points cannot be negative")

        old_value = self.story_points
        self.story_points = story_points
        self.set_updated(updated_by)
        self._record_change("story_points", _as_text(old_value), _as_text(story_points), updated_by)
        return Result.success()

    def set_sprint(self, sprint: Sprint | None, updated_by: UUID) -> Result[None]:
        if sprint is not None and sprint.project_id != self.project_id:
            return Result.business_rule("Sprint does not belong to the same project")

        old_value = self.sprint_id
        self.sprint_id = sprint.id if sprint else None
        self.sprint_name = sprint.name if sprint else None
        self.set_updated(updated_by)
        self._record_change("sprint_id", _as_text(old_value), _as_text(self.sprint_id), updated_by)
        return Result.success()

    def set_custom_fields(
        self,
        values: Mapping[str, Any] | None,
        updated_by: UUID,
        definitions: list[CustomFieldDefinition] | None = None,
    ) -> Result[None]:
        """
        Replace the task's custom field values.

        Without ``definitions`` only the shape is checked (a mapping with
        string keys). With them, unknown keys, missing required fields and
        values of the wrong type are rejected.
        """
        values = dict(values or {})
        if any(not isinstance(key, str) for key in values):
            return Result.failure("Custom field names must be strings")

        if definitions is not None:
            error = self._check_custom_fields(values, definitions)
            if error:
                return Result.failure(error)

        old_value = _custom_fields_text(self.custom_fields)
        self.custom_fields = values
        self.set_updated(updated_by)
        self._record_change("custom_fields", old_value, _custom_fields_text(values), updated_by)
        return Result.success()

    # Child collections

    def add_comment(self, author_id: UUID, content: str, created_by: UUID) -> Result[TaskComment]:
        result = TaskComment.create(self.id, author_id, content, created_by)
        if result.is_success:
            self.comments.append(result.value)
        return result

    def add_attachment(
        self,
        uploaded_by_id: UUID,
        file_name: str,
        storage_path: str,
        content_type: str,
        file_size: int,
        created_by: UUID,
    ) -> Result[TaskAttachment]:
        result = TaskAttachment.create(
            self.id, uploaded_by_id, file_name, storage_path, content_type, file_size, created_by
        )
        if result.is_success:
            self.attachments.append(result.value)
        return result

    def add_label(self, label: Label) -> Result[TaskLabel]:
        if any(existing.label_id == label.id for existing in self.labels):
            return Result.business_rule(f"Label '{label.name}' is already applied to this task")

        result = TaskLabel.create(self, label)
        if result.is_success:
            self.labels.append(result.value)
        return result

    def remove_label(self, label_id: UUID) -> Result[None]:
        existing = next((tl for tl in self.labels if tl.label_id == label_id), None)
        if existing is None:
            return Result.failure("Label is not applied to this task")

        self.labels.remove(existing)
        return Result.success()

    def add_subtask(self, subtask: TaskItem) -> Result[None]:
        if subtask.id == self.id:
            return Result.business_rule("A task cannot be its own subtask")

        if subtask.project_id != self.project_id:
            return Result.business_rule("Subtask must belong to the same project")

        if subtask.parent_task_id != self.id:
            return Result.business_rule("Subtask does not reference this task as its parent")

        if subtask.id not in self.subtask_ids:
            self.subtask_ids.append(subtask.id)
        return Result.success()

    # Internals

    def _require_own_project(self, project: Project) -> None:
        if project.id != self.project_id:
            raise ValueError(
                f"Task {self.friendly_id} belongs to project {self.project_id}, not {project.id}"
            )

    def _updated(self, field_name: str, old_value: Any, new_value: Any, updated_by: UUID) -> Result[None]:
        old_text, new_text = _as_text(old_value), _as_text(new_value)
        self.set_updated(updated_by)
        self._record_change(field_name, old_text, new_text, updated_by)

        event: DomainEvent = TaskUpdated(
            task_id=self.id,
            friendly_id=self.friendly_id.value,
            project_id=self.project_id,
            field_name=field_name,
            old_value=old_text,
            new_value=new_text,
        )
        return Result.success(events=[event])

    def _record_change(self, field_name: str, old_value: str, new_value: str, changed_by: UUID) -> None:
        self.history.append(TaskHistory.record(self.id, field_name, old_value, new_value, changed_by))

    @staticmethod
    def _check_custom_fields(
        values: dict[str, Any], definitions: list[CustomFieldDefinition]
    ) -> str | None:
        by_name = {d.name: d for d in definitions}

        for key in values:
            if key not in by_name:
                return f"Unknown custom field '{key}'"

        for definition in definitions:
            value = values.get(definition.name)
            if value is None:
                if definition.is_required:
                    return f"Custom field '{definition.name}' is required"
                continue
            error = definition.validate_value(value)
            if error:
                return error
        return None

    def __str__(self) -> str:
        return f"TaskItem({self.friendly_id}: {self.title})"
