"""
Data Transfer Objects

Read-only projections of domain aggregates returned by use cases. DTOs hold
plain values only (enums rendered to their string values) so callers never
receive live aggregates.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from task_tracker.domain.entities import (
    Project,
    Sprint,
    StatusTransition,
    TaskComment,
    TaskHistory,
    TaskItem,
    User,
    WorkflowStatus,
    Workspace,
    WorkspaceMember,
)

T = TypeVar("T")


@dataclass(frozen=True)
class UserDto:
    id: UUID
    email: str
    display_name: str
    avatar_url: str | None
    is_active: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserDto":
        return cls(
            id=user.id,
            email=user.email.value,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            is_active=user.is_active,
            created_at=user.created_at,
        )


@dataclass(frozen=True)
class WorkspaceMemberDto:
    user_id: UUID
    role: str
    joined_at: datetime

    @classmethod
    def from_entity(cls, member: WorkspaceMember) -> "WorkspaceMemberDto":
        return cls(user_id=member.user_id, role=member.role.value, joined_at=member.joined_at)


@dataclass(frozen=True)
class WorkspaceDto:
    id: UUID
    name: str
    slug: str
    description: str | None
    logo_url: str | None
    owner_id: UUID
    created_at: datetime
    members: tuple[WorkspaceMemberDto, ...] = ()

    @classmethod
    def from_entity(cls, workspace: Workspace) -> "WorkspaceDto":
        return cls(
            id=workspace.id,
            name=workspace.name,
            slug=workspace.slug,
            description=workspace.description,
            logo_url=workspace.logo_url,
            owner_id=workspace.owner_id,
            created_at=workspace.created_at,
            members=tuple(WorkspaceMemberDto.from_entity(m) for m in workspace.active_members),
        )


@dataclass(frozen=True)
class StatusTransitionDto:
    id: UUID
    from_status_id: UUID
    to_status_id: UUID
    to_status_name: str
    name: str | None
    requires_comment: bool
    auto_assign_user_id: UUID | None

    @classmethod
    def from_entity(cls, transition: StatusTransition, to_status_name: str) -> "StatusTransitionDto":
        return cls(
            id=transition.id,
            from_status_id=transition.from_status_id,
            to_status_id=transition.to_status_id,
            to_status_name=to_status_name,
            name=transition.name,
            requires_comment=transition.requires_comment,
            auto_assign_user_id=transition.auto_assign_user_id,
        )


@dataclass(frozen=True)
class WorkflowStatusDto:
    id: UUID
    name: str
    description: str | None
    color: str
    category: str
    order: int
    is_default: bool
    transitions: tuple[StatusTransitionDto, ...] = ()

    @classmethod
    def from_entity(cls, status: WorkflowStatus, project: Project | None = None) -> "WorkflowStatusDto":
        """Project is needed to name the transition targets; without it the
        transitions are left out."""
        transitions: tuple[StatusTransitionDto, ...] = ()
        if project is not None:
            transitions = tuple(
                StatusTransitionDto.from_entity(t, target.name)
                for t in status.outgoing_transitions
                if (target := project.get_status(t.to_status_id)) is not None
            )
        return cls(
            id=status.id,
            name=status.name,
            description=status.description,
            color=status.color,
            category=status.category.value,
            order=status.order,
            is_default=status.is_default,
            transitions=transitions,
        )


@dataclass(frozen=True)
class SprintDto:
    id: UUID
    project_id: UUID
    name: str
    goal: str | None
    start_date: datetime
    end_date: datetime
    state: str
    is_active: bool
    is_completed: bool

    @classmethod
    def from_entity(cls, sprint: Sprint) -> "SprintDto":
        return cls(
            id=sprint.id,
            project_id=sprint.project_id,
            name=sprint.name,
            goal=sprint.goal,
            start_date=sprint.start_date,
            end_date=sprint.end_date,
            state=sprint.state.value,
            is_active=sprint.is_active,
            is_completed=sprint.is_completed,
        )


@dataclass(frozen=True)
class ProjectDto:
    id: UUID
    workspace_id: UUID
    name: str
    slug: str
    prefix: str
    description: str | None
    icon_url: str | None
    default_status_id: UUID | None
    created_at: datetime
    statuses: tuple[WorkflowStatusDto, ...] = ()

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectDto":
        return cls(
            id=project.id,
            workspace_id=project.workspace_id,
            name=project.name,
            slug=project.slug,
            prefix=project.prefix,
            description=project.description,
            icon_url=project.icon_url,
            default_status_id=project.default_status_id,
            created_at=project.created_at,
            statuses=tuple(
                WorkflowStatusDto.from_entity(s, project) for s in project.ordered_statuses()
            ),
        )


@dataclass(frozen=True)
class CommentDto:
    id: UUID
    task_id: UUID
    author_id: UUID
    content: str
    is_edited: bool
    created_at: datetime
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, comment: TaskComment) -> "CommentDto":
        return cls(
            id=comment.id,
            task_id=comment.task_id,
            author_id=comment.author_id,
            content=comment.content,
            is_edited=comment.is_edited,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


@dataclass(frozen=True)
class TaskHistoryDto:
    id: UUID
    field_name: str
    old_value: str
    new_value: str
    changed_by: UUID
    changed_at: datetime

    @classmethod
    def from_entity(cls, entry: TaskHistory) -> "TaskHistoryDto":
        return cls(
            id=entry.id,
            field_name=entry.field_name,
            old_value=entry.old_value,
            new_value=entry.new_value,
            changed_by=entry.changed_by,
            changed_at=entry.changed_at,
        )


@dataclass(frozen=True)
class TaskDto:
    id: UUID
    friendly_id: str
    title: str
    description: str | None
    priority: str
    task_type: str
    story_points: int | None
    due_date: datetime | None
    started_at: datetime | None
    completed_at: datetime | None
    project_id: UUID
    status_id: UUID
    status_name: str
    assignee_id: UUID | None
    assignee_name: str | None
    reporter_id: UUID
    reporter_name: str
    parent_task_id: UUID | None
    sprint_id: UUID | None
    sprint_name: str | None
    custom_fields: dict[str, Any]
    labels: tuple[str, ...]
    comment_count: int
    subtask_count: int
    created_at: datetime
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, task: TaskItem) -> "TaskDto":
        return cls(
            id=task.id,
            friendly_id=task.friendly_id.value,
            title=task.title,
            description=task.description,
            priority=task.priority.value,
            task_type=task.task_type.value,
            story_points=task.story_points,
            due_date=task.due_date,
            started_at=task.started_at,
            completed_at=task.completed_at,
            project_id=task.project_id,
            status_id=task.status_id,
            status_name=task.status_name,
            assignee_id=task.assignee_id,
            assignee_name=task.assignee_name,
            reporter_id=task.reporter_id,
            reporter_name=task.reporter_name,
            parent_task_id=task.parent_task_id,
            sprint_id=task.sprint_id,
            sprint_name=task.sprint_name,
            custom_fields=dict(task.custom_fields),
            labels=tuple(tl.label_name for tl in task.labels),
            comment_count=len(task.comments),
            subtask_count=len(task.subtask_ids),
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    items: list[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 20

    @property
    def total_pages(self) -> int:
        return -(-self.total_count // self.page_size) if self.page_size else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1
