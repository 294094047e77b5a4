"""
Workflow Entities - the per-project graph of task states

A project's WorkflowStatus instances are the nodes and its StatusTransition
instances the directed edges. The edges are the only legal moves for
``TaskItem.change_status``; nothing about the graph is hard-coded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

from ..enums import StatusCategory
from ..result import Result
from .base import AuditableEntity

if TYPE_CHECKING:
    from .project import Project

DEFAULT_STATUS_COLOR = "#808080"
MAX_STATUS_NAME_LENGTH = 50


def _validate_status_name(name: str | None) -> str | None:
    if name is None or not name.strip():
        return "Status name cannot be empty"
    if len(name) > MAX_STATUS_NAME_LENGTH:
        return f"Status name cannot exceed {MAX_STATUS_NAME_LENGTH} characters"
    return None


@dataclass(kw_only=True, eq=False)
class StatusTransition(AuditableEntity):
    """Directed edge between two statuses of the same project."""

    project_id: UUID
    from_status_id: UUID
    to_status_id: UUID
    name: str | None = None
    auto_assign_user_id: UUID | None = None
    requires_comment: bool = False

    @classmethod
    def create(
        cls,
        from_status: WorkflowStatus,
        to_status: WorkflowStatus,
        created_by: UUID,
        name: str | None = None,
        auto_assign_user_id: UUID | None = None,
        requires_comment: bool = False,
    ) -> Result[StatusTransition]:
        """Create an edge ``from_status -> to_status``.

        Fails for edges that cross projects and for self-loops.
        """
        if from_status.project_id != to_status.project_id:
            return Result.business_rule("Statuses must belong to the same project")

        if from_status.id == to_status.id:
            return Result.business_rule("Cannot create transition to the same status")

        transition = cls(
            project_id=from_status.project_id,
            from_status_id=from_status.id,
            to_status_id=to_status.id,
            name=name.strip() if name else None,
            auto_assign_user_id=auto_assign_user_id,
            requires_comment=requires_comment,
        )
        transition.set_created(created_by)
        return Result.success(transition)

    def update(
        self,
        name: str | None,
        auto_assign_user_id: UUID | None,
        requires_comment: bool,
        updated_by: UUID,
    ) -> None:
        self.name = name.strip() if name else None
        self.auto_assign_user_id = auto_assign_user_id
        self.requires_comment = requires_comment
        self.set_updated(updated_by)


@dataclass(kw_only=True, eq=False)
class WorkflowStatus(AuditableEntity):
    """A named state a task can occupy, scoped to one project."""

    project_id: UUID
    name: str
    category: StatusCategory
    order: int = 0
    description: str | None = None
    color: str = DEFAULT_STATUS_COLOR
    is_default: bool = False

    outgoing_transitions: list[StatusTransition] = field(default_factory=list)
    incoming_transitions: list[StatusTransition] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        project: Project,
        name: str,
        category: StatusCategory,
        order: int,
        created_by: UUID,
        description: str | None = None,
        color: str = DEFAULT_STATUS_COLOR,
        is_default: bool = False,
    ) -> Result[WorkflowStatus]:
        error = _validate_status_name(name)
        if error:
            return Result.failure(error)

        status = cls(
            project_id=project.id,
            name=name.strip(),
            description=description.strip() if description else None,
            category=category,
            color=color,
            order=order,
            is_default=is_default,
        )
        status.set_created(created_by)
        return Result.success(status)

    def update(
        self,
        name: str,
        description: str | None,
        color: str,
        category: StatusCategory,
        order: int,
        updated_by: UUID,
    ) -> Result[None]:
        error = _validate_status_name(name)
        if error:
            return Result.failure(error)

        self.name = name.strip()
        self.description = description.strip() if description else None
        self.color = color
        self.category = category
        self.order = order
        self.set_updated(updated_by)
        return Result.success()

    def set_as_default(self) -> None:
        self.is_default = True

    def unset_as_default(self) -> None:
        self.is_default = False

    def add_outgoing_transition(self, transition: StatusTransition) -> None:
        if transition.from_status_id != self.id:
            raise ValueError("Outgoing transition must start at this status")
        self.outgoing_transitions.append(transition)

    def add_incoming_transition(self, transition: StatusTransition) -> None:
        if transition.to_status_id != self.id:
            raise ValueError("Incoming transition must end at this status")
        self.incoming_transitions.append(transition)

    def transition_to(self, status_id: UUID) -> StatusTransition | None:
        """The outgoing edge leading to ``status_id``, if one exists."""
        return next((t for t in self.outgoing_transitions if t.to_status_id == status_id), None)

    def __str__(self) -> str:
        return f"WorkflowStatus({self.name} [{self.category.value}])"
