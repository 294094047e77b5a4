"""
Project Entity - container for tasks with its own workflow and task sequence

The project owns its workflow graph (statuses and transitions), its custom
field schema, sprints and labels, and issues the per-project task numbers
from which FriendlyIds are built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

from ..events import ProjectCreated
from ..result import Result
from ..value_objects import Slug
from ..value_objects.friendly_id import validate_prefix
from .base import AuditableEntity
from .custom_field import CustomFieldDefinition
from .label import Label
from .sprint import Sprint
from .workflow import StatusTransition, WorkflowStatus

if TYPE_CHECKING:
    from .workspace import Workspace

MAX_PROJECT_NAME_LENGTH = 100


def _validate_project_name(name: str | None) -> str | None:
    if name is None or not name.strip():
        return "Project name cannot be empty"
    if len(name) > MAX_PROJECT_NAME_LENGTH:
        return f"Project name cannot exceed {MAX_PROJECT_NAME_LENGTH} characters"
    return None


@dataclass(kw_only=True, eq=False)
class Project(AuditableEntity):
    """
    Project aggregate.

    ``next_task_number`` is the sequence for task FriendlyIds. It starts at 1
    and only ever moves forward through ``get_and_increment_task_number``.
    """

    workspace_id: UUID
    name: str
    slug: str
    prefix: str
    description: str | None = None
    icon_url: str | None = None
    next_task_number: int = 1
    default_status_id: UUID | None = None

    statuses: list[WorkflowStatus] = field(default_factory=list)
    custom_fields: list[CustomFieldDefinition] = field(default_factory=list)
    sprints: list[Sprint] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        workspace: Workspace,
        name: str,
        slug: Slug,
        prefix: str,
        created_by: UUID,
        description: str | None = None,
    ) -> Result[Project]:
        """
        Create a new project inside a workspace.

        Args:
            workspace: Owning workspace
            name: Display name, up to 100 characters
            slug: URL slug, unique within the workspace (checked by the caller)
            prefix: FriendlyId prefix, up to 10 letters/digits; stored uppercase
            created_by: Acting user

        Returns:
            Result holding the project and its ProjectCreated event
        """
        error = _validate_project_name(name) or validate_prefix(prefix)
        if error:
            return Result.failure(error)

        project = cls(
            workspace_id=workspace.id,
            name=name.strip(),
            slug=slug.value,
            prefix=prefix.strip().upper(),
            description=description.strip() if description else None,
        )
        project.set_created(created_by)

        event = ProjectCreated(
            project_id=project.id,
            workspace_id=project.workspace_id,
            name=project.name,
            slug=project.slug,
            prefix=project.prefix,
        )
        return Result.success(project, events=[event])

    def update(
        self,
        name: str,
        description: str | None,
        icon_url: str | None,
        updated_by: UUID,
    ) -> Result[None]:
        error = _validate_project_name(name)
        if error:
            return Result.failure(error)

        self.name = name.strip()
        self.description = description.strip() if description else None
        self.icon_url = icon_url.strip() if icon_url else None
        self.set_updated(updated_by)
        return Result.success()

    # Task sequence

    def get_and_increment_task_number(self) -> int:
        """Return the current task number and advance the sequence.

        Storage must persist the advanced counter in the same write as the
        task that consumed the number.
        """
        number = self.next_task_number
        self.next_task_number += 1
        return number

    # Workflow graph

    def add_status(self, status: WorkflowStatus) -> Result[None]:
        """Attach a status to this project.

        The first status added with ``is_default`` set becomes the project
        default; later ones lose the flag and do not move the pointer. Use
        ``set_default_status`` to switch it explicitly.
        """
        if status.project_id != self.id:
            return Result.business_rule("Status does not belong to this project")

        if self.get_status(status.id) is not None:
            return Result.business_rule("Status is already part of this project")

        if status.is_default:
            if self.default_status_id is None:
                self.default_status_id = status.id
            else:
                status.unset_as_default()

        self.statuses.append(status)
        return Result.success()

    def set_default_status(self, status_id: UUID, updated_by: UUID) -> Result[None]:
        target = self.get_status(status_id)
        if target is None:
            return Result.business_rule("Status does not belong to this project")

        for status in self.statuses:
            if status.id == status_id:
                status.set_as_default()
            else:
                status.unset_as_default()

        self.default_status_id = target.id
        self.set_updated(updated_by)
        return Result.success()

    def add_transition(
        self,
        from_status_id: UUID,
        to_status_id: UUID,
        created_by: UUID,
        name: str | None = None,
        auto_assign_user_id: UUID | None = None,
        requires_comment: bool = False,
    ) -> Result[StatusTransition]:
        from_status = self.get_status(from_status_id)
        to_status = self.get_status(to_status_id)
        if from_status is None or to_status is None:
            return Result.business_rule("Status does not belong to this project")

        if from_status.transition_to(to_status.id) is not None:
            return Result.business_rule(
                f"Transition from '{from_status.name}' to '{to_status.name}' already exists"
            )

        result = StatusTransition.create(
            from_status,
            to_status,
            created_by,
            name=name,
            auto_assign_user_id=auto_assign_user_id,
            requires_comment=requires_comment,
        )
        if result.is_failure:
            return result

        from_status.add_outgoing_transition(result.value)
        to_status.add_incoming_transition(result.value)
        return result

    def get_status(self, status_id: UUID | None) -> WorkflowStatus | None:
        return next((s for s in self.statuses if s.id == status_id), None)

    def find_transition(self, from_status_id: UUID, to_status_id: UUID) -> StatusTransition | None:
        from_status = self.get_status(from_status_id)
        if from_status is None:
            return None
        return from_status.transition_to(to_status_id)

    def ordered_statuses(self) -> list[WorkflowStatus]:
        return sorted(self.statuses, key=lambda s: s.order)

    def initial_status(self) -> Result[WorkflowStatus]:
        """Status a new task starts in: the default, else the first added."""
        default = self.get_status(self.default_status_id)
        if default is not None:
            return Result.success(default)

        if not self.statuses:
            return Result.business_rule("Project has no workflow statuses configured")

        return Result.success(self.statuses[0])

    # Owned collections

    def add_custom_field(self, definition: CustomFieldDefinition) -> Result[None]:
        if definition.project_id != self.id:
            return Result.business_rule("Custom field does not belong to this project")

        if any(f.name.lower() == definition.name.lower() for f in self.custom_fields):
            return Result.business_rule(f"Custom field '{definition.name}' already exists")

        self.custom_fields.append(definition)
        return Result.success()

    def add_sprint(self, sprint: Sprint) -> Result[None]:
        if sprint.project_id != self.id:
            return Result.business_rule("Sprint does not belong to this project")

        self.sprints.append(sprint)
        return Result.success()

    def add_label(self, label: Label) -> Result[None]:
        if label.project_id != self.id:
            return Result.business_rule("Label does not belong to this project")

        if any(existing.name.lower() == label.name.lower() for existing in self.labels):
            return Result.business_rule(f"Label '{label.name}' already exists")

        self.labels.append(label)
        return Result.success()

    def get_sprint(self, sprint_id: UUID | None) -> Sprint | None:
        return next((s for s in self.sprints if s.id == sprint_id), None)

    def get_label(self, label_id: UUID | None) -> Label | None:
        return next((label for label in self.labels if label.id == label_id), None)

    def __str__(self) -> str:
        return f"Project({self.prefix}: {self.name})"
