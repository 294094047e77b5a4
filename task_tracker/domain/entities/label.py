"""Labels for categorizing tasks within a project"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from ..result import Result
from .base import AuditableEntity, Entity

if TYPE_CHECKING:
    from .project import Project
    from .task import TaskItem

MAX_LABEL_NAME_LENGTH = 50


def _validate_label_name(name: str | None) -> str | None:
    if name is None or not name.strip():
        return "Label name cannot be empty"
    if len(name) > MAX_LABEL_NAME_LENGTH:
        return f"Label name cannot exceed {MAX_LABEL_NAME_LENGTH} characters"
    return None


@dataclass(kw_only=True, eq=False)
class Label(AuditableEntity):
    project_id: UUID
    name: str
    color: str = "#808080"
    description: str | None = None

    @classmethod
    def create(
        cls,
        project: Project,
        name: str,
        color: str,
        created_by: UUID,
        description: str | None = None,
    ) -> Result[Label]:
        error = _validate_label_name(name)
        if error:
            return Result.failure(error)

        label = cls(
            project_id=project.id,
            name=name.strip(),
            color=color,
            description=description.strip() if description else None,
        )
        label.set_created(created_by)
        return Result.success(label)

    def update(
        self, name: str, color: str, description: str | None, updated_by: UUID
    ) -> Result[None]:
        error = _validate_label_name(name)
        if error:
            return Result.failure(error)

        self.name = name.strip()
        self.color = color
        self.description = description.strip() if description else None
        self.set_updated(updated_by)
        return Result.success()


@dataclass(kw_only=True, eq=False)
class TaskLabel(Entity):
    """Association of a label with a task; the label name is cached for display."""

    task_id: UUID
    label_id: UUID
    label_name: str

    @classmethod
    def create(cls, task: TaskItem, label: Label) -> Result[TaskLabel]:
        if task.project_id != label.project_id:
            return Result.business_rule("Task and label must belong to the same project")

        return Result.success(cls(task_id=task.id, label_id=label.id, label_name=label.name))
