"""Task history - append-only audit trail of task field changes"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from .base import Entity, utc_now


@dataclass(kw_only=True, eq=False)
class TaskHistory(Entity):
    """
    One recorded field change on a task.

    Values are stored as their string rendering; an absent value is "".
    Entries are written by ``TaskItem`` only and never modified afterwards.
    """

    task_id: UUID
    field_name: str
    old_value: str
    new_value: str
    changed_by: UUID
    changed_at: datetime = field(default_factory=utc_now)

    @classmethod
    def record(
        cls, task_id: UUID, field_name: str, old_value: str, new_value: str, changed_by: UUID
    ) -> TaskHistory:
        if not field_name or not field_name.strip():
            raise ValueError("Field name cannot be empty")

        return cls(
            task_id=task_id,
            field_name=field_name,
            old_value=old_value,
            new_value=new_value,
            changed_by=changed_by,
        )

    def __str__(self) -> str:
        return f"{self.field_name}: '{self.old_value}' -> '{self.new_value}'"
