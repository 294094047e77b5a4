"""
Domain events.

Events are immutable records of something that happened inside an aggregate.
Domain operations return them on ``Result.events``; the unit of work
dispatches them once per save cycle. All events are pure data - no I/O.
"""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from .enums import TaskType


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        """Flatten the event into JSON-friendly primitives."""
        payload: dict[str, Any] = {"event_type": self.event_type}
        for key, value in asdict(self).items():
            if isinstance(value, UUID):
                value = str(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Enum):
                value = value.value
            payload[key] = value
        return payload


@dataclass(frozen=True, kw_only=True)
class UserCreated(DomainEvent):
    user_id: UUID
    email: str
    display_name: str


@dataclass(frozen=True, kw_only=True)
class WorkspaceCreated(DomainEvent):
    workspace_id: UUID
    name: str
    slug: str
    owner_id: UUID


@dataclass(frozen=True, kw_only=True)
class ProjectCreated(DomainEvent):
    project_id: UUID
    workspace_id: UUID
    name: str
    slug: str
    prefix: str


@dataclass(frozen=True, kw_only=True)
class TaskCreated(DomainEvent):
    task_id: UUID
    friendly_id: str
    project_id: UUID
    title: str
    task_type: TaskType
    status_id: UUID


@dataclass(frozen=True, kw_only=True)
class TaskUpdated(DomainEvent):
    """A scalar task field changed (title, description or priority)."""

    task_id: UUID
    friendly_id: str
    project_id: UUID
    field_name: str
    old_value: str
    new_value: str


@dataclass(frozen=True, kw_only=True)
class TaskStatusChanged(DomainEvent):
    task_id: UUID
    friendly_id: str
    project_id: UUID
    old_status_id: UUID
    old_status_name: str
    new_status_id: UUID
    new_status_name: str


@dataclass(frozen=True, kw_only=True)
class TaskAssigned(DomainEvent):
    """Raised on assignment and on unassignment (assignee_id is None)."""

    task_id: UUID
    friendly_id: str
    project_id: UUID
    assignee_id: UUID | None
    assignee_name: str | None
