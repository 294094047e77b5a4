"""Enumerations shared across the task tracker domain."""

from enum import Enum


class StatusCategory(Enum):
    """Category of a workflow status.

    Categories are conventions for boards and metrics; the only behaviour they
    drive is the one-time stamping of ``started_at`` and ``completed_at``.
    """

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    CANCELLED = "cancelled"


class TaskPriority(Enum):
    """Task priority levels"""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
    CRITICAL = "critical"


class TaskType(Enum):
    """Task types"""

    TASK = "task"
    BUG = "bug"
    FEATURE = "feature"
    STORY = "story"
    EPIC = "epic"
    SUBTASK = "subtask"
    IMPROVEMENT = "improvement"


class WorkspaceRole(Enum):
    """Workspace member roles, lowest privilege first."""

    GUEST = "guest"
    MEMBER = "member"
    PROJECT_MANAGER = "project_manager"
    ADMIN = "admin"
    OWNER = "owner"


class CustomFieldType(Enum):
    """Custom field data types"""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"
    USER = "user"
    URL = "url"
    BOOLEAN = "boolean"


class SprintState(Enum):
    """Sprint lifecycle: planned -> active -> completed"""

    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
