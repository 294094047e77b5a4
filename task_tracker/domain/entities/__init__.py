"""Domain entities with business logic."""

from .attachment import TaskAttachment
from .base import AuditableEntity, Entity
from .comment import TaskComment
from .custom_field import CustomFieldDefinition
from .label import Label, TaskLabel
from .project import Project
from .sprint import Sprint
from .task import TaskItem
from .task_history import TaskHistory
from .user import User
from .workflow import StatusTransition, WorkflowStatus
from .workspace import Workspace, WorkspaceMember

__all__ = [
    "Entity",
    "AuditableEntity",
    "User",
    "Workspace",
    "WorkspaceMember",
    "Project",
    "WorkflowStatus",
    "StatusTransition",
    "Sprint",
    "TaskItem",
    "TaskHistory",
    "TaskComment",
    "TaskAttachment",
    "Label",
    "TaskLabel",
    "CustomFieldDefinition",
]
