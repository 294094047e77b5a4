"""Domain event dispatch and real-time notification adapters."""

from .dispatcher import InMemoryEventDispatcher
from .notifications import LoggingNotificationService, ProjectNotificationHandler

__all__ = ["InMemoryEventDispatcher", "LoggingNotificationService", "ProjectNotificationHandler"]
