"""
Real-time notification adapters.

``ProjectNotificationHandler`` turns dispatched domain events into
notifications for the clients watching a project (and, for assignments,
the assignee). ``LoggingNotificationService`` is the in-process transport:
it logs each message and keeps it addressed to its client group.
"""

import logging
from collections import deque
from typing import Any
from uuid import UUID

from task_tracker.application.interfaces.events import INotificationService
from task_tracker.domain.events import (
    DomainEvent,
    ProjectCreated,
    TaskAssigned,
    TaskCreated,
    TaskStatusChanged,
    TaskUpdated,
    WorkspaceCreated,
)

logger = logging.getLogger(__name__)

PROJECT_EVENTS = (TaskCreated, TaskUpdated, TaskStatusChanged, TaskAssigned)


class LoggingNotificationService(INotificationService):
    """
    Notification sink that logs instead of pushing to connected clients.

    Messages are grouped the way a push hub groups connections:
    ``project:<id>``, ``user:<id>`` and ``workspace:<id>``. The last
    ``max_sent`` messages stay available through ``sent``.
    """

    def __init__(self, max_sent: int = 1000) -> None:
        self._sent: deque[tuple[str, str, dict[str, Any]]] = deque(maxlen=max_sent)

    @property
    def sent(self) -> list[tuple[str, str, dict[str, Any]]]:
        return list(self._sent)

    async def send_to_project(self, project_id: UUID, event_name: str, payload: dict[str, Any]) -> None:
        self._send(f"project:{project_id}", event_name, payload)

    async def send_to_user(self, user_id: UUID, event_name: str, payload: dict[str, Any]) -> None:
        self._send(f"user:{user_id}", event_name, payload)

    async def send_to_workspace(
        self, workspace_id: UUID, event_name: str, payload: dict[str, Any]
    ) -> None:
        self._send(f"workspace:{workspace_id}", event_name, payload)

    def _send(self, group: str, event_name: str, payload: dict[str, Any]) -> None:
        self._sent.append((group, event_name, payload))
        logger.info(
            f"Notification sent to {group}: {event_name}",
            extra={"group": group, "event_name": event_name},
        )


class ProjectNotificationHandler:
    """Wildcard event handler forwarding domain events to a notification service."""

    def __init__(self, notifications: INotificationService) -> None:
        self.notifications = notifications

    async def __call__(self, event: DomainEvent) -> None:
        payload = event.to_dict()

        if isinstance(event, PROJECT_EVENTS):
            await self.notifications.send_to_project(event.project_id, event.event_type, payload)
            if isinstance(event, TaskAssigned) and event.assignee_id is not None:
                await self.notifications.send_to_user(event.assignee_id, event.event_type, payload)

        elif isinstance(event, ProjectCreated):
            await self.notifications.send_to_project(event.project_id, event.event_type, payload)
            await self.notifications.send_to_workspace(event.workspace_id, event.event_type, payload)

        elif isinstance(event, WorkspaceCreated):
            await self.notifications.send_to_user(event.owner_id, event.event_type, payload)
