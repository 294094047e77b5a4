"""
Event Dispatch and Notification Interfaces

Contracts for publishing domain events after a successful save and for the
real-time notification transport that fans them out to clients.
"""

from abc import abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol
from uuid import UUID

from task_tracker.domain.events import DomainEvent

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class IEventDispatcher(Protocol):
    """Publishes domain events to subscribed handlers."""

    @abstractmethod
    def subscribe(self, event_type: type[DomainEvent] | None, handler: EventHandler) -> None:
        """
        Register a handler.

        Args:
            event_type: Event class to receive, or None for every event
            handler: Async callable invoked once per dispatched event
        """
        ...

    @abstractmethod
    async def dispatch(self, events: Iterable[DomainEvent]) -> int:
        """
        Deliver events to their handlers, skipping any already delivered.

        Returns:
            Number of events delivered (duplicates excluded)
        """
        ...


class INotificationService(Protocol):
    """Real-time notification transport. Payloads must be JSON-serializable."""

    @abstractmethod
    async def send_to_project(self, project_id: UUID, event_name: str, payload: dict[str, Any]) -> None: ...

    @abstractmethod
    async def send_to_user(self, user_id: UUID, event_name: str, payload: dict[str, Any]) -> None: ...

    @abstractmethod
    async def send_to_workspace(
        self, workspace_id: UUID, event_name: str, payload: dict[str, Any]
    ) -> None: ...
