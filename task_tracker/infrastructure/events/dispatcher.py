"""
In-memory domain event dispatcher.

Handlers are awaited in subscription order: first the handlers registered
for the event's exact type, then the wildcard handlers. A handler failure is
logged and never stops delivery to the remaining handlers, and never fails
the save that produced the event.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict, defaultdict, deque
from collections.abc import Iterable
from uuid import UUID

from task_tracker.application.interfaces.events import EventHandler, IEventDispatcher
from task_tracker.domain.events import DomainEvent

logger = logging.getLogger(__name__)


class InMemoryEventDispatcher(IEventDispatcher):
    """
    Event dispatcher shared by every unit of work of a container.

    Remembers the ids of the last ``dedupe_window`` delivered events so that
    an event is delivered at most once even if it is dispatched again. Only
    the last ``history_limit`` delivered events are kept for inspection.
    """

    def __init__(self, dedupe_window: int = 10000, history_limit: int = 1000) -> None:
        if dedupe_window < 1:
            raise ValueError("dedupe_window must be at least 1")
        if history_limit < 0:
            raise ValueError("history_limit cannot be negative")

        self.dedupe_window = dedupe_window
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._wildcard_handlers: list[EventHandler] = []
        self._delivered: OrderedDict[UUID, None] = OrderedDict()
        self._lock = threading.Lock()
        self._history: deque[DomainEvent] = deque(maxlen=history_limit)

    def subscribe(self, event_type: type[DomainEvent] | None, handler: EventHandler) -> None:
        if event_type is None:
            self._wildcard_handlers.append(handler)
        else:
            self._handlers[event_type].append(handler)
        logger.debug(
            "Subscribed event handler",
            extra={"event_type": event_type.__name__ if event_type else "*"},
        )

    async def dispatch(self, events: Iterable[DomainEvent]) -> int:
        delivered = 0
        for event in events:
            if not self._claim(event.event_id):
                logger.debug(
                    "Skipping already dispatched event",
                    extra={"event_id": str(event.event_id), "event_type": event.event_type},
                )
                continue

            self._history.append(event)
            for handler in [*self._handlers.get(type(event), []), *self._wildcard_handlers]:
                try:
                    await handler(event)
                except Exception:
                    logger.exception(
                        "Event handler failed",
                        extra={"event_id": str(event.event_id), "event_type": event.event_type},
                    )
            delivered += 1
        return delivered

    def get_history(self) -> list[DomainEvent]:
        """Most recently delivered events, oldest first. For testing."""
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()

    def _claim(self, event_id: UUID) -> bool:
        """Record ``event_id`` as delivered; False if it already was."""
        with self._lock:
            if event_id in self._delivered:
                return False
            self._delivered[event_id] = None
            if len(self._delivered) > self.dedupe_window:
                self._delivered.popitem(last=False)
            return True
