"""
Base In-Memory Repository

Shared loading logic for the in-memory repositories: reads go to the
committed store, results are swapped for already-tracked instances, and
soft-deleted aggregates are never returned.
"""

# Standard library imports
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar
from uuid import UUID

# Local imports
from task_tracker.domain.entities import AuditableEntity
from task_tracker.infrastructure.database import InMemoryDatabase

from .change_tracker import ChangeTracker

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=AuditableEntity)


class InMemoryRepository(Generic[E]):
    """Repository over one table of an ``InMemoryDatabase``."""

    table: str

    def __init__(self, database: InMemoryDatabase, tracker: ChangeTracker) -> None:
        """
        Initialize repository.

        Args:
            database: Committed store to read from
            tracker: Identity map of the owning unit of work
        """
        self.database = database
        self.tracker = tracker

    async def get_by_id(self, entity_id: UUID) -> E | None:
        tracked = self.tracker.get(self.table, entity_id)
        if tracked is not None:
            return None if tracked.is_deleted else tracked  # type: ignore[return-value]

        stored = self.database.get(self.table, entity_id)
        if stored is None or stored.is_deleted:
            return None
        return self.tracker.attach(self.table, stored)  # type: ignore[return-value]

    async def add(self, entity: E) -> None:
        self.tracker.add(self.table, entity)
        logger.debug(f"Added {type(entity).__name__} {entity.id}")

    def _query(self, predicate: Callable[[Any], bool]) -> list[E]:
        """Live aggregates matching ``predicate``, committed and newly added."""
        results: list[E] = []
        seen: set[UUID] = set()

        for stored in self.database.find(self.table, predicate):
            entity = self.tracker.attach(self.table, stored)
            seen.add(entity.id)
            # A tracked instance may have changed since it was loaded
            if not entity.is_deleted and predicate(entity):
                results.append(entity)  # type: ignore[arg-type]

        for entity in self.tracker.added(self.table, predicate):
            if entity.id not in seen and not entity.is_deleted:
                results.append(entity)  # type: ignore[arg-type]

        return results

    def _first(self, predicate: Callable[[Any], bool]) -> E | None:
        matches = self._query(predicate)
        if not matches:
            return None
        return min(matches, key=lambda e: e.created_at)
