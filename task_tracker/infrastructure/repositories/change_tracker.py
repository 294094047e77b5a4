"""
Change Tracker

Identity map and change detection for one unit of work. Every aggregate a
repository hands out is registered here together with a snapshot of its
state at load time; ``pending_writes`` compares the live objects against
those snapshots to decide what has to be written.
"""

from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any
from uuid import UUID

from task_tracker.application.interfaces.exceptions import DuplicateEntityError
from task_tracker.domain.entities import AuditableEntity
from task_tracker.infrastructure.database import Write


@dataclass
class TrackedEntity:
    table: str
    entity: AuditableEntity
    # State at load time; None for an aggregate added in this unit of work
    snapshot: dict[str, Any] | None
    loaded_version: int | None

    @property
    def is_new(self) -> bool:
        return self.snapshot is None

    @property
    def is_dirty(self) -> bool:
        return self.is_new or asdict(self.entity) != self.snapshot


class ChangeTracker:
    """Per-unit-of-work identity map keyed by (table, id)."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, UUID], TrackedEntity] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, table: str, entity_id: UUID) -> AuditableEntity | None:
        entry = self._entries.get((table, entity_id))
        return entry.entity if entry is not None else None

    def attach(self, table: str, entity: AuditableEntity) -> AuditableEntity:
        """
        Track a freshly loaded aggregate.

        If the same aggregate is already tracked, the tracked instance wins so
        that repeated lookups in one unit of work see the same object.
        """
        key = (table, entity.id)
        existing = self._entries.get(key)
        if existing is not None:
            return existing.entity

        self._entries[key] = TrackedEntity(table, entity, asdict(entity), entity.version)
        return entity

    def add(self, table: str, entity: AuditableEntity) -> None:
        """Track a new aggregate for insertion."""
        key = (table, entity.id)
        if key in self._entries:
            raise DuplicateEntityError(type(entity).__name__, entity.id, index="identity_map")
        self._entries[key] = TrackedEntity(table, entity, None, None)

    def added(self, table: str, predicate: Callable[[Any], bool]) -> list[AuditableEntity]:
        """New, not yet saved aggregates of ``table`` matching ``predicate``."""
        return [
            entry.entity
            for entry in self._entries.values()
            if entry.table == table and entry.is_new and predicate(entry.entity)
        ]

    def pending_writes(self) -> list[Write]:
        return [
            Write(entry.table, entry.entity, entry.loaded_version)
            for entry in self._entries.values()
            if entry.is_dirty
        ]

    def accept_changes(self) -> None:
        """Re-snapshot everything after a successful save."""
        for entry in self._entries.values():
            entry.snapshot = asdict(entry.entity)
            entry.loaded_version = entry.entity.version

    def clear(self) -> None:
        self._entries.clear()
