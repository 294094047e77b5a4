"""
In-Memory Database

Process-local storage engine for the task tracker aggregates. It keeps one
committed snapshot per aggregate, checks optimistic-concurrency versions and
unique indexes, and applies a change set atomically under a lock.

Two guarantees protect the per-project task-number sequence:
    - a project row only changes if its stored version still matches the
      version the writer loaded, so two writers that both advanced
      ``next_task_number`` from the same value cannot both commit;
    - the (project, sequence number) index rejects a second task holding
      a number that is already taken.
Both failures are retryable.
"""

# Standard library imports
import copy
import logging
import threading
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar
from uuid import UUID

# Local imports
from task_tracker.application.interfaces.exceptions import (
    ConcurrencyError,
    DuplicateEntityError,
)
from task_tracker.domain.entities import AuditableEntity

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=AuditableEntity)

USERS = "users"
WORKSPACES = "workspaces"
PROJECTS = "projects"
TASKS = "tasks"

TASK_NUMBER_INDEX = "task_number"


@dataclass(frozen=True)
class UniqueIndex:
    name: str
    key: Callable[[Any], Hashable]
    # Whether a collision means "lost a race, reload and try again"
    retryable: bool = False


INDEXES: dict[str, tuple[UniqueIndex, ...]] = {
    USERS: (UniqueIndex("user_email", lambda u: u.email.value),),
    WORKSPACES: (UniqueIndex("workspace_slug", lambda w: w.slug),),
    PROJECTS: (
        UniqueIndex("project_slug", lambda p: (p.workspace_id, p.slug)),
        UniqueIndex("project_prefix", lambda p: (p.workspace_id, p.prefix)),
    ),
    TASKS: (
        UniqueIndex(TASK_NUMBER_INDEX, lambda t: (t.project_id, t.sequence_number), retryable=True),
        UniqueIndex("task_friendly_id", lambda t: (t.project_id, t.friendly_id.value), retryable=True),
    ),
}


@dataclass(frozen=True)
class Write:
    """One aggregate write. ``expected_version`` is None for an insert."""

    table: str
    entity: AuditableEntity
    expected_version: int | None = None

    @property
    def is_insert(self) -> bool:
        return self.expected_version is None


class InMemoryDatabase:
    """
    Thread-safe in-memory store of committed aggregates.

    Readers always receive deep copies; the stored snapshots are never
    handed out, so uncommitted changes stay private to the unit of work that
    made them.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: dict[str, dict[UUID, AuditableEntity]] = {name: {} for name in INDEXES}
        self._indexes: dict[str, dict[Hashable, UUID]] = {
            index.name: {} for indexes in INDEXES.values() for index in indexes
        }

    def get(self, table: str, entity_id: UUID) -> AuditableEntity | None:
        """Detached copy of a committed aggregate, or None."""
        with self._lock:
            stored = self._table(table).get(entity_id)
            return copy.deepcopy(stored) if stored is not None else None

    def find(
        self, table: str, predicate: Callable[[Any], bool] | None = None
    ) -> list[AuditableEntity]:
        """Detached copies of all committed aggregates matching ``predicate``."""
        with self._lock:
            rows = [e for e in self._table(table).values() if predicate is None or predicate(e)]
            return copy.deepcopy(rows)

    def version_of(self, table: str, entity_id: UUID) -> int | None:
        with self._lock:
            stored = self._table(table).get(entity_id)
            return stored.version if stored is not None else None

    def count(self, table: str) -> int:
        with self._lock:
            return len(self._table(table))

    def apply(self, writes: Iterable[Write]) -> None:
        """
        Atomically apply a change set.

        Every write is checked before anything is stored: versions first,
        then unique indexes. On success each written entity (the caller's
        object included) carries its new version.

        Args:
            writes: Inserts and updates to apply together

        Raises:
            ConcurrencyError: If an update's expected version is stale
            DuplicateEntityError: If an insert reuses an id or a write violates a unique index
        """
        writes = list(writes)
        if not writes:
            return

        with self._lock:
            self._check_versions(writes)
            staged_keys = self._check_unique_indexes(writes)

            for write in writes:
                new_version = 1 if write.is_insert else write.expected_version + 1  # type: ignore[operator]
                write.entity.version = new_version
                self._tables[write.table][write.entity.id] = copy.deepcopy(write.entity)

            for index_name, entries in staged_keys.items():
                index = self._indexes[index_name]
                for entity_id, (old_key, new_key) in entries.items():
                    if old_key is not None and index.get(old_key) == entity_id:
                        del index[old_key]
                    index[new_key] = entity_id

        logger.debug(
            "Applied change set",
            extra={"writes": len(writes), "tables": sorted({w.table for w in writes})},
        )

    def clear(self) -> None:
        with self._lock:
            for table in self._tables.values():
                table.clear()
            for index in self._indexes.values():
                index.clear()

    # Internals (callers hold the lock)

    def _table(self, table: str) -> dict[UUID, AuditableEntity]:
        try:
            return self._tables[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}") from None

    def _check_versions(self, writes: list[Write]) -> None:
        for write in writes:
            stored = self._table(write.table).get(write.entity.id)
            entity_type = type(write.entity).__name__

            if write.is_insert:
                if stored is not None:
                    raise DuplicateEntityError(entity_type, write.entity.id, index="primary_key")
                continue

            actual = stored.version if stored is not None else None
            if actual != write.expected_version:
                raise ConcurrencyError(
                    entity_type, write.entity.id, write.expected_version, actual
                )

    def _check_unique_indexes(
        self, writes: list[Write]
    ) -> dict[str, dict[UUID, tuple[Hashable | None, Hashable]]]:
        """Return the index changes the writes imply, raising on any collision."""
        staged: dict[str, dict[UUID, tuple[Hashable | None, Hashable]]] = {}

        for write in writes:
            stored = self._tables[write.table].get(write.entity.id)
            for index in INDEXES[write.table]:
                old_key = index.key(stored) if stored is not None else None
                staged.setdefault(index.name, {})[write.entity.id] = (old_key, index.key(write.entity))

        for index_name, entries in staged.items():
            index_def = next(i for ixs in INDEXES.values() for i in ixs if i.name == index_name)
            moving_away = {old for old, _ in entries.values() if old is not None}
            claimed: dict[Hashable, UUID] = {}

            for entity_id, (old_key, new_key) in entries.items():
                owner = self._indexes[index_name].get(new_key)
                taken_in_store = (
                    owner is not None and owner != entity_id and new_key not in moving_away
                )
                taken_in_batch = claimed.get(new_key, entity_id) != entity_id
                if taken_in_store or taken_in_batch:
                    write = next(w for w in writes if w.entity.id == entity_id)
                    raise DuplicateEntityError(
                        type(write.entity).__name__,
                        entity_id,
                        index=index_name,
                        retryable=index_def.retryable,
                    )
                claimed[new_key] = entity_id

        return staged
