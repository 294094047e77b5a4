"""Base classes for domain entities."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(kw_only=True, eq=False)
class Entity:
    """Entity with a UUID identity; equality is by concrete type and id."""

    id: UUID = field(default_factory=uuid4)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return False
        if other is self:
            return True
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(kw_only=True, eq=False)
class AuditableEntity(Entity):
    """
    Entity carrying audit stamps, soft-delete state and a storage version.

    ``version`` belongs to the persistence layer: storage checks and bumps it
    on every write to detect lost updates. Domain logic never reads it.
    """

    created_at: datetime = field(default_factory=utc_now)
    created_by: UUID | None = None
    updated_at: datetime | None = None
    updated_by: UUID | None = None
    is_deleted: bool = False
    deleted_at: datetime | None = None
    deleted_by: UUID | None = None
    version: int = 1

    def set_created(self, user_id: UUID | None, timestamp: datetime | None = None) -> None:
        self.created_at = timestamp or utc_now()
        self.created_by = user_id

    def set_updated(self, user_id: UUID, timestamp: datetime | None = None) -> None:
        self.updated_at = timestamp or utc_now()
        self.updated_by = user_id

    def mark_as_deleted(self, deleted_by: UUID) -> None:
        self.is_deleted = True
        self.deleted_at = utc_now()
        self.deleted_by = deleted_by

    def restore(self) -> None:
        self.is_deleted = False
        self.deleted_at = None
        self.deleted_by = None
