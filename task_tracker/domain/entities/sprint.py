"""Sprint Entity - time-boxed iteration for Scrum projects"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from ..enums import SprintState
from ..result import Result
from .base import AuditableEntity

if TYPE_CHECKING:
    from .project import Project

MAX_SPRINT_NAME_LENGTH = 100


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken as UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _validate_sprint(name: str | None, start_date: datetime, end_date: datetime) -> str | None:
    if name is None or not name.strip():
        return "Sprint name cannot be empty"
    if len(name) > MAX_SPRINT_NAME_LENGTH:
        return f"Sprint name cannot exceed {MAX_SPRINT_NAME_LENGTH} characters"
    if _as_utc(end_date) <= _as_utc(start_date):
        return "End date must be after start date"
    return None


@dataclass(kw_only=True, eq=False)
class Sprint(AuditableEntity):
    """
    Sprint entity.

    Lifecycle is linear: PLANNED -> ACTIVE -> COMPLETED, with no way back.
    """

    project_id: UUID
    name: str
    start_date: datetime
    end_date: datetime
    goal: str | None = None
    state: SprintState = SprintState.PLANNED

    @classmethod
    def create(
        cls,
        project: Project,
        name: str,
        start_date: datetime,
        end_date: datetime,
        created_by: UUID,
        goal: str | None = None,
    ) -> Result[Sprint]:
        error = _validate_sprint(name, start_date, end_date)
        if error:
            return Result.failure(error)

        sprint = cls(
            project_id=project.id,
            name=name.strip(),
            goal=goal.strip() if goal else None,
            start_date=_as_utc(start_date),
            end_date=_as_utc(end_date),
        )
        sprint.set_created(created_by)
        return Result.success(sprint)

    @property
    def is_active(self) -> bool:
        return self.state == SprintState.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.state == SprintState.COMPLETED

    def update(
        self,
        name: str,
        goal: str | None,
        start_date: datetime,
        end_date: datetime,
        updated_by: UUID,
    ) -> Result[None]:
        if self.is_completed:
            return Result.business_rule("Cannot modify a completed sprint")

        error = _validate_sprint(name, start_date, end_date)
        if error:
            return Result.failure(error)

        self.name = name.strip()
        self.goal = goal.strip() if goal else None
        self.start_date = _as_utc(start_date)
        self.end_date = _as_utc(end_date)
        self.set_updated(updated_by)
        return Result.success()

    def start(self, started_by: UUID) -> Result[None]:
        if self.is_active:
            return Result.business_rule("Sprint is already active")

        if self.is_completed:
            return Result.business_rule("Cannot start a completed sprint")

        self.state = SprintState.ACTIVE
        self.set_updated(started_by)
        return Result.success()

    def complete(self, completed_by: UUID) -> Result[None]:
        if self.is_completed:
            return Result.business_rule("Sprint is already completed")

        if not self.is_active:
            return Result.business_rule("Cannot complete an inactive sprint")

        self.state = SprintState.COMPLETED
        self.set_updated(completed_by)
        return Result.success()
