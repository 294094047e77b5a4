"""User Entity - a person who reports, owns and works on tasks"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ..events import UserCreated
from ..result import Result
from ..value_objects import Email
from .base import AuditableEntity

MAX_DISPLAY_NAME_LENGTH = 100


def _validate_display_name(display_name: str | None) -> str | None:
    if display_name is None or not display_name.strip():
        return "Display name cannot be empty"
    if len(display_name) > MAX_DISPLAY_NAME_LENGTH:
        return f"Display name cannot exceed {MAX_DISPLAY_NAME_LENGTH} characters"
    return None


@dataclass(kw_only=True, eq=False)
class User(AuditableEntity):
    """System user. Credentials live with the external identity provider."""

    email: Email
    display_name: str
    avatar_url: str | None = None
    is_active: bool = True

    @classmethod
    def create(
        cls, email: Email, display_name: str, created_by: UUID | None = None
    ) -> Result[User]:
        """Create a user; self-registration leaves ``created_by`` empty and
        stamps the new user as its own creator."""
        error = _validate_display_name(display_name)
        if error:
            return Result.failure(error)

        user = cls(email=email, display_name=display_name.strip())
        user.set_created(created_by or user.id)

        return Result.success(
            user,
            events=[UserCreated(user_id=user.id, email=email.value, display_name=user.display_name)],
        )

    def update_profile(
        self, display_name: str, avatar_url: str | None, updated_by: UUID
    ) -> Result[None]:
        error = _validate_display_name(display_name)
        if error:
            return Result.failure(error)

        self.display_name = display_name.strip()
        self.avatar_url = avatar_url.strip() if avatar_url else None
        self.set_updated(updated_by)
        return Result.success()

    def deactivate(self, deactivated_by: UUID) -> None:
        self.is_active = False
        self.set_updated(deactivated_by)

    def activate(self, activated_by: UUID) -> None:
        self.is_active = True
        self.set_updated(activated_by)

    def __str__(self) -> str:
        return f"User({self.display_name} <{self.email}>)"
