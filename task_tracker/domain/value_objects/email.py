"""Email value object for user addresses."""

from __future__ import annotations

from ..result import Result
from .base import ValueObject

MAX_EMAIL_LENGTH = 256


class Email(ValueObject):
    """Immutable, lowercase-normalized e-mail address."""

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        self._value = value

    @classmethod
    def create(cls, raw: str | None) -> Result[Email]:
        """Validate and normalize an e-mail address.

        The address is trimmed and lowercased. It must contain an ``@`` that is
        neither the first nor the last character, followed later by a ``.``
        that is not directly after the ``@`` and not the last character.

        Args:
            raw: The raw address as entered

        Returns:
            Result holding the Email, or a validation failure
        """
        if raw is None or not raw.strip():
            return Result.failure("Email cannot be empty")

        email = raw.strip().lower()

        if len(email) > MAX_EMAIL_LENGTH:
            return Result.failure(f"Email cannot exceed {MAX_EMAIL_LENGTH} characters")

        at_index = email.find("@")
        if at_index <= 0 or at_index == len(email) - 1:
            return Result.failure("Invalid email format")

        dot_index = email.rfind(".")
        if dot_index <= at_index + 1 or dot_index == len(email) - 1:
            return Result.failure("Invalid email format")

        return Result.success(cls(email))

    @property
    def value(self) -> str:
        return self._value

    @property
    def domain(self) -> str:
        """Part after the ``@``."""
        return self._value.split("@", 1)[1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Email):
            return False
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Email('{self._value}')"

    def __str__(self) -> str:
        return self._value
