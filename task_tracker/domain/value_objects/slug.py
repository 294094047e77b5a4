"""Slug value object for URL-friendly identifiers."""

from __future__ import annotations

import re

from ..result import Result
from .base import ValueObject

MIN_SLUG_LENGTH = 2
MAX_SLUG_LENGTH = 50

_REPEATED_HYPHENS = re.compile(r"-{2,}")


class Slug(ValueObject):
    """Immutable lowercase alphanumeric-with-hyphens identifier."""

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        self._value = value

    @classmethod
    def create(cls, raw: str | None) -> Result[Slug]:
        """Normalize arbitrary text into a slug.

        ``"My Project"`` becomes ``"my-project"``. Every non-alphanumeric
        character turns into a hyphen, runs of hyphens collapse into one, and
        hyphens at either end are trimmed. The normalized slug must be 2-50
        characters long.
        """
        if raw is None or not raw.strip():
            return Result.failure("Slug cannot be empty")

        slug = cls.normalize(raw)

        if len(slug) < MIN_SLUG_LENGTH:
            return Result.failure(f"Slug must be at least {MIN_SLUG_LENGTH} characters long")

        if len(slug) > MAX_SLUG_LENGTH:
            return Result.failure(f"Slug cannot exceed {MAX_SLUG_LENGTH} characters")

        return Result.success(cls(slug))

    @staticmethod
    def normalize(raw: str) -> str:
        lowered = raw.strip().lower()
        replaced = "".join(ch if ch.isalnum() else "-" for ch in lowered)
        return _REPEATED_HYPHENS.sub("-", replaced).strip("-")

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Slug):
            return False
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Slug('{self._value}')"

    def __str__(self) -> str:
        return self._value
