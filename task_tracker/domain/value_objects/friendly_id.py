"""FriendlyId value object - human-readable task identifiers such as ``ENG-42``."""

from __future__ import annotations

import re

from ..result import Result
from .base import ComparableValueObject

MAX_PREFIX_LENGTH = 10

_SEQUENCE_PATTERN = re.compile(r"[0-9]+")


class FriendlyId(ComparableValueObject):
    """Immutable ``PREFIX-N`` task identifier scoped to one project."""

    __slots__ = ("_project_prefix", "_sequence_number")

    def __init__(self, project_prefix: str, sequence_number: int) -> None:
        self._project_prefix = project_prefix
        self._sequence_number = sequence_number

    @classmethod
    def create(cls, project_prefix: str | None, sequence_number: int) -> Result[FriendlyId]:
        """Build a FriendlyId from a project prefix and sequence number.

        Args:
            project_prefix: Up to 10 letters/digits; stored uppercase
            sequence_number: Positive per-project task number

        Returns:
            Result holding the FriendlyId, or a validation failure
        """
        prefix_error = validate_prefix(project_prefix)
        if prefix_error:
            return Result.failure(prefix_error)

        if (
            isinstance(sequence_number, bool)
            or not isinstance(sequence_number, int)
            or sequence_number <= 0
        ):
            return Result.failure("Sequence number must be positive")

        return Result.success(cls(project_prefix.upper(), sequence_number))  # type: ignore[union-attr]

    @classmethod
    def parse(cls, raw: str | None) -> Result[FriendlyId]:
        """Parse the exact ``PREFIX-N`` format.

        Rejects anything without exactly one hyphen, a prefix-only or
        number-only string, and a leading hyphen (empty prefix).
        """
        if raw is None or not raw.strip():
            return Result.failure("Friendly ID cannot be empty")

        parts = raw.split("-")
        if len(parts) != 2:
            return Result.failure("Invalid friendly ID format. Expected format: PREFIX-NUMBER")

        prefix, number = parts
        if not _SEQUENCE_PATTERN.fullmatch(number):
            return Result.failure("Invalid sequence number in friendly ID")

        return cls.create(prefix, int(number))

    @property
    def project_prefix(self) -> str:
        return self._project_prefix

    @property
    def sequence_number(self) -> int:
        return self._sequence_number

    @property
    def value(self) -> str:
        return f"{self._project_prefix}-{self._sequence_number}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FriendlyId):
            return False
        return (self._project_prefix, self._sequence_number) == (
            other._project_prefix,
            other._sequence_number,
        )

    def __lt__(self, other: FriendlyId) -> bool:
        """Order by prefix, then numerically by sequence."""
        if not isinstance(other, FriendlyId):
            raise TypeError(f"Cannot compare FriendlyId and {type(other)}")
        return (self._project_prefix, self._sequence_number) < (
            other._project_prefix,
            other._sequence_number,
        )

    def __hash__(self) -> int:
        return hash((self._project_prefix, self._sequence_number))

    def __repr__(self) -> str:
        return f"FriendlyId('{self.value}')"

    def __str__(self) -> str:
        return self.value


def validate_prefix(prefix: str | None) -> str | None:
    """Return an error message if ``prefix`` is not a valid project prefix."""
    if prefix is None or not prefix.strip():
        return "Project prefix cannot be empty"
    if len(prefix) > MAX_PREFIX_LENGTH:
        return f"Project prefix cannot exceed {MAX_PREFIX_LENGTH} characters"
    if not prefix.isalnum():
        return "Project prefix can only contain letters and digits"
    return None
