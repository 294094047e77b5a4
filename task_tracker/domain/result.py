"""
Result type for domain operations.

Domain operations never raise for expected rule violations. They return a
Result that is either a success (optionally carrying a value) or a failure
carrying a typed DomainError. Successful mutations also carry the domain
events they produced, which the caller hands to the unit of work.
"""

from __future__ import annotations

# Standard library imports
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .exceptions import InvalidResultAccessError

if TYPE_CHECKING:
    from .events import DomainEvent

T = TypeVar("T")


class ErrorKind(Enum):
    """Category of an expected domain failure."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"


@dataclass(frozen=True)
class DomainError:
    """A recoverable domain failure with a human-readable message."""

    message: str
    kind: ErrorKind = ErrorKind.VALIDATION

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a domain operation.

    Use the ``success``/``failure``/``business_rule`` constructors rather than
    instantiating directly.
    """

    is_success: bool
    _value: Any = None
    error: DomainError | None = None
    events: tuple[DomainEvent, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.is_success and self.error is not None:
            raise ValueError("Success result cannot have an error")
        if not self.is_success and (self.error is None or not self.error.message):
            raise ValueError("Failure result must have an error message")
        if not self.is_success and self.events:
            raise ValueError("Failure result cannot carry domain events")

    @classmethod
    def success(cls, value: T | None = None, events: Iterable[DomainEvent] = ()) -> Result[T]:
        """Create a successful result."""
        return cls(is_success=True, _value=value, events=tuple(events))

    @classmethod
    def failure(cls, message: str, kind: ErrorKind = ErrorKind.VALIDATION) -> Result[T]:
        """Create a failed result."""
        return cls(is_success=False, error=DomainError(message, kind))

    @classmethod
    def business_rule(cls, message: str) -> Result[T]:
        """Create a failed result for a cross-entity rule violation."""
        return cls.failure(message, ErrorKind.BUSINESS_RULE)

    @classmethod
    def from_error(cls, error: DomainError) -> Result[T]:
        """Propagate an existing error into a result of another type."""
        return cls(is_success=False, error=error)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def value(self) -> T:
        """The success value; reading it on a failure is a programming error."""
        if not self.is_success:
            raise InvalidResultAccessError(
                f"Cannot access value of a failed result: {self.error}"
            )
        return self._value

    @property
    def error_message(self) -> str:
        return self.error.message if self.error else ""

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.success({self._value!r}, events={len(self.events)})"
        return f"Result.failure({self.error_message!r}, kind={self.error.kind.value})"  # type: ignore[union-attr]
