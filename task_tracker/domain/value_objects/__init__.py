"""Immutable, self-validating value objects."""

from .email import Email
from .friendly_id import FriendlyId
from .slug import Slug

__all__ = ["Email", "FriendlyId", "Slug"]
