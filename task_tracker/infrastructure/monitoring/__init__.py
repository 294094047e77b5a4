"""Logging and observability."""

from .logging import (
    SensitiveDataConfig,
    SensitiveDataMasker,
    TaskTrackerJSONFormatter,
    correlation_context,
    get_correlation_id,
    mask_sensitive_data,
    setup_logging,
    user_context,
)

__all__ = [
    "SensitiveDataConfig",
    "SensitiveDataMasker",
    "TaskTrackerJSONFormatter",
    "correlation_context",
    "get_correlation_id",
    "mask_sensitive_data",
    "setup_logging",
    "user_context",
]
