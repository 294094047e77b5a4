"""
Structured Logging for the Task Tracker

JSON structured logs with correlation IDs, tracker-specific log fields
(workspace, project, task), OpenTelemetry trace context and sensitive data
masking.
"""

import json
import logging
import logging.handlers
import re
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from opentelemetry import trace

from task_tracker.application.config import LoggingConfig

# Context variables for correlation tracking
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)

TRACKER_FIELDS = ("workspace_id", "project_id", "task_id", "friendly_id", "operation_type")

EMAIL_PATTERN = re.compile(r"\b([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")

_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "correlation_id",
    "user_id",
    "trace_id",
    "span_id",
    *TRACKER_FIELDS,
}


@dataclass
class SensitiveDataConfig:
    """Configuration for sensitive data masking."""

    # Credentials and secrets
    secret_patterns: list[str] = field(
        default_factory=lambda: [
            r"api[_-]?key",
            r"secret[_-]?key",
            r"access[_-]?token",
            r"refresh[_-]?token",
            r"bearer[_-]?token",
            r"authorization",
        ]
    )

    mask_emails: bool = True

    # Replacement text
    mask_replacement: str = "***MASKED***"

    # Fields to completely exclude from logs
    excluded_fields: set[str] = field(
        default_factory=lambda: {"password", "passwd", "password_hash", "secret", "token"}
    )


def _current_trace_ids() -> tuple[str | None, str | None]:
    span = trace.get_current_span()
    if not span.is_recording():
        return None, None
    span_context = span.get_span_context()
    trace_id = format(span_context.trace_id, "032x") if span_context.trace_id else None
    span_id = format(span_context.span_id, "016x") if span_context.span_id else None
    return trace_id, span_id


class TaskTrackerLogRecord(logging.LogRecord):
    """Log record carrying correlation, user and trace context."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)

        self.correlation_id = correlation_id_var.get()
        self.user_id = user_id_var.get()
        self.trace_id, self.span_id = _current_trace_ids()


class SensitiveDataMasker:
    """Masks sensitive data in log messages and extra fields."""

    def __init__(self, config: SensitiveDataConfig) -> None:
        self.config = config
        self._compiled_patterns = [
            # key:value, key=value and "key": "value" pairs
            re.compile(rf'("{pattern}":\s*"[^"]*"|{pattern}=\S+|{pattern}:\s*\S+)', re.IGNORECASE)
            for pattern in config.secret_patterns
        ]

    def mask_message(self, message: str) -> str:
        """Mask sensitive data in log message."""
        masked_message = message

        for pattern in self._compiled_patterns:
            masked_message = pattern.sub(lambda m: self._replace_value(m.group(0)), masked_message)

        if self.config.mask_emails:
            masked_message = EMAIL_PATTERN.sub(r"\1***@\2", masked_message)

        return masked_message

    def mask_extra_fields(self, extra: dict[str, Any]) -> dict[str, Any]:
        """Mask sensitive data in extra log fields."""
        if not extra:
            return extra

        masked_extra: dict[str, Any] = {}

        for key, value in extra.items():
            if key.lower() in self.config.excluded_fields:
                continue

            if self._is_sensitive_field(key):
                masked_extra[key] = self.config.mask_replacement
            elif isinstance(value, str):
                masked_extra[key] = self.mask_message(value)
            elif isinstance(value, dict):
                masked_extra[key] = self.mask_extra_fields(value)
            else:
                masked_extra[key] = value

        return masked_extra

    def _is_sensitive_field(self, field_name: str) -> bool:
        field_lower = field_name.lower()
        return any(re.search(pattern, field_lower) for pattern in self.config.secret_patterns)

    def _replace_value(self, match: str) -> str:
        if ":" in match:
            key_part = match.split(":", 1)[0]
            return f'{key_part}: "{self.config.mask_replacement}"'
        elif "=" in match:
            key_part = match.split("=", 1)[0]
            return f"{key_part}={self.config.mask_replacement}"
        else:
            return self.config.mask_replacement


class TaskTrackerJSONFormatter(logging.Formatter):
    """JSON formatter for structured task tracker logs."""

    def __init__(
        self,
        sensitive_data_config: SensitiveDataConfig | None = None,
        include_extra: bool = True,
        sort_keys: bool = True,
    ):
        super().__init__()
        self.include_extra = include_extra
        self.sort_keys = sort_keys
        self.masker = SensitiveDataMasker(sensitive_data_config or SensitiveDataConfig())

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self.masker.mask_message(record.getMessage()),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread": record.thread,
            "process": record.process,
        }

        for context_field in ("correlation_id", "user_id", "trace_id", "span_id"):
            value = getattr(record, context_field, None)
            if value:
                log_entry[context_field] = value

        tracker_fields = {
            name: self._serialize_value(getattr(record, name))
            for name in TRACKER_FIELDS
            if getattr(record, name, None)
        }
        if tracker_fields:
            log_entry["tracker"] = tracker_fields

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_extra:
            extra = {
                key: self._serialize_value(value)
                for key, value in record.__dict__.items()
                if key not in _STANDARD_FIELDS and not key.startswith("_")
            }
            if extra:
                log_entry["extra"] = self.masker.mask_extra_fields(extra)

        return json.dumps(log_entry, sort_keys=self.sort_keys, default=self._serialize_value)

    def _serialize_value(self, value: Any) -> Any:
        """Serialize complex values for JSON output."""
        if isinstance(value, (UUID, datetime)):
            return str(value)
        elif isinstance(value, Enum):
            return value.value
        elif isinstance(value, (set, frozenset, tuple)):
            return list(value)
        elif hasattr(value, "__dict__"):
            return str(value)
        return value


class ContextFilter(logging.Filter):
    """Attach correlation and trace context to records built by another record factory."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = correlation_id_var.get()
        if not hasattr(record, "user_id"):
            record.user_id = user_id_var.get()
        if not hasattr(record, "trace_id"):
            record.trace_id, record.span_id = _current_trace_ids()
        return True


# Correlation ID management
def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


@contextmanager
def correlation_context(correlation_id: str | UUID | None = None) -> Generator[str, None, None]:
    """Context manager for correlation ID scope."""
    value = str(correlation_id) if correlation_id is not None else generate_correlation_id()

    token = correlation_id_var.set(value)
    try:
        yield value
    finally:
        correlation_id_var.reset(token)


@contextmanager
def user_context(user_id: str | UUID) -> Generator[None, None, None]:
    """Context manager for acting-user scope."""
    token = user_id_var.set(str(user_id))
    try:
        yield
    finally:
        user_id_var.reset(token)


def mask_sensitive_data(
    data: str | dict[str, Any], config: SensitiveDataConfig | None = None
) -> str | dict[str, Any]:
    """Utility function to mask sensitive data."""
    masker = SensitiveDataMasker(config or SensitiveDataConfig())

    if isinstance(data, str):
        return masker.mask_message(data)
    return masker.mask_extra_fields(data)


def setup_logging(
    config: LoggingConfig | None = None,
    sensitive_data_config: SensitiveDataConfig | None = None,
) -> None:
    """
    Configure the root logger.

    Args:
        config: Level, format and optional rotating log file
        sensitive_data_config: Masking rules for the JSON formatter
    """
    config = config or LoggingConfig()

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter: logging.Formatter
    if config.json_format:
        formatter = TaskTrackerJSONFormatter(sensitive_data_config)
    else:
        formatter = logging.Formatter(config.format)

    context_filter = ContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    root_logger.addHandler(console_handler)

    if config.file:
        file_handler = logging.handlers.RotatingFileHandler(
            config.file, maxBytes=config.max_bytes, backupCount=config.backup_count
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(context_filter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(getattr(logging, config.level.upper()))
    logging.setLogRecordFactory(TaskTrackerLogRecord)

    logging.getLogger(__name__).info(
        "Structured logging configured",
        extra={"json_format": config.json_format, "log_file": config.file},
    )
