"""
Application Configuration - Central configuration management.

This module provides configuration management for the application,
including environment variables, feature flags, and runtime settings.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class StorageConfig:
    """Storage configuration."""

    backend: str = "memory"
    # Upper bound on rows returned by a single paged query
    max_page_size: int = 100

    @classmethod
    def from_env(cls) -> "StorageConfig":
        """Create configuration from environment variables."""
        return cls(
            backend=os.getenv("STORAGE_BACKEND", "memory"),
            max_page_size=int(os.getenv("STORAGE_MAX_PAGE_SIZE", "100")),
        )


@dataclass
class ConcurrencyConfig:
    """Retry policy for optimistic-concurrency conflicts."""

    max_retries: int = 5
    base_delay: float = 0.01  # seconds
    max_delay: float = 0.5
    jitter: bool = True

    @classmethod
    def from_env(cls) -> "ConcurrencyConfig":
        """Create configuration from environment variables."""
        return cls(
            max_retries=int(os.getenv("CONCURRENCY_MAX_RETRIES", "5")),
            base_delay=float(os.getenv("CONCURRENCY_BASE_DELAY", "0.01")),
            max_delay=float(os.getenv("CONCURRENCY_MAX_DELAY", "0.5")),
            jitter=_env_bool("CONCURRENCY_JITTER", "true"),
        )


@dataclass
class EventDispatchConfig:
    """Domain event dispatch configuration."""

    # Number of recently dispatched event ids remembered for de-duplication
    dedupe_window: int = 10000
    # Delivered events and sent notifications kept for inspection
    history_limit: int = 1000
    enable_notifications: bool = True

    @classmethod
    def from_env(cls) -> "EventDispatchConfig":
        """Create configuration from environment variables."""
        return cls(
            dedupe_window=int(os.getenv("EVENTS_DEDUPE_WINDOW", "10000")),
            history_limit=int(os.getenv("EVENTS_HISTORY_LIMIT", "1000")),
            enable_notifications=_env_bool("EVENTS_ENABLE_NOTIFICATIONS", "true"),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json_format: bool = False
    file: str | None = None
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables."""
        file_path = os.getenv("LOG_FILE")
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            json_format=_env_bool("LOG_JSON", "false"),
            file=file_path if file_path else None,
            max_bytes=int(os.getenv("LOG_MAX_BYTES", "10485760")),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        )


@dataclass
class FeatureFlags:
    """Feature flags for the application."""

    enable_tracing: bool = False
    enable_sprints: bool = True
    enable_custom_fields: bool = True

    @classmethod
    def from_env(cls) -> "FeatureFlags":
        """Create configuration from environment variables."""
        return cls(
            enable_tracing=_env_bool("FEATURE_TRACING", "false"),
            enable_sprints=_env_bool("FEATURE_SPRINTS", "true"),
            enable_custom_fields=_env_bool("FEATURE_CUSTOM_FIELDS", "true"),
        )


@dataclass
class ApplicationConfig:
    """Main application configuration."""

    environment: Environment = Environment.DEVELOPMENT
    storage: StorageConfig = field(default_factory=StorageConfig)
    concurrency: ConcurrencyConfig = field(default_factory=ConcurrencyConfig)
    events: EventDispatchConfig = field(default_factory=EventDispatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    features: FeatureFlags = field(default_factory=FeatureFlags)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "environment": self.environment.value,
            "storage": {
                "backend": self.storage.backend,
                "max_page_size": self.storage.max_page_size,
            },
            "concurrency": {
                "max_retries": self.concurrency.max_retries,
                "base_delay": self.concurrency.base_delay,
                "max_delay": self.concurrency.max_delay,
                "jitter": self.concurrency.jitter,
            },
            "events": {
                "dedupe_window": self.events.dedupe_window,
                "history_limit": self.events.history_limit,
                "enable_notifications": self.events.enable_notifications,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "json_format": self.logging.json_format,
                "file": self.logging.file,
                "max_bytes": self.logging.max_bytes,
                "backup_count": self.logging.backup_count,
            },
            "features": {
                "enable_tracing": self.features.enable_tracing,
                "enable_sprints": self.features.enable_sprints,
                "enable_custom_fields": self.features.enable_custom_fields,
            },
        }

    def validate(self) -> bool:
        """
        Validate the configuration.

        Returns:
            True if valid, raises exception otherwise
        """
        if self.storage.backend != "memory":
            raise ValueError(f"Unsupported storage backend: {self.storage.backend}")
        if not 1 <= self.storage.max_page_size <= 1000:
            raise ValueError("Max page size must be between 1 and 1000")

        if self.concurrency.max_retries < 0:
            raise ValueError("Max retries cannot be negative")
        if self.concurrency.base_delay < 0 or self.concurrency.max_delay < 0:
            raise ValueError("Retry delays cannot be negative")
        if self.concurrency.max_delay < self.concurrency.base_delay:
            raise ValueError("Max retry delay cannot be below the base delay")

        if self.events.dedupe_window < 1:
            raise ValueError("Event dedupe window must be positive")
        if self.events.history_limit < 0:
            raise ValueError("Event history limit cannot be negative")

        if self.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {self.logging.level}")

        if self.environment == Environment.PRODUCTION and self.logging.level.upper() == "DEBUG":
            raise ValueError("Debug logging should be disabled in production")

        return True


# Global configuration singleton
_config: ApplicationConfig | None = None


def get_config() -> ApplicationConfig:
    """
    Get the application configuration singleton.

    Returns:
        ApplicationConfig: The application configuration
    """
    global _config
    if _config is None:
        from task_tracker.application.config_loader import ConfigLoader

        _config = ConfigLoader.from_env()
    return _config


def set_config(config: ApplicationConfig) -> None:
    """
    Set the application configuration.

    Args:
        config: The new configuration
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the configuration singleton."""
    global _config
    _config = None
