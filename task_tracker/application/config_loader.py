"""
Configuration Loader - Handles IO operations for configuration management.

This module is responsible for loading and saving configuration from/to
various sources (YAML files, environment variables, .env files) while keeping
the ApplicationConfig class focused on data representation and validation.
"""

import os
from dataclasses import fields, replace
from typing import Any, TypeVar

import yaml
from dotenv import load_dotenv

from task_tracker.application.config import (
    ApplicationConfig,
    ConcurrencyConfig,
    Environment,
    EventDispatchConfig,
    FeatureFlags,
    LoggingConfig,
    StorageConfig,
)

SectionT = TypeVar("SectionT")


def _merge_section(section: SectionT, data: dict[str, Any] | None) -> SectionT:
    """Overlay known keys from a YAML mapping onto a config section."""
    if not data:
        return section
    known = {f.name for f in fields(section)}  # type: ignore[arg-type]
    unknown = set(data) - known
    if unknown:
        raise ValueError(
            f"Unknown keys in {type(section).__name__}: {', '.join(sorted(unknown))}"
        )
    return replace(section, **data)  # type: ignore[type-var]


class ConfigLoader:
    """Handles loading and saving of configuration from various sources."""

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> ApplicationConfig:
        """
        Create configuration from environment variables.

        Variables from a ``.env`` file are loaded first without overriding
        variables already set in the process environment.

        Args:
            dotenv_path: Explicit .env file; searched for upwards when omitted

        Returns:
            ApplicationConfig: Configuration loaded from environment
        """
        load_dotenv(dotenv_path, override=False)

        env_str = os.getenv("ENVIRONMENT", "development")
        try:
            environment = Environment(env_str)
        except ValueError:
            raise ValueError(f"Invalid environment: {env_str}")

        return ApplicationConfig(
            environment=environment,
            storage=StorageConfig.from_env(),
            concurrency=ConcurrencyConfig.from_env(),
            events=EventDispatchConfig.from_env(),
            logging=LoggingConfig.from_env(),
            features=FeatureFlags.from_env(),
        )

    @classmethod
    def from_yaml(cls, path: str) -> ApplicationConfig:
        """
        Load configuration from YAML file.

        Sections and keys left out of the file keep their defaults.

        Args:
            path: Path to YAML configuration file

        Returns:
            ApplicationConfig: Configuration loaded from YAML file
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        config = ApplicationConfig()

        # Handle empty or null YAML files
        if not data:
            return config

        if "environment" in data:
            config.environment = Environment(data["environment"])

        config.storage = _merge_section(config.storage, data.get("storage"))
        config.concurrency = _merge_section(config.concurrency, data.get("concurrency"))
        config.events = _merge_section(config.events, data.get("events"))
        config.logging = _merge_section(config.logging, data.get("logging"))
        config.features = _merge_section(config.features, data.get("features"))

        return config

    @classmethod
    def to_yaml(cls, config: ApplicationConfig) -> str:
        """
        Convert configuration to YAML string.

        Args:
            config: ApplicationConfig instance to convert

        Returns:
            str: YAML representation of the configuration
        """
        return yaml.dump(config.to_dict(), default_flow_style=False)

    @classmethod
    def save_to_yaml(cls, config: ApplicationConfig, path: str) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: ApplicationConfig instance to save
            path: Path to save the YAML file to
        """
        yaml_content = cls.to_yaml(config)
        with open(path, "w") as f:
            f.write(yaml_content)
