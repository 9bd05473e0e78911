"""Logging configuration for RosterDesk.

Settings come from environment variables, layered over defaults chosen for
the detected runtime (development, testing, CI or production).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_TRUE_VALUES = ("true", "1", "yes")


class Environment(Enum):
    """Runtime environment the console is running in."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"
    CI = "ci"


@dataclass
class LogConfig:
    """Logging configuration container."""

    level: str = "INFO"

    # JSON lines on stderr instead of human-readable output
    json_format: bool = False

    # Colourised console output through rich
    use_rich: bool = True

    # Redact passwords, tokens and email addresses
    mask_sensitive: bool = True

    # Optional rotating log file (always JSON)
    log_file: Path | None = None
    max_file_size: int = 5 * 1024 * 1024
    backup_count: int = 3

    @classmethod
    def from_env(cls) -> LogConfig:
        """Build a configuration from environment variables.

        Environment variables:
            LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
            LOG_JSON: emit JSON lines (true/false)
            LOG_RICH: use the rich console handler (true/false)
            LOG_MASK_SENSITIVE: redact sensitive values (true/false)
            LOG_FILE: path of a rotating log file

        Returns:
            LogConfig for the current process
        """
        config = cls.defaults_for(detect_environment())

        if level := os.getenv("LOG_LEVEL"):
            config.level = level.upper()

        if json_format := os.getenv("LOG_JSON"):
            config.json_format = json_format.lower() in _TRUE_VALUES

        if use_rich := os.getenv("LOG_RICH"):
            config.use_rich = use_rich.lower() in _TRUE_VALUES

        if mask_sensitive := os.getenv("LOG_MASK_SENSITIVE"):
            config.mask_sensitive = mask_sensitive.lower() in _TRUE_VALUES

        if log_file := os.getenv("LOG_FILE"):
            config.log_file = Path(log_file).expanduser()

        return config

    @classmethod
    def defaults_for(cls, env: Environment) -> LogConfig:
        """Return the baseline configuration for an environment."""
        if env == Environment.PRODUCTION:
            return cls(level="INFO", json_format=True, use_rich=False)
        if env == Environment.CI:
            return cls(level="INFO", use_rich=False)
        if env == Environment.TESTING:
            return cls(level="DEBUG", use_rich=False)
        return cls(level="DEBUG", use_rich=True)


def detect_environment() -> Environment:
    """Work out which environment the process runs in."""
    if os.getenv("CI") or os.getenv("GITHUB_ACTIONS"):
        return Environment.CI

    env_name = os.getenv("ENVIRONMENT", os.getenv("ENV", "")).lower()
    if env_name in ("prod", "production"):
        return Environment.PRODUCTION
    if env_name in ("test", "testing") or os.getenv("PYTEST_CURRENT_TEST"):
        return Environment.TESTING

    return Environment.DEVELOPMENT


_config: LogConfig | None = None


def get_config() -> LogConfig:
    """Return the active logging configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = LogConfig.from_env()
    return _config


def set_config(config: LogConfig) -> None:
    """Replace the active logging configuration."""
    global _config
    _config = config


def reset_config() -> None:
    """Forget the active configuration so it is reloaded from the environment."""
    global _config
    _config = None
