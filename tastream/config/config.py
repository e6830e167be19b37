"""
Configuration management for tastream.
Loads settings from environment variables with sensible defaults.

Recognized variables (a .env file in the working directory is honored):
    TASTREAM_LOG_LEVEL     DEBUG / INFO / WARNING / ERROR (default INFO)
    TASTREAM_LOG_DIR       directory for the daily log file (default "logs")
    TASTREAM_LOG_TO_FILE   true/false (default false)
    TASTREAM_MAX_PERIOD    largest accepted period (default 100000)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..errors import ConfigurationError
from .constants import MAX_PERIOD


_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off", "")


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False

    def __post_init__(self):
        level = self.level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError(
                f"Unknown log level: {self.level!r}. "
                f"Use DEBUG, INFO, WARNING, ERROR or CRITICAL."
            )
        self.level = level


@dataclass
class IndicatorConfig:
    """Limits applied when indicators validate their parameters."""
    max_period: int = MAX_PERIOD

    def __post_init__(self):
        if isinstance(self.max_period, bool) or self.max_period < 1:
            raise ConfigurationError(
                f"max_period must be a positive integer, got {self.max_period!r}"
            )


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables and provides
    typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=False)

        self.log = self._load_log_config()
        self.indicators = self._load_indicator_config()

        self._initialized = True

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("TASTREAM_LOG_LEVEL", "INFO"),
            log_dir=os.getenv("TASTREAM_LOG_DIR", "logs"),
            log_to_file=_parse_bool("TASTREAM_LOG_TO_FILE", False),
        )

    def _load_indicator_config(self) -> IndicatorConfig:
        """Load indicator limits from environment."""
        raw = os.getenv("TASTREAM_MAX_PERIOD", str(MAX_PERIOD)).strip()
        try:
            max_period = int(raw)
        except ValueError:
            raise ConfigurationError(
                f"TASTREAM_MAX_PERIOD must be an integer, got {raw!r}"
            ) from None
        return IndicatorConfig(max_period=max_period)

    @classmethod
    def reload(cls, env_file: str = ".env") -> "Config":
        """Drop the cached instance and re-read the environment."""
        cls._instance = None
        return cls(env_file)

    def summary_short(self) -> str:
        """Generate a short one-line configuration summary."""
        sink = self.log.log_dir if self.log.log_to_file else "console"
        return (
            f"tastream | log={self.log.level} -> {sink} | "
            f"max_period={self.indicators.max_period}"
        )


def _parse_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false, got {raw!r}")


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    return Config(env_file)
