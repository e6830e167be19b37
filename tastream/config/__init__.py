"""
Configuration management.
"""

from .config import (
    Config,
    get_config,
    LogConfig,
    IndicatorConfig,
)

from .constants import (
    MAX_PERIOD,
    ATR_SMOOTHINGS,
)

__all__ = [
    # Config classes
    "Config",
    "get_config",
    "LogConfig",
    "IndicatorConfig",
    # Constants
    "MAX_PERIOD",
    "ATR_SMOOTHINGS",
]
