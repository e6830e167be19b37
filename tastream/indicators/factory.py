"""
Factory function and registry for incremental indicators.

Provides create_indicator() to instantiate any indicator from a type string
and parameter dict, plus registry query functions. Valid parameter names are
the constructor fields of each indicator class, so the registry cannot drift
from the classes it builds.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any

from ..errors import ConfigurationError
from ..utils.logger import get_logger
from .base import IncrementalIndicator
from .composite import ADX, ATR, MACD, PPO, BollingerBands, KeltnerChannel
from .core import (
    EMA,
    SMA,
    Maximum,
    Minimum,
    RateOfChange,
    TrueRange,
    WilderMA,
)
from .oscillators import (
    CCI,
    MFI,
    OBV,
    RSI,
    EfficiencyRatio,
    FastStochastic,
    SlowStochastic,
    Stochastic,
    WilliamsR,
)
from .statistics import Correlation, MeanAbsoluteDeviation, StandardDeviation

logger = get_logger("factory")


# =============================================================================
# Registry
# =============================================================================


# Dict-based factory: indicator type string -> indicator class.
_FACTORY: dict[str, type[IncrementalIndicator]] = {
    # Primitives
    "sma": SMA,
    "ema": EMA,
    "rma": WilderMA,
    "roc": RateOfChange,
    "max": Maximum,
    "min": Minimum,
    "trange": TrueRange,
    # Statistics
    "stddev": StandardDeviation,
    "mad": MeanAbsoluteDeviation,
    "correl": Correlation,
    # Oscillators
    "rsi": RSI,
    "fast_stoch": FastStochastic,
    "slow_stoch": SlowStochastic,
    "stoch": Stochastic,
    "willr": WilliamsR,
    "cci": CCI,
    "er": EfficiencyRatio,
    "mfi": MFI,
    "obv": OBV,
    # Composites
    "macd": MACD,
    "ppo": PPO,
    "bbands": BollingerBands,
    "kc": KeltnerChannel,
    "atr": ATR,
    "adx": ADX,
}

_VALID_PARAMS: dict[str, frozenset[str]] = {
    indicator_type: frozenset(f.name for f in fields(cls) if f.init)
    for indicator_type, cls in _FACTORY.items()
}


def _validate_params(indicator_type: str, params: dict[str, Any]) -> None:
    """Raise ConfigurationError if params contains unknown keys for this indicator."""
    valid = _VALID_PARAMS[indicator_type]
    unknown = set(params.keys()) - valid
    if unknown:
        logger.debug(f"Rejected params for '{indicator_type}': {sorted(unknown)}")
        raise ConfigurationError(
            f"Unknown params for '{indicator_type}': {sorted(unknown)}. "
            f"Valid: {sorted(valid)}"
        )


def create_indicator(
    indicator_type: str,
    params: dict[str, Any] | None = None,
) -> IncrementalIndicator:
    """
    Create an incremental indicator from type and params.

    Args:
        indicator_type: Registry key, case-insensitive (e.g. "sma", "macd")
        params: Constructor parameters; omitted ones take their defaults

    Raises:
        ConfigurationError: If the type is unknown, params contains unknown
            keys, or a parameter value is invalid.
    """
    indicator_type = indicator_type.lower()
    params = dict(params or {})

    cls = _FACTORY.get(indicator_type)
    if cls is None:
        logger.debug(f"Rejected unknown indicator type '{indicator_type}'")
        raise ConfigurationError(
            f"Unknown indicator type: '{indicator_type}'. "
            f"Supported: {list_indicators()}"
        )
    _validate_params(indicator_type, params)

    indicator = cls(**params)
    logger.debug(f"Created {indicator} for type '{indicator_type}'")
    return indicator


def supports(indicator_type: str) -> bool:
    """Check if an indicator type can be created by create_indicator()."""
    return indicator_type.lower() in _FACTORY


def list_indicators() -> list[str]:
    """Get sorted list of all registered indicator types."""
    return sorted(_FACTORY)


def valid_params(indicator_type: str) -> frozenset[str]:
    """
    Get the accepted parameter names for an indicator type.

    Raises:
        ConfigurationError: If the type is unknown.
    """
    try:
        return _VALID_PARAMS[indicator_type.lower()]
    except KeyError:
        raise ConfigurationError(f"Unknown indicator type: '{indicator_type}'") from None


def type_name_of(indicator: IncrementalIndicator) -> str:
    """
    Registry key of an indicator instance.

    Raises:
        ConfigurationError: If the instance's class is not registered.
    """
    for indicator_type, cls in _FACTORY.items():
        if type(indicator) is cls:
            return indicator_type
    raise ConfigurationError(
        f"{type(indicator).__name__} is not a registered indicator type"
    )
