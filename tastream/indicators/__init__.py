"""
Incremental indicator computation.

O(1) amortized per-sample updates for common indicators. Outputs match the
textbook batch formulas (within floating point tolerance).

Usage:
    from tastream.indicators import EMA, RSI

    # Warm up on history
    ema = EMA(period=20)
    for price in historical_closes:
        ema.update(price)

    # Then update incrementally in the live loop
    ema.update(new_close)
    current_value = ema.value
"""

from __future__ import annotations

# Base class and samples
from .base import IncrementalIndicator
from .sample import Bar, HasClose, HasHighLowClose, HasVolume
from .types import BandsOutput, MACDOutput, StochasticOutput

# Primitives
from .core import (
    EMA,
    SMA,
    Maximum,
    Minimum,
    RateOfChange,
    TrueRange,
    WilderMA,
)

# Rolling statistics
from .statistics import (
    Correlation,
    MeanAbsoluteDeviation,
    StandardDeviation,
)

# Oscillators
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

# Composites
from .composite import (
    ADX,
    ATR,
    MACD,
    PPO,
    BollingerBands,
    KeltnerChannel,
)

# Factory, declarative specs, snapshots
from .factory import create_indicator, list_indicators, supports
from .spec import IndicatorSet, IndicatorSpec, load_specs
from .state import dumps, loads, restore, snapshot

__all__ = [
    # Base
    "IncrementalIndicator",
    "Bar",
    "HasClose",
    "HasHighLowClose",
    "HasVolume",
    "MACDOutput",
    "BandsOutput",
    "StochasticOutput",
    # Primitives
    "SMA",
    "EMA",
    "WilderMA",
    "RateOfChange",
    "Maximum",
    "Minimum",
    "TrueRange",
    # Statistics
    "StandardDeviation",
    "MeanAbsoluteDeviation",
    "Correlation",
    # Oscillators
    "RSI",
    "FastStochastic",
    "SlowStochastic",
    "Stochastic",
    "WilliamsR",
    "CCI",
    "EfficiencyRatio",
    "MFI",
    "OBV",
    # Composites
    "MACD",
    "PPO",
    "BollingerBands",
    "KeltnerChannel",
    "ATR",
    "ADX",
    # Factory / specs / state
    "create_indicator",
    "list_indicators",
    "supports",
    "IndicatorSpec",
    "IndicatorSet",
    "load_specs",
    "snapshot",
    "restore",
    "dumps",
    "loads",
]
