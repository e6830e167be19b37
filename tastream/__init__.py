"""
tastream - incremental technical-analysis indicators.

Every indicator ingests one sample per update() call and keeps only the
rolling state its formula needs:

    from tastream import SMA, MACD

    sma = SMA(period=3)
    for price in [1, 2, 3, 4, 5]:
        sma.update(price)      # 1.0, 1.5, 2.0, 3.0, 4.0

    macd = MACD(fast=12, slow=26, signal=9)
    out = macd.update(101.5)  # MACDOutput(macd=..., signal=..., histogram=...)
"""

__version__ = "0.1.0"

from .errors import ConfigurationError, InvalidSampleError, TastreamError
from .indicators import (
    ADX,
    ATR,
    CCI,
    EMA,
    MACD,
    MFI,
    OBV,
    PPO,
    RSI,
    SMA,
    Bar,
    BandsOutput,
    BollingerBands,
    Correlation,
    EfficiencyRatio,
    FastStochastic,
    IncrementalIndicator,
    IndicatorSet,
    IndicatorSpec,
    KeltnerChannel,
    MACDOutput,
    Maximum,
    MeanAbsoluteDeviation,
    Minimum,
    RateOfChange,
    SlowStochastic,
    StandardDeviation,
    Stochastic,
    StochasticOutput,
    TrueRange,
    WilderMA,
    WilliamsR,
    create_indicator,
    list_indicators,
    load_specs,
    restore,
    snapshot,
)

__all__ = [
    "__version__",
    # Errors
    "TastreamError",
    "ConfigurationError",
    "InvalidSampleError",
    # Contract and samples
    "IncrementalIndicator",
    "Bar",
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
    # Collaborators
    "create_indicator",
    "list_indicators",
    "IndicatorSpec",
    "IndicatorSet",
    "load_specs",
    "snapshot",
    "restore",
]
