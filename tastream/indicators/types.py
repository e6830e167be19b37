"""
Output types for multi-output indicators.

Single-output indicators return a plain float. Indicators with several
outputs return one of these named tuples so callers can unpack positionally
or read fields by name.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np


class MACDOutput(NamedTuple):
    """MACD / PPO line, its signal line and their difference."""

    macd: float
    signal: float
    histogram: float


class BandsOutput(NamedTuple):
    """Envelope around a moving average (Bollinger, Keltner)."""

    lower: float
    middle: float
    upper: float


class StochasticOutput(NamedTuple):
    """%K and its moving average %D."""

    k: float
    d: float


def nan_output(output_type: type[NamedTuple]) -> NamedTuple:
    """Named tuple of NaNs, the value of a multi-output indicator before any sample."""
    return output_type(*([np.nan] * len(output_type._fields)))
