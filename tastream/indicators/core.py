"""
Primitive incremental indicators.

Includes SMA, EMA, Wilder's moving average, Rate of Change, rolling
Maximum/Minimum and True Range. Each keeps only the state its formula
needs; composites in oscillators.py and composite.py are built from these.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..config.constants import (
    DEFAULT_MA_PERIOD,
    DEFAULT_ROC_PERIOD,
    DEFAULT_WINDOW_PERIOD,
)
from .base import IncrementalIndicator, check_period
from .sample import close_of, hlc_of
from .window import MonotonicWindow, RingBuffer


@dataclass
class SMA(IncrementalIndicator[float]):
    """
    Simple Moving Average with O(1) updates using a ring buffer.

    Uses running sum technique:
        sma = (sum + new - oldest) / min(count, period)

    Warm-up: before ``period`` samples have been seen, the average is taken
    over the samples seen so far (SMA(3) on 1, 2 gives 1.0, 1.5).
    """

    short_name = "SMA"

    period: int = DEFAULT_MA_PERIOD
    _window: RingBuffer = field(init=False)
    _running_sum: float = field(default=0.0, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._window = RingBuffer(self.period)

    def update(self, sample: Any) -> float:
        """Update with new close price."""
        price = close_of(sample)
        evicted = self._window.push(price)
        if evicted is not None:
            self._running_sum -= evicted
        self._running_sum += price
        self._count += 1
        self._value = self._running_sum / len(self._window)
        return self._value

    def reset(self) -> None:
        self._window.clear()
        self._running_sum = 0.0
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class _ExponentialSmoother(IncrementalIndicator[float]):
    """
    Shared recurrence for EMA-family smoothers.

        first sample:  value = price
        afterwards:    value = α * price + (1 - α) * value

    Seeding with the first input (not zero, not an SMA) avoids a transient
    bias and matches pandas ``ewm(adjust=False)``.
    """

    period: int = DEFAULT_MA_PERIOD
    _alpha: float = field(default=np.nan, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._alpha = self._smoothing(self.period)

    @staticmethod
    @abstractmethod
    def _smoothing(period: int) -> float:
        """Smoothing multiplier for ``period``."""

    @property
    def alpha(self) -> float:
        """Smoothing multiplier applied to the newest sample."""
        return self._alpha

    def update(self, sample: Any) -> float:
        """Update with new close price."""
        price = close_of(sample)
        if self._count == 0:
            self._value = price
        else:
            self._value = self._alpha * price + (1.0 - self._alpha) * self._value
        self._count += 1
        return self._value

    def reset(self) -> None:
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._count >= 1


@dataclass
class EMA(_ExponentialSmoother):
    """
    Exponential Moving Average with O(1) updates.

    Formula:
        α = 2 / (period + 1)
        ema = α * close + (1 - α) * ema_prev

    The first update returns the first input unchanged.
    """

    short_name = "EMA"

    @staticmethod
    def _smoothing(period: int) -> float:
        return 2.0 / (period + 1)


@dataclass
class WilderMA(_ExponentialSmoother):
    """
    Wilder's smoothed moving average (RMA / SMMA).

    Formula:
        α = 1 / period
        rma = (rma_prev * (period - 1) + close) / period

    Same seeding rule as EMA. Used by RSI and ATR.
    """

    short_name = "RMA"

    @staticmethod
    def _smoothing(period: int) -> float:
        return 1.0 / period


@dataclass
class RateOfChange(IncrementalIndicator[float]):
    """
    Rate of Change (percent) with O(1) updates.

    Formula:
        roc = 100 * (close - close[n periods ago]) / close[n periods ago]

    Keeps the last ``period + 1`` closes. During warm-up the oldest close
    seen so far is the reference, so the first update returns 0. A zero
    reference price yields 0 rather than a division fault.
    """

    short_name = "ROC"

    period: int = DEFAULT_ROC_PERIOD
    _window: RingBuffer = field(init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._window = RingBuffer(self.period + 1)

    def update(self, sample: Any) -> float:
        """Update with new close price."""
        price = close_of(sample)
        self._window.push(price)
        self._count += 1

        reference = self._window.oldest
        if reference == 0:
            self._value = 0.0
        else:
            self._value = (price - reference) / reference * 100.0
        return self._value

    def reset(self) -> None:
        self._window.clear()
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class _RollingExtreme(IncrementalIndicator[float]):
    """Highest/lowest value over the last ``period`` samples via a monotonic window."""

    _mode = "max"

    period: int = DEFAULT_WINDOW_PERIOD
    _window: MonotonicWindow = field(init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._window = MonotonicWindow(self.period, self._mode)

    @abstractmethod
    def _extract(self, sample: Any) -> float:
        """Value of ``sample`` that enters the window."""

    def update(self, sample: Any) -> float:
        self._window.push(self._extract(sample))
        self._count += 1
        self._value = self._window.get()
        return self._value

    def reset(self) -> None:
        self._window.clear()
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def bars_since(self) -> int:
        """Samples since the current extreme was seen (0 = latest)."""
        return self._window.bars_since()

    @property
    def is_ready(self) -> bool:
        return self._count >= self.period


@dataclass
class Maximum(_RollingExtreme):
    """
    Highest high over the last ``period`` samples.

    Reads ``high`` from bars; a bare number is used as is.
    """

    short_name = "MAX"
    _mode = "max"

    def _extract(self, sample: Any) -> float:
        return hlc_of(sample)[0]


@dataclass
class Minimum(_RollingExtreme):
    """
    Lowest low over the last ``period`` samples.

    Reads ``low`` from bars; a bare number is used as is.
    """

    short_name = "MIN"
    _mode = "min"

    def _extract(self, sample: Any) -> float:
        return hlc_of(sample)[1]


@dataclass
class TrueRange(IncrementalIndicator[float]):
    """
    True Range.

    Formula:
        tr = max(high - low, |high - prev_close|, |low - prev_close|)

    The first bar has no previous close, so tr = high - low.
    """

    short_name = "TRUE_RANGE"

    _prev_close: float = field(default=np.nan, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def update(self, sample: Any) -> float:
        """Update with new OHLC data."""
        high, low, close = hlc_of(sample)
        if self._count == 0:
            tr = high - low
        else:
            tr = max(
                high - low,
                abs(high - self._prev_close),
                abs(low - self._prev_close),
            )
        self._prev_close = close
        self._count += 1
        self._value = tr
        return tr

    def reset(self) -> None:
        self._prev_close = np.nan
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._count >= 1
