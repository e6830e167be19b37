"""
Rolling statistics: standard deviation, mean absolute deviation and
Pearson correlation over a fixed window.

All three use population statistics (divide by the number of samples in
the window, no Bessel correction) and share the SMA warm-up rule: before
the window fills they are computed over the samples seen so far.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..config.constants import (
    CORRELATION_NEUTRAL,
    DEFAULT_CORRELATION_PERIOD,
    DEFAULT_MA_PERIOD,
)
from .base import IncrementalIndicator, check_period
from .sample import close_of, pair_of
from .window import RingBuffer


@dataclass
class StandardDeviation(IncrementalIndicator[float]):
    """
    Population standard deviation with O(1) updates.

    Uses Welford's online update, extended to a sliding window:

        warm-up (n -> n+1):
            delta = x - mean
            mean += delta / (n + 1)
            m2   += delta * (x - mean)

        full window (old value evicted, n fixed):
            mean' = mean + (x - old) / n
            m2   += (x - old) * (x - mean' + old - mean)

        std = sqrt(m2 / n)

    Constant input keeps m2 at exactly zero, unlike the E[x^2] - E[x]^2 form.
    """

    short_name = "SD"

    period: int = DEFAULT_MA_PERIOD
    _window: RingBuffer = field(init=False)
    _mean: float = field(default=0.0, init=False)
    _m2: float = field(default=0.0, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._window = RingBuffer(self.period)

    def update(self, sample: Any) -> float:
        """Update with new close price."""
        x = close_of(sample)
        evicted = self._window.push(x)
        self._count += 1

        if evicted is None:
            n = len(self._window)
            delta = x - self._mean
            self._mean += delta / n
            self._m2 += delta * (x - self._mean)
        else:
            old_mean = self._mean
            self._mean = old_mean + (x - evicted) / self.period
            self._m2 += (x - evicted) * (x - self._mean + evicted - old_mean)

        # Handle numerical precision issues
        if self._m2 < 0:
            self._m2 = 0.0

        self._value = float(np.sqrt(self._m2 / len(self._window)))
        return self._value

    def reset(self) -> None:
        self._window.clear()
        self._mean = 0.0
        self._m2 = 0.0
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def mean(self) -> float:
        """Mean of the current window contents."""
        if not self._window:
            return np.nan
        return self._mean

    @property
    def variance(self) -> float:
        """Population variance of the current window contents."""
        if not self._window:
            return np.nan
        return self._m2 / len(self._window)

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class MeanAbsoluteDeviation(IncrementalIndicator[float]):
    """
    Mean absolute deviation around the window mean.

    Formula:
        mad = sum(|x - mean|) / n

    The mean is a running sum; the deviation pass is O(period).
    """

    short_name = "MAD"

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
        x = close_of(sample)
        evicted = self._window.push(x)
        if evicted is not None:
            self._running_sum -= evicted
        self._running_sum += x
        self._count += 1

        n = len(self._window)
        mean = self._running_sum / n
        self._value = sum(abs(v - mean) for v in self._window) / n
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
class Correlation(IncrementalIndicator[float]):
    """
    Pearson correlation of paired (x, y) samples over a sliding window.

    Keeps running sums of x, y, xy, x^2, y^2:
        cov   = sum_xy - sum_x * sum_y / n
        var_x = sum_x2 - sum_x^2 / n
        var_y = sum_y2 - sum_y^2 / n
        r     = cov / sqrt(var_x * var_y)

    Returns 0 with fewer than two pairs or when either series is flat.
    """

    short_name = "CORREL"

    period: int = DEFAULT_CORRELATION_PERIOD
    _xs: RingBuffer = field(init=False)
    _ys: RingBuffer = field(init=False)
    _sum_x: float = field(default=0.0, init=False)
    _sum_y: float = field(default=0.0, init=False)
    _sum_xy: float = field(default=0.0, init=False)
    _sum_x2: float = field(default=0.0, init=False)
    _sum_y2: float = field(default=0.0, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._xs = RingBuffer(self.period)
        self._ys = RingBuffer(self.period)

    def update(self, sample: Any) -> float:
        """Update with a new (x, y) pair."""
        x, y = pair_of(sample)
        old_x = self._xs.push(x)
        old_y = self._ys.push(y)
        if old_x is not None:
            self._sum_x -= old_x
            self._sum_y -= old_y
            self._sum_xy -= old_x * old_y
            self._sum_x2 -= old_x * old_x
            self._sum_y2 -= old_y * old_y
        self._sum_x += x
        self._sum_y += y
        self._sum_xy += x * y
        self._sum_x2 += x * x
        self._sum_y2 += y * y
        self._count += 1

        n = len(self._xs)
        if n < 2:
            self._value = CORRELATION_NEUTRAL
            return self._value

        cov = self._sum_xy - self._sum_x * self._sum_y / n
        var_x = self._sum_x2 - self._sum_x * self._sum_x / n
        var_y = self._sum_y2 - self._sum_y * self._sum_y / n
        denominator = var_x * var_y
        if denominator <= 0:
            self._value = CORRELATION_NEUTRAL
        else:
            # Clamp rounding overshoot
            self._value = max(-1.0, min(1.0, cov / float(np.sqrt(denominator))))
        return self._value

    def reset(self) -> None:
        self._xs.clear()
        self._ys.clear()
        self._sum_x = 0.0
        self._sum_y = 0.0
        self._sum_xy = 0.0
        self._sum_x2 = 0.0
        self._sum_y2 = 0.0
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._xs.is_full()
