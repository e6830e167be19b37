"""
Momentum and range oscillators.

Includes RSI, the Stochastic family, Williams %R, CCI, Efficiency Ratio,
Money Flow Index and On-Balance Volume. Where the textbook formula divides
by a quantity that is legitimately zero on flat input, the indicator
returns a fixed neutral value (see tastream.config.constants).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..config.constants import (
    CCI_NEUTRAL,
    CCI_SCALE,
    DEFAULT_CCI_PERIOD,
    DEFAULT_ER_PERIOD,
    DEFAULT_MFI_PERIOD,
    DEFAULT_RSI_PERIOD,
    DEFAULT_SLOW_STOCH_EMA,
    DEFAULT_STOCH_D,
    DEFAULT_STOCH_K,
    DEFAULT_WINDOW_PERIOD,
    ER_NO_PATH,
    MFI_NEUTRAL,
    RSI_NEUTRAL,
    RSI_NO_LOSS,
    STOCH_NEUTRAL,
    WILLR_NEUTRAL,
)
from .base import IncrementalIndicator, check_period
from .core import EMA, SMA, Maximum, Minimum
from .sample import close_of, hlc_of, hlcv_of
from .statistics import MeanAbsoluteDeviation
from .types import StochasticOutput, nan_output
from .window import RingBuffer


@dataclass
class RSI(IncrementalIndicator[float]):
    """
    Relative Strength Index with O(1) updates.

    Average gain and loss follow TA-Lib's Wilder seeding:
        changes 1..period:  simple mean of the changes seen so far
        afterwards:         avg = (avg_prev * (period - 1) + x) / period
        rs = avg_gain / avg_loss
        rsi = 100 - (100 / (1 + rs))

    At change ``period`` the averages equal TA-Lib's SMA seed, so every
    ready value matches TA-Lib RSI. Neutral values:
        first sample (no previous close)  -> 50
        avg_loss == 0, avg_gain > 0       -> 100
        avg_loss == 0, avg_gain == 0      -> 50 (flat price)
    """

    short_name = "RSI"

    period: int = DEFAULT_RSI_PERIOD
    _prev_close: float = field(default=np.nan, init=False)
    _avg_gain: float = field(default=0.0, init=False)
    _avg_loss: float = field(default=0.0, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)

    def update(self, sample: Any) -> float:
        """Update with new close price."""
        close = close_of(sample)
        self._count += 1

        if self._count == 1:
            # First bar - no change to compute
            self._prev_close = close
            self._value = RSI_NEUTRAL
            return self._value

        change = close - self._prev_close
        gain = max(change, 0.0)
        loss = max(-change, 0.0)
        self._prev_close = close

        changes = self._count - 1
        if changes <= self.period:
            # Warm-up: running mean, equal to the SMA seed at change ``period``
            self._avg_gain += (gain - self._avg_gain) / changes
            self._avg_loss += (loss - self._avg_loss) / changes
        else:
            p = self.period
            self._avg_gain = (self._avg_gain * (p - 1) + gain) / p
            self._avg_loss = (self._avg_loss * (p - 1) + loss) / p

        if self._avg_loss == 0:
            self._value = RSI_NO_LOSS if self._avg_gain > 0 else RSI_NEUTRAL
        else:
            rs = self._avg_gain / self._avg_loss
            self._value = 100.0 - (100.0 / (1.0 + rs))
        return self._value

    def reset(self) -> None:
        self._prev_close = np.nan
        self._avg_gain = 0.0
        self._avg_loss = 0.0
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        """True once ``period`` price changes have been seen."""
        return self._count > self.period


@dataclass
class FastStochastic(IncrementalIndicator[float]):
    """
    Fast Stochastic %K.

    Formula:
        %K = 100 * (close - lowest_low) / (highest_high - lowest_low)

    Extremes are taken over the last ``period`` bars (fewer during
    warm-up). A zero-range window (flat price) returns 50.
    """

    short_name = "FAST_STOCH"

    period: int = DEFAULT_STOCH_K
    _highest: Maximum = field(init=False)
    _lowest: Minimum = field(init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._highest = Maximum(period=self.period)
        self._lowest = Minimum(period=self.period)

    def update(self, sample: Any) -> float:
        """Update with new OHLC data."""
        high, low, close = hlc_of(sample)
        highest_high = self._highest.update(high)
        lowest_low = self._lowest.update(low)
        self._count += 1

        if highest_high == lowest_low:
            self._value = STOCH_NEUTRAL
        else:
            self._value = (close - lowest_low) / (highest_high - lowest_low) * 100.0
        return self._value

    def reset(self) -> None:
        self._highest.reset()
        self._lowest.reset()
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._count >= self.period


@dataclass
class SlowStochastic(IncrementalIndicator[float]):
    """
    Slow Stochastic: EMA-smoothed fast %K.

    Formula:
        slow = ema(fast_k(stochastic_period), ema_period)
    """

    short_name = "SLOW_STOCH"

    stochastic_period: int = DEFAULT_STOCH_K
    ema_period: int = DEFAULT_SLOW_STOCH_EMA
    _fast_k: FastStochastic = field(init=False)
    _ema: EMA = field(init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.stochastic_period = check_period("stochastic_period", self.stochastic_period)
        self.ema_period = check_period("ema_period", self.ema_period)
        self._fast_k = FastStochastic(period=self.stochastic_period)
        self._ema = EMA(period=self.ema_period)

    def update(self, sample: Any) -> float:
        """Update with new OHLC data."""
        self._count += 1
        return self._ema.update(self._fast_k.update(sample))

    def reset(self) -> None:
        self._fast_k.reset()
        self._ema.reset()
        self._count = 0

    @property
    def value(self) -> float:
        return self._ema.value

    @property
    def is_ready(self) -> bool:
        return self._fast_k.is_ready


@dataclass
class Stochastic(IncrementalIndicator[StochasticOutput]):
    """
    Stochastic Oscillator returning (%K, %D).

    Formula:
        %K = fast stochastic over k_period
        %D = sma(%K, d_period)

    The %D SMA is updated every time %K is computed, so both follow the
    SMA warm-up rule.
    """

    short_name = "STOCH"

    k_period: int = DEFAULT_STOCH_K
    d_period: int = DEFAULT_STOCH_D
    _k: FastStochastic = field(init=False)
    _d: SMA = field(init=False)
    _value: StochasticOutput = field(default_factory=lambda: nan_output(StochasticOutput), init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.k_period = check_period("k_period", self.k_period)
        self.d_period = check_period("d_period", self.d_period)
        self._k = FastStochastic(period=self.k_period)
        self._d = SMA(period=self.d_period)

    def update(self, sample: Any) -> StochasticOutput:
        """Update with new OHLC data."""
        k = self._k.update(sample)
        d = self._d.update(k)
        self._count += 1
        self._value = StochasticOutput(k=k, d=d)
        return self._value

    def reset(self) -> None:
        self._k.reset()
        self._d.reset()
        self._value = nan_output(StochasticOutput)
        self._count = 0

    @property
    def value(self) -> StochasticOutput:
        return self._value

    @property
    def k_value(self) -> float:
        return self._value.k

    @property
    def d_value(self) -> float:
        return self._value.d

    @property
    def is_ready(self) -> bool:
        return self._k.is_ready and self._d.is_ready


@dataclass
class WilliamsR(IncrementalIndicator[float]):
    """
    Williams %R.

    Formula:
        %R = (highest_high - close) / (highest_high - lowest_low) * -100

    Range is [-100, 0]; a zero-range window returns -50.
    """

    short_name = "WILLR"

    period: int = DEFAULT_WINDOW_PERIOD
    _highest: Maximum = field(init=False)
    _lowest: Minimum = field(init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._highest = Maximum(period=self.period)
        self._lowest = Minimum(period=self.period)

    def update(self, sample: Any) -> float:
        """Update with new OHLC data."""
        high, low, close = hlc_of(sample)
        highest_high = self._highest.update(high)
        lowest_low = self._lowest.update(low)
        self._count += 1

        if highest_high == lowest_low:
            self._value = WILLR_NEUTRAL
        else:
            self._value = (highest_high - close) / (highest_high - lowest_low) * -100.0
        return self._value

    def reset(self) -> None:
        self._highest.reset()
        self._lowest.reset()
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._count >= self.period


@dataclass
class CCI(IncrementalIndicator[float]):
    """
    Commodity Channel Index.

    Formula:
        tp = (high + low + close) / 3
        cci = (tp - sma(tp)) / (0.015 * mad(tp))

    Returns 0 when the mean deviation is 0.
    """

    short_name = "CCI"

    period: int = DEFAULT_CCI_PERIOD
    _tp_sma: SMA = field(init=False)
    _tp_mad: MeanAbsoluteDeviation = field(init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._tp_sma = SMA(period=self.period)
        self._tp_mad = MeanAbsoluteDeviation(period=self.period)

    def update(self, sample: Any) -> float:
        """Update with new OHLC data."""
        high, low, close = hlc_of(sample)
        tp = (high + low + close) / 3.0
        tp_sma = self._tp_sma.update(tp)
        mean_dev = self._tp_mad.update(tp)
        self._count += 1

        if mean_dev == 0:
            self._value = CCI_NEUTRAL
        else:
            self._value = (tp - tp_sma) / (CCI_SCALE * mean_dev)
        return self._value

    def reset(self) -> None:
        self._tp_sma.reset()
        self._tp_mad.reset()
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._tp_sma.is_ready


@dataclass
class EfficiencyRatio(IncrementalIndicator[float]):
    """
    Kaufman's Efficiency Ratio.

    Formula:
        direction = |close - close[period ago]|
        path      = sum(|close[i] - close[i-1]|) over the last period changes
        er        = direction / path

    Range is [0, 1]. When the path is 0 (flat price) the ratio is 1.
    """

    short_name = "ER"

    period: int = DEFAULT_ER_PERIOD
    _closes: RingBuffer = field(init=False)
    _changes: RingBuffer = field(init=False)
    _path: float = field(default=0.0, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._closes = RingBuffer(self.period + 1)
        self._changes = RingBuffer(self.period)

    def update(self, sample: Any) -> float:
        """Update with new close price."""
        close = close_of(sample)
        if self._count > 0:
            change = abs(close - self._closes.newest)
            evicted = self._changes.push(change)
            if evicted is not None:
                self._path -= evicted
            self._path += change
        self._closes.push(close)
        self._count += 1

        direction = abs(close - self._closes.oldest)
        if self._path <= 0:
            self._value = ER_NO_PATH
        else:
            self._value = min(direction / self._path, 1.0)
        return self._value

    def reset(self) -> None:
        self._closes.clear()
        self._changes.clear()
        self._path = 0.0
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._closes.is_full()


@dataclass
class MFI(IncrementalIndicator[float]):
    """
    Money Flow Index.

    Formula:
        tp = (high + low + close) / 3
        raw_flow = tp * volume, positive when tp rose, negative when it fell
        mfi = 100 * sum(positive) / (sum(positive) + sum(negative))

    Sums run over the last ``period`` bars. The first bar has no previous
    typical price and carries no flow. With no flow at all the index is 50.
    """

    short_name = "MFI"

    period: int = DEFAULT_MFI_PERIOD
    _positive: RingBuffer = field(init=False)
    _negative: RingBuffer = field(init=False)
    _positive_sum: float = field(default=0.0, init=False)
    _negative_sum: float = field(default=0.0, init=False)
    _prev_tp: float = field(default=np.nan, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self._positive = RingBuffer(self.period)
        self._negative = RingBuffer(self.period)

    def update(self, sample: Any) -> float:
        """Update with new OHLCV data."""
        high, low, close, volume = hlcv_of(sample)
        tp = (high + low + close) / 3.0
        flow = tp * volume

        positive = negative = 0.0
        if self._count > 0:
            if tp > self._prev_tp:
                positive = flow
            elif tp < self._prev_tp:
                negative = flow
        self._prev_tp = tp
        self._count += 1

        evicted_pos = self._positive.push(positive)
        evicted_neg = self._negative.push(negative)
        if evicted_pos is not None:
            self._positive_sum -= evicted_pos
            self._negative_sum -= evicted_neg
        self._positive_sum = max(self._positive_sum + positive, 0.0)
        self._negative_sum = max(self._negative_sum + negative, 0.0)

        total = self._positive_sum + self._negative_sum
        if total <= 0:
            self._value = MFI_NEUTRAL
        else:
            self._value = self._positive_sum / total * 100.0
        return self._value

    def reset(self) -> None:
        self._positive.clear()
        self._negative.clear()
        self._positive_sum = 0.0
        self._negative_sum = 0.0
        self._prev_tp = np.nan
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._positive.is_full()


@dataclass
class OBV(IncrementalIndicator[float]):
    """
    On-Balance Volume.

    Formula:
        obv += volume  if close > prev_close
        obv -= volume  if close < prev_close

    Starts at 0; the first bar has no previous close and leaves it at 0.
    """

    short_name = "OBV"

    _obv: float = field(default=0.0, init=False)
    _prev_close: float = field(default=np.nan, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def update(self, sample: Any) -> float:
        """Update with new close and volume."""
        _, _, close, volume = hlcv_of(sample)
        if self._count > 0:
            if close > self._prev_close:
                self._obv += volume
            elif close < self._prev_close:
                self._obv -= volume
        self._prev_close = close
        self._count += 1
        self._value = self._obv
        return self._value

    def reset(self) -> None:
        self._obv = 0.0
        self._prev_close = np.nan
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._count >= 1
