"""
Composite indicators built from owned primitives.

Each composite creates its sub-indicators in __post_init__ and feeds them
in a fixed order on every update. Sub-indicators are never shared between
instances, so two MACDs over the same stream hold independent EMAs.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..config.constants import (
    ADX_WARMUP,
    ATR_SMOOTHINGS,
    DEFAULT_ADX_PERIOD,
    DEFAULT_ATR_PERIOD,
    DEFAULT_BB_MULTIPLIER,
    DEFAULT_BB_PERIOD,
    DEFAULT_KC_MULTIPLIER,
    DEFAULT_KC_PERIOD,
    DEFAULT_MACD_FAST,
    DEFAULT_MACD_SIGNAL,
    DEFAULT_MACD_SLOW,
)
from ..errors import ConfigurationError
from .base import IncrementalIndicator, check_multiplier, check_ordered, check_period
from .core import EMA, SMA, TrueRange, WilderMA
from .sample import close_of, hlc_of
from .statistics import StandardDeviation
from .types import BandsOutput, MACDOutput, nan_output


# =============================================================================
# MACD family
# =============================================================================


@dataclass
class _PriceOscillator(IncrementalIndicator[MACDOutput]):
    """
    Fast/slow EMA spread with an EMA signal line.

    Update order is fast -> slow -> signal; the signal EMA consumes the
    spread computed on the same sample.
    """

    fast: int = DEFAULT_MACD_FAST
    slow: int = DEFAULT_MACD_SLOW
    signal: int = DEFAULT_MACD_SIGNAL
    _ema_fast: EMA = field(init=False)
    _ema_slow: EMA = field(init=False)
    _ema_signal: EMA = field(init=False)
    _value: MACDOutput = field(default_factory=lambda: nan_output(MACDOutput), init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.fast = check_period("fast", self.fast)
        self.slow = check_period("slow", self.slow)
        self.signal = check_period("signal", self.signal)
        check_ordered("fast", self.fast, "slow", self.slow)
        self._ema_fast = EMA(period=self.fast)
        self._ema_slow = EMA(period=self.slow)
        self._ema_signal = EMA(period=self.signal)

    @abstractmethod
    def _line(self, fast: float, slow: float) -> float:
        """Oscillator line from the two EMAs."""

    def update(self, sample: Any) -> MACDOutput:
        """Update with new close price."""
        price = close_of(sample)
        fast = self._ema_fast.update(price)
        slow = self._ema_slow.update(price)
        line = self._line(fast, slow)
        signal = self._ema_signal.update(line)
        self._count += 1
        self._value = MACDOutput(macd=line, signal=signal, histogram=line - signal)
        return self._value

    def reset(self) -> None:
        self._ema_fast.reset()
        self._ema_slow.reset()
        self._ema_signal.reset()
        self._value = nan_output(MACDOutput)
        self._count = 0

    @property
    def value(self) -> MACDOutput:
        return self._value

    @property
    def macd_value(self) -> float:
        """Returns the oscillator line."""
        return self._value.macd

    @property
    def signal_value(self) -> float:
        """Returns signal line value."""
        return self._value.signal

    @property
    def histogram_value(self) -> float:
        """Returns histogram value."""
        return self._value.histogram

    @property
    def is_ready(self) -> bool:
        """True once the slow EMA has seen ``slow`` samples."""
        return self._count >= self.slow


@dataclass
class MACD(_PriceOscillator):
    """
    Moving Average Convergence Divergence.

    Components:
        macd_line = ema_fast - ema_slow
        signal = ema(macd_line, signal)
        histogram = macd_line - signal

    Returns MACDOutput(macd, signal, histogram). ``fast`` must be strictly
    less than ``slow``.
    """

    short_name = "MACD"

    def _line(self, fast: float, slow: float) -> float:
        return fast - slow


@dataclass
class PPO(_PriceOscillator):
    """
    Percentage Price Oscillator.

    Same structure as MACD with the spread expressed in percent:
        ppo = 100 * (ema_fast - ema_slow) / ema_slow

    A zero slow EMA gives a line of 0.
    """

    short_name = "PPO"

    def _line(self, fast: float, slow: float) -> float:
        if slow == 0:
            return 0.0
        return (fast - slow) / slow * 100.0


# =============================================================================
# Bands
# =============================================================================


@dataclass
class BollingerBands(IncrementalIndicator[BandsOutput]):
    """
    Bollinger Bands.

    Output:
        middle = sma(close, period)
        upper  = middle + multiplier * std
        lower  = middle - multiplier * std

    ``std`` is the population standard deviation (ddof=0) of the same
    window the SMA averages, warm-up included.
    """

    short_name = "BBANDS"

    period: int = DEFAULT_BB_PERIOD
    multiplier: float = DEFAULT_BB_MULTIPLIER
    _sma: SMA = field(init=False)
    _std: StandardDeviation = field(init=False)
    _last_close: float = field(default=np.nan, init=False)
    _value: BandsOutput = field(default_factory=lambda: nan_output(BandsOutput), init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self.multiplier = check_multiplier("multiplier", self.multiplier)
        self._sma = SMA(period=self.period)
        self._std = StandardDeviation(period=self.period)

    def update(self, sample: Any) -> BandsOutput:
        """Update with new close price."""
        price = close_of(sample)
        middle = self._sma.update(price)
        width = self.multiplier * self._std.update(price)
        self._last_close = price
        self._count += 1
        self._value = BandsOutput(lower=middle - width, middle=middle, upper=middle + width)
        return self._value

    def reset(self) -> None:
        self._sma.reset()
        self._std.reset()
        self._last_close = np.nan
        self._value = nan_output(BandsOutput)
        self._count = 0

    @property
    def value(self) -> BandsOutput:
        return self._value

    @property
    def bandwidth(self) -> float:
        """Returns bandwidth: (upper - lower) / middle * 100."""
        lower, middle, upper = self._value
        if np.isnan(middle):
            return np.nan
        if middle == 0:
            return 0.0
        return (upper - lower) / middle * 100.0

    @property
    def percent_b(self) -> float:
        """Returns %B: (close - lower) / (upper - lower)."""
        lower, _, upper = self._value
        if np.isnan(lower):
            return np.nan
        if upper == lower:
            return 0.5
        return (self._last_close - lower) / (upper - lower)

    @property
    def is_ready(self) -> bool:
        return self._sma.is_ready


@dataclass
class ATR(IncrementalIndicator[float]):
    """
    Average True Range.

    Formula:
        tr = max(high-low, |high-prev_close|, |low-prev_close|)
        atr = smooth(tr, period)

    ``smoothing`` selects the smoother: "wilder" (default, Wilder's RMA),
    "ema" or "sma".
    """

    short_name = "ATR"

    period: int = DEFAULT_ATR_PERIOD
    smoothing: str = "wilder"
    _true_range: TrueRange = field(init=False)
    _smoother: IncrementalIndicator[float] = field(init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        if self.smoothing not in ATR_SMOOTHINGS:
            raise ConfigurationError(
                f"smoothing must be one of {list(ATR_SMOOTHINGS)}, got {self.smoothing!r}"
            )
        self._true_range = TrueRange()
        self._smoother = _SMOOTHERS[self.smoothing](period=self.period)

    def update(self, sample: Any) -> float:
        """Update with new OHLC data."""
        self._count += 1
        return self._smoother.update(self._true_range.update(sample))

    def reset(self) -> None:
        self._true_range.reset()
        self._smoother.reset()
        self._count = 0

    @property
    def value(self) -> float:
        return self._smoother.value

    @property
    def is_ready(self) -> bool:
        return self._count >= self.period


_SMOOTHERS: dict[str, type[IncrementalIndicator[float]]] = {
    "wilder": WilderMA,
    "ema": EMA,
    "sma": SMA,
}


@dataclass
class KeltnerChannel(IncrementalIndicator[BandsOutput]):
    """
    Keltner Channel.

    Output:
        middle = ema(typical_price, period)
        upper  = middle + multiplier * atr
        lower  = middle - multiplier * atr

    The ATR uses EMA smoothing over the same period.
    """

    short_name = "KC"

    period: int = DEFAULT_KC_PERIOD
    multiplier: float = DEFAULT_KC_MULTIPLIER
    _ema: EMA = field(init=False)
    _atr: ATR = field(init=False)
    _value: BandsOutput = field(default_factory=lambda: nan_output(BandsOutput), init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period)
        self.multiplier = check_multiplier("multiplier", self.multiplier)
        self._ema = EMA(period=self.period)
        self._atr = ATR(period=self.period, smoothing="ema")

    def update(self, sample: Any) -> BandsOutput:
        """Update with new OHLC data."""
        high, low, close = hlc_of(sample)
        middle = self._ema.update((high + low + close) / 3.0)
        width = self.multiplier * self._atr.update(sample)
        self._count += 1
        self._value = BandsOutput(lower=middle - width, middle=middle, upper=middle + width)
        return self._value

    def reset(self) -> None:
        self._ema.reset()
        self._atr.reset()
        self._value = nan_output(BandsOutput)
        self._count = 0

    @property
    def value(self) -> BandsOutput:
        return self._value

    @property
    def is_ready(self) -> bool:
        return self._atr.is_ready


@dataclass
class ADX(IncrementalIndicator[float]):
    """
    Average Directional Index.

    Uses TA-Lib's Wilder sums for +DM, -DM and TR:
        first ``period - 1`` changes:  sum += x
        afterwards:                    sum = sum - sum / period + x

        +DI = 100 * sum(+DM) / sum(TR)
        -DI = 100 * sum(-DM) / sum(TR)
        DX  = 100 * |+DI - -DI| / (+DI + -DI)

    The first DI/DX come from change ``period``. The first ADX is the mean
    of the first ``period`` DX values, then:
        adx = (adx_prev * (period - 1) + dx) / period

    With ``round_values`` DI, DX and ADX are rounded half-up to whole
    numbers at each step, as TA-Lib's integer-rounding build does.

    Returns 0.0 until the first ADX exists (2 * period bars). ``period``
    must be at least 2.
    """

    short_name = "ADX"

    period: int = DEFAULT_ADX_PERIOD
    round_values: bool = False
    _prev_high: float = field(default=np.nan, init=False)
    _prev_low: float = field(default=np.nan, init=False)
    _prev_close: float = field(default=np.nan, init=False)
    _plus_dm_sum: float = field(default=0.0, init=False)
    _minus_dm_sum: float = field(default=0.0, init=False)
    _tr_sum: float = field(default=0.0, init=False)
    _plus_di: float = field(default=np.nan, init=False)
    _minus_di: float = field(default=np.nan, init=False)
    _dx_sum: float = field(default=0.0, init=False)
    _adx: float = field(default=np.nan, init=False)
    _value: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.period = check_period("period", self.period, minimum=2)
        self.round_values = bool(self.round_values)

    def _round(self, x: float) -> float:
        if not self.round_values:
            return x
        return float(np.floor(x + 0.5))

    def update(self, sample: Any) -> float:
        """Update with new OHLC data."""
        high, low, close = hlc_of(sample)
        self._count += 1

        if self._count == 1:
            # Bar 0: no previous bar, no directional movement
            self._prev_high = high
            self._prev_low = low
            self._prev_close = close
            self._value = ADX_WARMUP
            return self._value

        up_move = high - self._prev_high
        down_move = self._prev_low - low
        plus_dm = up_move if up_move > down_move and up_move > 0 else 0.0
        minus_dm = down_move if down_move > up_move and down_move > 0 else 0.0
        tr = max(high - low, abs(high - self._prev_close), abs(low - self._prev_close))

        self._prev_high = high
        self._prev_low = low
        self._prev_close = close

        changes = self._count - 1
        p = self.period
        if changes < p:
            self._plus_dm_sum += plus_dm
            self._minus_dm_sum += minus_dm
            self._tr_sum += tr
            self._value = ADX_WARMUP
            return self._value

        self._plus_dm_sum += plus_dm - self._plus_dm_sum / p
        self._minus_dm_sum += minus_dm - self._minus_dm_sum / p
        self._tr_sum += tr - self._tr_sum / p

        if self._tr_sum > 0:
            self._plus_di = self._round(self._plus_dm_sum / self._tr_sum * 100.0)
            self._minus_di = self._round(self._minus_dm_sum / self._tr_sum * 100.0)
        else:
            self._plus_di = 0.0
            self._minus_di = 0.0

        di_sum = self._plus_di + self._minus_di
        dx = self._round(abs(self._plus_di - self._minus_di) / di_sum * 100.0) if di_sum > 0 else 0.0

        dx_seen = changes - p + 1
        if dx_seen < p:
            self._dx_sum += dx
        elif dx_seen == p:
            self._dx_sum += dx
            self._adx = self._round(self._dx_sum / p)
        else:
            self._adx = self._round((self._adx * (p - 1) + dx) / p)

        self._value = self._adx if self.is_ready else ADX_WARMUP
        return self._value

    def reset(self) -> None:
        self._prev_high = np.nan
        self._prev_low = np.nan
        self._prev_close = np.nan
        self._plus_dm_sum = 0.0
        self._minus_dm_sum = 0.0
        self._tr_sum = 0.0
        self._plus_di = np.nan
        self._minus_di = np.nan
        self._dx_sum = 0.0
        self._adx = np.nan
        self._value = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def plus_di(self) -> float:
        """Returns +DI (NaN until ``period`` changes have been summed)."""
        return self._plus_di

    @property
    def minus_di(self) -> float:
        """Returns -DI (NaN until ``period`` changes have been summed)."""
        return self._minus_di

    @property
    def is_ready(self) -> bool:
        return self._count >= 2 * self.period
