"""
Tests for the primitive indicators: SMA, EMA, WilderMA, RateOfChange,
Maximum, Minimum and TrueRange.

Exact scenarios pin the warm-up and seeding rules; pandas batch
computations on a random walk check full-stream fidelity.
"""

import numpy as np
import pandas as pd
import pytest

from tastream import (
    EMA,
    SMA,
    Bar,
    ConfigurationError,
    Maximum,
    Minimum,
    RateOfChange,
    TrueRange,
    WilderMA,
)
from tastream.indicators.core import _ExponentialSmoother, _RollingExtreme
from tests.fixtures import run


# =============================================================================
# SMA
# =============================================================================

class TestSMA:
    """Simple moving average with warm-up over samples seen so far."""

    def test_known_sequence(self):
        """SMA(3) on 1..5 -> 1, 1.5, 2, 3, 4."""
        assert run(SMA(period=3), [1, 2, 3, 4, 5]) == pytest.approx([1.0, 1.5, 2.0, 3.0, 4.0])

    def test_warmup_equals_mean_of_seen(self, walk):
        """For N <= period the output is the mean of exactly N prices."""
        closes = walk.closes()[:20]
        sma = SMA(period=20)
        for n, price in enumerate(closes, start=1):
            assert sma.update(price) == pytest.approx(np.mean(closes[:n]), rel=1e-12)
            assert sma.is_ready == (n == 20)

    def test_matches_pandas_rolling(self, walk):
        """Full stream equals rolling(period, min_periods=1).mean()."""
        expected = walk.close.rolling(14, min_periods=1).mean().to_numpy()
        np.testing.assert_allclose(run(SMA(period=14), walk.closes()), expected, rtol=1e-10)

    def test_period_one_is_identity(self):
        assert run(SMA(period=1), [3.0, -1.0, 7.5]) == [3.0, -1.0, 7.5]

    def test_reads_close_from_bar(self, bar):
        assert SMA(period=5).update(bar) == 102.0

    @pytest.mark.parametrize("period", [0, -3, 2.5, True, "20"])
    def test_invalid_period(self, period):
        with pytest.raises(ConfigurationError):
            SMA(period=period)

    def test_str(self):
        assert str(SMA(period=20)) == "SMA(20)"


# =============================================================================
# EMA / WilderMA
# =============================================================================

class TestEMA:
    """Exponential moving average seeded with the first input."""

    def test_known_sequence(self):
        """EMA(3) on 2, 4, 6 -> 2, 3, 4.5 (alpha = 0.5)."""
        assert run(EMA(period=3), [2.0, 4.0, 6.0]) == pytest.approx([2.0, 3.0, 4.5])

    def test_first_update_returns_input(self):
        ema = EMA(period=50)
        assert ema.update(123.45) == 123.45
        assert ema.is_ready

    def test_recurrence(self, walk):
        """Each value is alpha * price + (1 - alpha) * previous."""
        ema = EMA(period=10)
        alpha = 2.0 / 11.0
        assert ema.alpha == pytest.approx(alpha)
        prev = None
        for price in walk.closes()[:50]:
            value = ema.update(price)
            if prev is not None:
                assert value == pytest.approx(alpha * price + (1 - alpha) * prev, abs=1e-8)
            prev = value

    def test_matches_pandas_ewm(self, walk):
        expected = walk.close.ewm(span=12, adjust=False).mean().to_numpy()
        np.testing.assert_allclose(run(EMA(period=12), walk.closes()), expected, rtol=1e-10)

    def test_constant_input_stays_constant(self):
        assert run(EMA(period=5), [7.0] * 10) == [7.0] * 10


class TestWilderMA:
    """Wilder's smoothing, alpha = 1 / period."""

    def test_matches_pandas_ewm_alpha(self, walk):
        expected = walk.close.ewm(alpha=1 / 14, adjust=False).mean().to_numpy()
        np.testing.assert_allclose(run(WilderMA(period=14), walk.closes()), expected, rtol=1e-10)

    def test_alpha(self):
        assert WilderMA(period=4).alpha == 0.25

    def test_str(self):
        assert str(WilderMA(period=14)) == "RMA(14)"


# =============================================================================
# Rate of Change
# =============================================================================

class TestRateOfChange:
    """Percent change against the price ``period`` samples ago."""

    def test_known_sequence(self):
        """During warm-up the oldest seen price is the reference."""
        values = run(RateOfChange(period=2), [100.0, 110.0, 121.0, 133.1])
        assert values == pytest.approx([0.0, 10.0, 21.0, 21.0])

    def test_matches_pandas_shift(self, walk):
        roc = RateOfChange(period=5)
        values = run(roc, walk.closes())
        expected = ((walk.close / walk.close.shift(5) - 1.0) * 100.0).to_numpy()
        np.testing.assert_allclose(values[5:], expected[5:], rtol=1e-9, atol=1e-10)
        assert roc.is_ready

    def test_zero_reference_is_zero(self):
        assert run(RateOfChange(period=1), [0.0, 5.0]) == [0.0, 0.0]


# =============================================================================
# Maximum / Minimum
# =============================================================================

class TestExtremes:
    """Rolling highest high / lowest low."""

    def test_numbers(self):
        assert run(Maximum(period=3), [1, 5, 2, 3, 1, 0]) == [1, 5, 5, 5, 3, 3]
        assert run(Minimum(period=3), [4, 2, 5, 6, 7, 1]) == [4, 2, 2, 2, 5, 1]

    def test_bars_use_high_and_low(self, walk):
        bars = walk.bars()
        highs = run(Maximum(period=10), bars)
        lows = run(Minimum(period=10), bars)
        np.testing.assert_array_equal(highs, walk.high.rolling(10, min_periods=1).max().to_numpy())
        np.testing.assert_array_equal(lows, walk.low.rolling(10, min_periods=1).min().to_numpy())

    def test_bars_since(self):
        m = Maximum(period=5)
        run(m, [1.0, 9.0, 2.0, 3.0])
        assert m.bars_since == 2

    def test_ready_after_period(self):
        m = Minimum(period=3)
        run(m, [1.0, 2.0])
        assert not m.is_ready
        m.update(3.0)
        assert m.is_ready


# =============================================================================
# True Range
# =============================================================================

class TestTrueRange:
    """max(high-low, |high-prev_close|, |low-prev_close|)."""

    def test_first_bar_is_high_minus_low(self, bar):
        assert TrueRange().update(bar) == 10.0

    def test_gap_up_uses_previous_close(self):
        tr = TrueRange()
        tr.update(Bar(open=10, high=11, low=9, close=10))
        # Gap: high - prev_close = 15 - 10
        assert tr.update(Bar(open=14, high=15, low=13, close=14)) == 5.0

    def test_matches_pandas(self, walk):
        prev_close = walk.close.shift()
        expected = pd.concat(
            [walk.high - walk.low, (walk.high - prev_close).abs(), (walk.low - prev_close).abs()],
            axis=1,
        ).max(axis=1).to_numpy()
        np.testing.assert_allclose(run(TrueRange(), walk.bars()), expected, rtol=1e-12)


class TestSharedBases:
    """Private bases only exist to be subclassed."""

    @pytest.mark.parametrize("base", [_ExponentialSmoother, _RollingExtreme])
    def test_not_instantiable(self, base):
        with pytest.raises(TypeError, match="abstract"):
            base(period=3)
