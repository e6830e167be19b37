"""
Tests for the sample abstraction: Bar validation and field accessors.
"""

from collections import namedtuple

import numpy as np
import pytest

from tastream import ATR, SMA, Bar, InvalidSampleError
from tastream.indicators.sample import (
    HasClose,
    HasHighLowClose,
    HasVolume,
    close_of,
    hlc_of,
    hlcv_of,
)


Kline = namedtuple("Kline", ["open", "high", "low", "close", "volume"])


class TestBar:
    """Frozen OHLCV value, validated on construction."""

    def test_valid(self, bar):
        assert bar.typical_price == pytest.approx((105.0 + 95.0 + 102.0) / 3)
        assert isinstance(bar, HasHighLowClose)
        assert isinstance(bar, HasVolume)

    def test_flat(self):
        b = Bar.flat(10.0, volume=5.0)
        assert (b.open, b.high, b.low, b.close, b.volume) == (10.0, 10.0, 10.0, 10.0, 5.0)

    @pytest.mark.parametrize("kwargs", [
        {"open": 10, "high": 9, "low": 11, "close": 10},
        {"open": 12, "high": 11, "low": 9, "close": 10},
        {"open": 10, "high": 11, "low": 9, "close": 8},
        {"open": 10, "high": 11, "low": 9, "close": 10, "volume": -1},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidSampleError):
            Bar(**kwargs)

    def test_frozen(self, bar):
        with pytest.raises(AttributeError):
            bar.close = 1.0


class TestAccessors:
    """Numbers, attribute objects and mappings are all samples."""

    def test_numbers(self):
        assert close_of(5) == 5.0
        assert close_of(np.float64(2.5)) == 2.5
        assert hlc_of(3.0) == (3.0, 3.0, 3.0)
        assert isinstance(close_of(np.int64(7)), float)

    def test_attribute_objects(self):
        k = Kline(open=1.0, high=2.0, low=0.5, close=1.5, volume=10.0)
        assert isinstance(k, HasClose)
        assert hlcv_of(k) == (2.0, 0.5, 1.5, 10.0)

    def test_mappings(self):
        sample = {"high": 2, "low": 1, "close": 1.5, "volume": 3}
        assert close_of(sample) == 1.5
        assert hlcv_of(sample) == (2.0, 1.0, 1.5, 3.0)

    def test_missing_fields(self):
        with pytest.raises(InvalidSampleError, match="'close'"):
            close_of({"price": 1.0})
        with pytest.raises(InvalidSampleError, match="'high'"):
            hlc_of(object())
        with pytest.raises(InvalidSampleError, match="volume"):
            hlcv_of(1.0)

    def test_bool_is_not_a_price(self):
        with pytest.raises(InvalidSampleError):
            close_of(True)

    def test_indicators_accept_any_sample_shape(self):
        k = Kline(open=1.0, high=2.0, low=0.5, close=1.5, volume=10.0)
        assert SMA(period=2).update(k) == 1.5
        assert SMA(period=2).update({"close": 4.0}) == 4.0
        assert ATR(period=3).update({"high": 2.0, "low": 0.5, "close": 1.0}) == 1.5
