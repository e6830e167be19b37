"""
Sample abstraction for incremental indicators.

Indicators do not depend on a concrete record type. They read the fields
they need through the accessors below, which accept:

- a bare number (int/float): treated as the close price
- any object with ``close`` / ``high`` / ``low`` / ``volume`` attributes
  (Bar, a namedtuple, an exchange kline model, ...)
- a Mapping with the same keys ({"close": 101.5, ...})

Bar is the concrete OHLCV value used in tests and examples.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Any, Protocol, runtime_checkable

from ..errors import InvalidSampleError


@runtime_checkable
class HasClose(Protocol):
    """Anything that can answer its close price."""

    @property
    def close(self) -> float: ...


@runtime_checkable
class HasHighLowClose(HasClose, Protocol):
    """Anything that can answer high, low and close."""

    @property
    def high(self) -> float: ...

    @property
    def low(self) -> float: ...


@runtime_checkable
class HasVolume(Protocol):
    """Anything that can answer its traded volume."""

    @property
    def volume(self) -> float: ...


@dataclass(frozen=True)
class Bar:
    """
    Single OHLCV bar.

    Validated on construction: low <= open, close <= high and volume >= 0.
    """

    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise InvalidSampleError(
                f"Bar low ({self.low}) must not exceed high ({self.high})"
            )
        for name in ("open", "close"):
            price = getattr(self, name)
            if not self.low <= price <= self.high:
                raise InvalidSampleError(
                    f"Bar {name} ({price}) must lie within "
                    f"[low={self.low}, high={self.high}]"
                )
        if self.volume < 0:
            raise InvalidSampleError(f"Bar volume must be >= 0, got {self.volume}")

    @classmethod
    def flat(cls, price: float, volume: float = 0.0) -> Bar:
        """Bar whose open, high, low and close all equal ``price``."""
        return cls(open=price, high=price, low=price, close=price, volume=volume)

    @property
    def typical_price(self) -> float:
        """(high + low + close) / 3."""
        return (self.high + self.low + self.close) / 3.0


Sample = Any
"""Type alias for anything the accessors below accept."""


def _field(sample: Any, name: str) -> float:
    if isinstance(sample, Mapping):
        try:
            return float(sample[name])
        except KeyError:
            raise InvalidSampleError(f"Sample mapping has no '{name}' key") from None
    try:
        return float(getattr(sample, name))
    except AttributeError:
        raise InvalidSampleError(
            f"Sample of type {type(sample).__name__} has no '{name}' field"
        ) from None


def close_of(sample: Any) -> float:
    """Close price of a sample; a bare number is its own close."""
    if isinstance(sample, Real) and not isinstance(sample, bool):
        return float(sample)
    return _field(sample, "close")


def hlc_of(sample: Any) -> tuple[float, float, float]:
    """(high, low, close) of a sample. A bare number is a flat bar."""
    if isinstance(sample, Real) and not isinstance(sample, bool):
        price = float(sample)
        return price, price, price
    return _field(sample, "high"), _field(sample, "low"), _field(sample, "close")


def hlcv_of(sample: Any) -> tuple[float, float, float, float]:
    """(high, low, close, volume) of a sample. Volume is required."""
    high, low, close = hlc_of(sample)
    if isinstance(sample, Real):
        raise InvalidSampleError("Sample needs a 'volume' field; got a bare price")
    return high, low, close, _field(sample, "volume")


def pair_of(sample: Any) -> tuple[float, float]:
    """(x, y) of a paired sample, used by Correlation."""
    try:
        x, y = sample
    except (TypeError, ValueError):
        raise InvalidSampleError(
            f"Paired sample must be an (x, y) pair, got {sample!r}"
        ) from None
    return float(x), float(y)
