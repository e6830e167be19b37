"""
Base class and parameter validation for incremental indicators.

All incremental indicators inherit from IncrementalIndicator, which defines
the per-sample interface: update(), reset(), value, is_ready. Concrete
indicators are dataclasses: public fields are the immutable configuration,
underscore fields (init=False) are the rolling state.

The output type is a type parameter so that single-value and multi-value
indicators share one contract:

    SMA  -> IncrementalIndicator[float]
    MACD -> IncrementalIndicator[MACDOutput]
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import fields
from numbers import Integral, Real
from typing import Any, ClassVar, Generic, TypeVar

import numpy as np

from ..config import get_config
from ..errors import ConfigurationError
from .window import MonotonicWindow, RingBuffer

OutputT = TypeVar("OutputT")


class IncrementalIndicator(ABC, Generic[OutputT]):
    """Base class for incremental indicators."""

    short_name: ClassVar[str] = ""

    _count: int

    @abstractmethod
    def update(self, sample: Any) -> OutputT:
        """Ingest the next sample and return the new output."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Reset state to initial (configuration is kept)."""
        ...

    @property
    @abstractmethod
    def value(self) -> OutputT:
        """Most recent output; NaN (or a tuple of NaNs) before the first sample."""
        ...

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """True when warmup period complete."""
        ...

    @property
    def count(self) -> int:
        """Samples ingested since construction or the last reset()."""
        return self._count

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def config(self) -> dict[str, Any]:
        """Constructor parameters of this instance."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}

    def state_dict(self) -> dict[str, Any]:
        """
        Full configuration and rolling state as plain Python data.

        Nested sub-indicators and windows are expanded recursively, so the
        result can be handed to json.dumps() as is (NaN included).
        """
        return {
            "config": self.config(),
            "state": {
                f.name: _encode(getattr(self, f.name))
                for f in fields(self)
                if not f.init
            },
        }

    def load_state_dict(self, state: dict[str, Any]) -> None:
        """
        Replace the rolling state with one produced by state_dict().

        Raises:
            ConfigurationError: If the snapshot belongs to a differently
                configured indicator or is malformed.
        """
        try:
            config = dict(state["config"])
            values = dict(state["state"])
        except (KeyError, TypeError, ValueError):
            raise ConfigurationError(
                f"Malformed state for {self}: expected 'config' and 'state' keys"
            ) from None

        if config != self.config():
            raise ConfigurationError(
                f"State was captured from {type(self).__name__}{config}, "
                f"cannot load into {self}"
            )

        expected = {f.name for f in fields(self) if not f.init}
        if set(values) != expected:
            raise ConfigurationError(
                f"State fields {sorted(values)} do not match {sorted(expected)} "
                f"for {type(self).__name__}"
            )

        try:
            for name, raw in values.items():
                _decode_into(self, name, raw)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed state for {self}: {e}") from e

    def __str__(self) -> str:
        name = self.short_name or type(self).__name__
        params = ", ".join(str(v) for v in self.config().values())
        return f"{name}({params})"


def _encode(value: Any) -> Any:
    if isinstance(value, (IncrementalIndicator, RingBuffer, MonotonicWindow)):
        return value.state_dict()
    if isinstance(value, tuple):
        return [_encode(v) for v in value]
    if isinstance(value, np.floating):
        return float(value)
    return value


def _decode_into(owner: IncrementalIndicator, name: str, raw: Any) -> None:
    current = getattr(owner, name)
    if isinstance(current, (IncrementalIndicator, RingBuffer, MonotonicWindow)):
        current.load_state_dict(raw)
    elif isinstance(current, tuple) and hasattr(current, "_fields"):
        setattr(owner, name, type(current)(*raw))
    else:
        setattr(owner, name, raw)


# =============================================================================
# Parameter validation
# =============================================================================


def check_period(name: str, value: Any, minimum: int = 1) -> int:
    """
    Validate a window size / smoothing period.

    Raises:
        ConfigurationError: If value is not an integer, is below ``minimum``
            or exceeds the configured maximum period.
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    max_period = get_config().indicators.max_period
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    if value > max_period:
        raise ConfigurationError(
            f"{name} must be <= {max_period} (TASTREAM_MAX_PERIOD), got {value}"
        )
    return int(value)


def check_multiplier(name: str, value: Any) -> float:
    """
    Validate a band width / scale multiplier.

    Raises:
        ConfigurationError: If value is not a finite, non-negative number.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ConfigurationError(f"{name} must be finite and >= 0, got {value}")
    return float(value)


def check_ordered(fast_name: str, fast: int, slow_name: str, slow: int) -> None:
    """Raise ConfigurationError unless fast < slow."""
    if fast >= slow:
        raise ConfigurationError(
            f"{fast_name} ({fast}) must be strictly less than {slow_name} ({slow})"
        )
