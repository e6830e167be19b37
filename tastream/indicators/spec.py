"""
IndicatorSpec: Declarative indicator specification.

Each IndicatorSpec defines:
- indicator_type: What indicator to build (a factory key: "sma", "macd", ...)
- key: Name under which the indicator's output is reported
- params: Constructor parameters for the indicator

Specs are immutable and validated on construction, so a bad spec fails when
it is declared rather than when the first sample arrives. IndicatorSet turns
a list of specs into one indicator instance per spec over a single stream.

YAML format accepted by load_specs():

    indicators:
      - type: sma
        key: sma_20
        params: {period: 20}
      - type: macd
        key: macd
        params: {fast: 12, slow: 26, signal: 9}
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigurationError
from ..utils.logger import get_logger
from .base import IncrementalIndicator
from .factory import create_indicator, supports, valid_params

logger = get_logger("spec")


@dataclass(frozen=True)
class IndicatorSpec:
    """
    Specification for a single indicator.

    Attributes:
        indicator_type: Factory key, normalized to lowercase
        key: Output name, unique within an IndicatorSet
        params: Constructor parameters (e.g., {"period": 20})

    Examples:
        IndicatorSpec(indicator_type="ema", key="ema_20", params={"period": 20})
        IndicatorSpec(indicator_type="bbands", key="bb", params={"period": 20, "multiplier": 2.0})
    """

    indicator_type: str
    key: str
    params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate spec."""
        if not self.key:
            raise ConfigurationError("key is required")
        if not isinstance(self.params, Mapping):
            raise ConfigurationError(
                f"params for '{self.key}' must be a mapping, got {type(self.params).__name__}"
            )

        # Normalize indicator type to lowercase string
        ind_type_str = str(self.indicator_type).lower()
        if not supports(ind_type_str):
            raise ConfigurationError(
                f"Unsupported indicator type for '{self.key}': '{ind_type_str}'"
            )
        object.__setattr__(self, "indicator_type", ind_type_str)
        object.__setattr__(self, "params", dict(self.params))

        unknown = set(self.params) - valid_params(ind_type_str)
        if unknown:
            raise ConfigurationError(
                f"Unknown params for '{self.key}' ({ind_type_str}): {sorted(unknown)}"
            )

    def build(self) -> IncrementalIndicator:
        """Create the indicator this spec describes."""
        return create_indicator(self.indicator_type, self.params)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "type": self.indicator_type,
            "key": self.key,
            "params": dict(self.params),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> IndicatorSpec:
        """
        Create from dict.

        Accepts the YAML entry shape {type, key, params}.
        """
        try:
            return cls(
                indicator_type=d["type"],
                key=d["key"],
                params=d.get("params") or {},
            )
        except KeyError as e:
            raise ConfigurationError(f"Indicator entry is missing {e.args[0]!r}: {dict(d)}") from None


def load_specs(path: str | Path) -> list[IndicatorSpec]:
    """
    Load indicator specs from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the document is empty, malformed, or declares
            the same key twice
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not raw:
        raise ConfigurationError(f"Empty or invalid YAML in {path}")
    if not isinstance(raw, Mapping) or not isinstance(raw.get("indicators"), list):
        raise ConfigurationError(f"{path} must contain an 'indicators' list")

    specs = []
    for entry in raw["indicators"]:
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Indicator entry in {path} must be a mapping, got {entry!r}")
        specs.append(IndicatorSpec.from_dict(entry))

    _check_unique_keys(specs)
    logger.info(f"Loaded {len(specs)} indicator specs from {path}")
    return specs


def _check_unique_keys(specs: Iterable[IndicatorSpec]) -> None:
    seen: set[str] = set()
    for spec in specs:
        if spec.key in seen:
            raise ConfigurationError(f"Duplicate indicator key: '{spec.key}'")
        seen.add(spec.key)


class IndicatorSet:
    """
    One indicator instance per spec, all fed from the same stream.

    Example:
        >>> indicators = IndicatorSet([
        ...     IndicatorSpec("sma", "fast", {"period": 3}),
        ...     IndicatorSpec("sma", "slow", {"period": 5}),
        ... ])
        >>> indicators.update(10.0)
        {'fast': 10.0, 'slow': 10.0}
    """

    def __init__(self, specs: Iterable[IndicatorSpec]) -> None:
        self.specs = list(specs)
        _check_unique_keys(self.specs)
        self._indicators: dict[str, IncrementalIndicator] = {
            spec.key: spec.build() for spec in self.specs
        }

    @classmethod
    def from_yaml(cls, path: str | Path) -> IndicatorSet:
        return cls(load_specs(path))

    def update(self, sample: Any) -> dict[str, Any]:
        """Feed one sample to every indicator; returns {key: output}."""
        return {key: ind.update(sample) for key, ind in self._indicators.items()}

    def reset(self) -> None:
        for indicator in self._indicators.values():
            indicator.reset()

    @property
    def values(self) -> dict[str, Any]:
        """Latest output of every indicator without ingesting."""
        return {key: ind.value for key, ind in self._indicators.items()}

    @property
    def is_ready(self) -> bool:
        """True when every indicator has finished warming up."""
        return all(ind.is_ready for ind in self._indicators.values())

    def keys(self) -> list[str]:
        return list(self._indicators)

    def __getitem__(self, key: str) -> IncrementalIndicator:
        return self._indicators[key]

    def __contains__(self, key: object) -> bool:
        return key in self._indicators

    def __iter__(self) -> Iterator[str]:
        return iter(self._indicators)

    def __len__(self) -> int:
        return len(self._indicators)
