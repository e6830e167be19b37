"""
Snapshot and restore of indicator state.

A snapshot is plain JSON-compatible data:

    {
        "type": "sma",
        "config": {"period": 3},
        "state": {"_window": {...}, "_running_sum": 6.0, ...},
    }

restore() rebuilds the indicator through the factory from "type" and
"config", then loads "state" into it. The restored instance produces the
same outputs as the source instance would have for every later sample.
"""

from __future__ import annotations

import json
from typing import Any

from ..errors import ConfigurationError
from ..utils.logger import get_logger
from .base import IncrementalIndicator
from .factory import create_indicator, type_name_of

logger = get_logger("state")


def snapshot(indicator: IncrementalIndicator) -> dict[str, Any]:
    """
    Capture configuration and rolling state of an indicator.

    Raises:
        ConfigurationError: If the indicator's class is not registered.
    """
    indicator_type = type_name_of(indicator)
    data = {"type": indicator_type, **indicator.state_dict()}
    logger.debug(f"Snapshot of {indicator} after {indicator.count} samples")
    return data


def restore(data: dict[str, Any]) -> IncrementalIndicator:
    """
    Rebuild an indicator from snapshot() output.

    Raises:
        ConfigurationError: If the snapshot is malformed or names an
            unknown indicator type.
    """
    try:
        indicator_type = data["type"]
        config = data["config"]
    except (KeyError, TypeError):
        raise ConfigurationError(
            "Malformed snapshot: expected 'type', 'config' and 'state' keys"
        ) from None

    indicator = create_indicator(indicator_type, config)
    indicator.load_state_dict({"config": config, "state": data.get("state")})
    logger.debug(f"Restored {indicator} at {indicator.count} samples")
    return indicator


def dumps(indicator: IncrementalIndicator) -> str:
    """Serialize an indicator snapshot to a JSON string (NaN encoded as NaN)."""
    return json.dumps(snapshot(indicator))


def loads(text: str) -> IncrementalIndicator:
    """
    Rebuild an indicator from a dumps() string.

    Raises:
        ConfigurationError: If the text is not valid JSON or not a snapshot.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Snapshot is not valid JSON: {e}") from e
    return restore(data)
