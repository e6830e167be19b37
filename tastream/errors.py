"""
Exception hierarchy for tastream.

- ConfigurationError: bad construction parameters (raised eagerly, never
  from update()).
- InvalidSampleError: a sample that cannot be read by an indicator.

Both subclass ValueError so callers that already guard parameter parsing
with ``except ValueError`` keep working.
"""

from __future__ import annotations


class TastreamError(Exception):
    """Base class for all tastream errors."""


class ConfigurationError(TastreamError, ValueError):
    """Invalid indicator configuration (period, multiplier, ordering, type)."""


class InvalidSampleError(TastreamError, ValueError):
    """Sample is malformed or lacks a field the indicator needs."""
