"""
Synthetic data generators for indicator tests.

Provides deterministic OHLCV series for validating incremental indicators
against pandas batch computations:
- random walks (realistic, every branch of every formula exercised)
- constant prices (degenerate ranges and zero deviations)
- monotonic trends (one-sided gains, directional movement)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from tastream import Bar


# =============================================================================
# Core Data Structures
# =============================================================================

@dataclass
class SyntheticData:
    """Collection of OHLCV bars as pandas DataFrame."""
    df: pd.DataFrame

    @property
    def open(self) -> pd.Series:
        return self.df["open"]

    @property
    def high(self) -> pd.Series:
        return self.df["high"]

    @property
    def low(self) -> pd.Series:
        return self.df["low"]

    @property
    def close(self) -> pd.Series:
        return self.df["close"]

    @property
    def volume(self) -> pd.Series:
        return self.df["volume"]

    @property
    def typical_price(self) -> pd.Series:
        return (self.df["high"] + self.df["low"] + self.df["close"]) / 3.0

    def bars(self) -> list[Bar]:
        """Rows as validated Bar samples."""
        return [
            Bar(open=r.open, high=r.high, low=r.low, close=r.close, volume=r.volume)
            for r in self.df.itertuples(index=False)
        ]

    def closes(self) -> list[float]:
        return [float(c) for c in self.df["close"]]

    def __len__(self) -> int:
        return len(self.df)


def _from_closes(closes: np.ndarray, rng: np.random.Generator, wick: float) -> SyntheticData:
    """Build valid OHLCV rows around a close series."""
    n = len(closes)
    opens = np.empty(n)
    opens[0] = closes[0]
    opens[1:] = closes[:-1]
    body_high = np.maximum(opens, closes)
    body_low = np.minimum(opens, closes)
    highs = body_high + np.abs(rng.normal(0.0, wick, n)) * closes
    lows = body_low - np.abs(rng.normal(0.0, wick, n)) * closes
    volumes = rng.uniform(100.0, 1000.0, n)
    df = pd.DataFrame({
        "open": opens,
        "high": highs,
        "low": lows,
        "close": closes,
        "volume": volumes,
    })
    return SyntheticData(df=df)


# =============================================================================
# Generators
# =============================================================================

def generate_random_walk(
    n_bars: int = 300,
    start: float = 100.0,
    volatility: float = 0.01,
    seed: int = 42,
) -> SyntheticData:
    """
    Geometric random walk.

    Log returns are normal(0, volatility); prices stay positive.
    """
    rng = np.random.default_rng(seed)
    closes = start * np.exp(np.cumsum(rng.normal(0.0, volatility, n_bars)))
    return _from_closes(closes, rng, wick=volatility / 2)


def generate_trend(
    n_bars: int = 100,
    start: float = 100.0,
    step: float = 1.0,
    seed: int = 42,
) -> SyntheticData:
    """
    Strictly monotonic close series (up for step > 0, down for step < 0).

    Highs and lows move with the close so every bar is an outside move in
    the trend direction.
    """
    closes = start + step * np.arange(n_bars, dtype=np.float64)
    opens = closes - step / 2
    df = pd.DataFrame({
        "open": opens,
        "high": np.maximum(opens, closes) + abs(step) / 4,
        "low": np.minimum(opens, closes) - abs(step) / 4,
        "close": closes,
        "volume": np.full(n_bars, 500.0),
    })
    return SyntheticData(df=df)


def generate_constant(
    value: float,
    n_bars: int = 50,
    volume: float = 0.0,
) -> SyntheticData:
    """Flat line: open = high = low = close = value on every bar."""
    df = pd.DataFrame({
        "open": np.full(n_bars, value),
        "high": np.full(n_bars, value),
        "low": np.full(n_bars, value),
        "close": np.full(n_bars, value),
        "volume": np.full(n_bars, volume),
    })
    return SyntheticData(df=df)


def generate_pairs(
    n_bars: int = 200,
    rho: float = 0.6,
    seed: int = 7,
) -> tuple[np.ndarray, np.ndarray]:
    """Two normal series with population correlation ``rho``."""
    rng = np.random.default_rng(seed)
    x = rng.normal(0.0, 1.0, n_bars)
    noise = rng.normal(0.0, 1.0, n_bars)
    y = rho * x + np.sqrt(1.0 - rho * rho) * noise
    return x, y


# =============================================================================
# Helpers
# =============================================================================

def run(indicator, samples) -> list:
    """Feed every sample and collect the outputs."""
    return [indicator.update(s) for s in samples]


def as_rows(outputs) -> np.ndarray:
    """Outputs (floats or named tuples) as a 2-D float array for comparisons."""
    return np.array([list(o) if isinstance(o, tuple) else [o] for o in outputs], dtype=np.float64)


def samples_for(indicator_type: str, n: int = 120) -> list:
    """Samples a registered indicator type can consume."""
    if indicator_type == "correl":
        x, y = generate_pairs(n_bars=n)
        return list(zip(x, y))
    return generate_random_walk(n_bars=n, seed=5).bars()
