"""
Pytest configuration for tastream tests.
"""

import pytest

from tastream import Bar
from tastream.config import Config
from tests.fixtures import (
    SyntheticData,
    generate_constant,
    generate_random_walk,
    generate_trend,
)


@pytest.fixture
def walk() -> SyntheticData:
    """300-bar seeded random walk."""
    return generate_random_walk()


@pytest.fixture
def uptrend() -> SyntheticData:
    """Strictly rising closes."""
    return generate_trend(step=1.0)


@pytest.fixture
def downtrend() -> SyntheticData:
    """Strictly falling closes."""
    return generate_trend(start=200.0, step=-1.0)


@pytest.fixture
def flat() -> SyntheticData:
    """Constant price with zero volume."""
    return generate_constant(100.0)


@pytest.fixture
def bar() -> Bar:
    """A single valid bar."""
    return Bar(open=100.0, high=105.0, low=95.0, close=102.0, volume=1000.0)


@pytest.fixture
def env_config(monkeypatch):
    """
    Reload Config against a patched environment.

    Yields a function that applies env overrides and returns the fresh
    Config. The original environment and config are restored afterwards.
    """
    def _apply(env_file: str = ".env", **env: str) -> Config:
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return Config.reload(env_file)

    yield _apply

    monkeypatch.undo()
    Config.reload()
