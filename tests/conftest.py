"""Shared pytest fixtures for the statehistory suite."""

from __future__ import annotations

import random
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta

import pytest

from statehistory.core.settings import load_settings


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Rebuild cached settings after each test so env overrides never leak."""
    yield
    load_settings.cache_clear()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """A deterministic clock that advances one second per call."""
    start = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    ticks = {"n": 0}

    def clock() -> datetime:
        now = start + timedelta(seconds=ticks["n"])
        ticks["n"] += 1
        return now

    return clock


@pytest.fixture
def seeded_rng() -> random.Random:
    """A seeded random source for reproducible labels."""
    return random.Random(1234)
