"""Shared fixtures for the Alpha Desk test suite."""

import math
from datetime import date, timedelta
from typing import Optional, Sequence

import pytest

from alphadesk.schemas.market import Bar


def make_bars(
    closes: Sequence[Optional[float]],
    highs: Optional[Sequence[float]] = None,
    lows: Optional[Sequence[float]] = None,
    start: date = date(2024, 1, 1),
) -> list[Bar]:
    """Build a daily series; high/low default to close +/- 1."""
    bars = []
    for i, close in enumerate(closes):
        reference = close if close is not None else 100.0
        bars.append(
            Bar(
                date=(start + timedelta(days=i)).isoformat(),
                open=reference,
                high=highs[i] if highs is not None else reference + 1,
                low=lows[i] if lows is not None else reference - 1,
                close=close,
            )
        )
    return bars


@pytest.fixture
def long_series() -> list[Bar]:
    """150 bars of a drifting wave, enough to warm up every indicator."""
    closes = [100 + 10 * math.sin(i / 7) + 0.1 * i for i in range(150)]
    highs = [c + 1 + (i % 3) * 0.5 for i, c in enumerate(closes)]
    lows = [c - 1 - (i % 2) * 0.5 for i, c in enumerate(closes)]
    return make_bars(closes, highs, lows)
