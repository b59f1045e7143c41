"""Shared test fixtures."""

import numpy as np
import pandas as pd
import pytest

from trendline_finder.config import TrendlineConfig


def make_bars_df(
    highs: list[float],
    lows: list[float],
    start_date: str = "2024-01-01",
) -> pd.DataFrame:
    """Create an OHLCV DataFrame from High and Low values."""
    dates = pd.date_range(start=start_date, periods=len(highs), freq="D")
    mids = [(h + l) / 2 for h, l in zip(highs, lows)]
    return pd.DataFrame(
        {
            "Open": mids,
            "High": [float(h) for h in highs],
            "Low": [float(l) for l in lows],
            "Close": mids,
            "Volume": [1000000] * len(highs),
        },
        index=dates,
    )


def make_noisy_df(bars: int = 200, seed: int = 42) -> pd.DataFrame:
    """Random walk with a slow cycle: plenty of pivots and overlapping lines."""
    rng = np.random.default_rng(seed)
    t = np.arange(bars)
    closes = 150 + np.cumsum(rng.normal(0, 1, bars)) + 8 * np.sin(t / 12)
    highs = closes + rng.uniform(0.2, 2.0, bars)
    lows = closes - rng.uniform(0.2, 2.0, bars)
    return make_bars_df(list(highs), list(lows))


@pytest.fixture
def flat_df() -> pd.DataFrame:
    """50 identical bars at 100."""
    return make_bars_df([100.0] * 50, [100.0] * 50)


@pytest.fixture
def rising_df() -> pd.DataFrame:
    """30 bars with low[i] = 100 + i."""
    lows = [100.0 + i for i in range(30)]
    return make_bars_df([l + 1 for l in lows], lows)


@pytest.fixture
def double_bottom_df() -> pd.DataFrame:
    """Two troughs at 90 (bars 5 and 25), prices above 90 everywhere else."""
    lows = [90.0 + 2 * min(abs(i - 5), abs(i - 25)) for i in range(31)]
    return make_bars_df([l + 5 for l in lows], lows)


@pytest.fixture
def noisy_df() -> pd.DataFrame:
    return make_noisy_df()


@pytest.fixture
def default_config() -> TrendlineConfig:
    return TrendlineConfig()
