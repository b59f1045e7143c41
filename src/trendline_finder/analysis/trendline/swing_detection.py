"""Swing low and high (pivot) detection."""

import pandas as pd

from trendline_finder.analysis.models import Pivot, PivotKind


def _detect_extrema(df: pd.DataFrame, column: str, kind: PivotKind, lookback: int) -> list[Pivot]:
    if len(df) < (2 * lookback + 1):
        return []

    values = df[column].to_numpy(dtype=float)
    pivots: list[Pivot] = []

    for i in range(lookback, len(df) - lookback):
        # Window of bars: [i-lookback, i+lookback]
        window = values[i - lookback : i + lookback + 1]
        current = values[i]

        if kind == "high":
            is_extreme = current >= window.max()
        else:
            is_extreme = current <= window.min()
        if not is_extreme:
            continue

        # Equal extremes inside one window resolve to the earliest bar
        if pivots and i - pivots[-1].index <= lookback and current == pivots[-1].price:
            continue

        pivots.append(
            Pivot(
                index=i,
                kind=kind,
                price=float(current),
                date=df.index[i].date(),
            )
        )

    return pivots


def detect_swing_highs(df: pd.DataFrame, lookback: int = 4) -> list[Pivot]:
    """
    Detect swing highs in price data.

    A swing high is a bar whose High is the highest of the surrounding
    bars (lookback on each side). Bars closer than lookback to either end
    of the series have no full neighborhood and are never swing highs.

    Args:
        df: DataFrame with OHLCV data and DatetimeIndex
        lookback: Number of bars to look back and forward

    Returns:
        List of Pivot objects ordered by bar index
    """
    return _detect_extrema(df, "High", "high", lookback)


def detect_swing_lows(df: pd.DataFrame, lookback: int = 4) -> list[Pivot]:
    """
    Detect swing lows in price data.

    A swing low is a bar whose Low is the lowest of the surrounding
    bars (lookback on each side).

    Args:
        df: DataFrame with OHLCV data and DatetimeIndex
        lookback: Number of bars to look back and forward

    Returns:
        List of Pivot objects ordered by bar index
    """
    return _detect_extrema(df, "Low", "low", lookback)


def filter_historical_highs(
    df: pd.DataFrame,
    swing_highs: list[Pivot],
    drop_threshold: float,
) -> list[Pivot]:
    """
    Keep swing highs that were followed by a meaningful sell-off.

    For each high, the lowest Low between it and the next swing high (or the
    end of the series) is compared with the high. The high is kept when
    ``min_low / high - 1 <= drop_threshold``, e.g. -0.30 keeps only highs
    followed by a 30% decline.

    Args:
        df: DataFrame with OHLCV data
        swing_highs: Swing highs ordered by bar index
        drop_threshold: Negative fraction

    Returns:
        Filtered list of swing highs
    """
    lows = df["Low"].to_numpy(dtype=float)
    last_index = len(df) - 1
    kept = []

    for i, high in enumerate(swing_highs):
        end = swing_highs[i + 1].index if i < len(swing_highs) - 1 else last_index
        if end <= high.index:
            continue
        min_low = lows[high.index + 1 : end + 1].min()
        if min_low / high.price - 1 <= drop_threshold:
            kept.append(high)

    return kept


def detect_pivots(
    df: pd.DataFrame,
    window: int = 4,
    drop_threshold: float | None = None,
) -> list[Pivot]:
    """
    Detect all swing highs and lows.

    Args:
        df: DataFrame with OHLCV data and DatetimeIndex
        window: Bars on each side that a pivot must dominate
        drop_threshold: Optional sell-off filter for swing highs

    Returns:
        Pivots ordered by bar index (highs before lows on the same bar).
        Empty when the series is shorter than 2 * window + 1 bars.
    """
    highs = detect_swing_highs(df, lookback=window)
    if drop_threshold is not None:
        highs = filter_historical_highs(df, highs, drop_threshold)
    lows = detect_swing_lows(df, lookback=window)

    return sorted(highs + lows, key=lambda p: (p.index, p.kind != "high"))
