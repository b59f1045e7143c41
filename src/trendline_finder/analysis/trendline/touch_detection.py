"""Touch detection for trendlines."""

from typing import Protocol

import numpy as np
import pandas as pd

from trendline_finder.analysis.models import LineCandidate, TouchPoint, TouchResult


class Line(Protocol):
    def price_at(self, index: float) -> float: ...


def detect_touches(
    df: pd.DataFrame,
    line: Line,
    tolerance: float = 0.0075,
    price_column: str = "Low",
) -> list[TouchPoint]:
    """
    Detect points where price touched or came close to a line.

    A touch is detected when the bar's price (Low by default) is within
    the tolerance percentage of the line value at that bar.

    Args:
        df: DataFrame with OHLCV data and DatetimeIndex
        line: Any object with a price_at(bar_index) method
        tolerance: Fractional tolerance, 0.0075 means within ±0.75% of the line
        price_column: Column compared against the line ("Low" or "High")

    Returns:
        List of TouchPoint objects sorted by bar index
    """
    if len(df) == 0:
        return []

    prices = df[price_column].to_numpy(dtype=float)
    touches = []

    for i in range(len(df)):
        line_price = line.price_at(i)

        # A line at or below zero has no meaningful percentage band
        if line_price <= 0:
            continue

        deviation_pct = (prices[i] - line_price) / line_price

        if abs(deviation_pct) <= tolerance:
            touches.append(
                TouchPoint(
                    date=df.index[i].date(),
                    price=float(prices[i]),
                    line_price=float(line_price),
                    deviation_pct=float(deviation_pct),
                    bar_index=i,
                )
            )

    return touches


def relevant_prices(candidate: LineCandidate, df: pd.DataFrame) -> np.ndarray:
    """
    Pick the extreme of each bar that a line is tested against.

    Support lines are tested against Lows and resistance lines against
    Highs. A cross line is tested against the Low of bars it approaches from
    below (line at or under the bar's midpoint) and the High otherwise.
    """
    lows = df["Low"].to_numpy(dtype=float)
    highs = df["High"].to_numpy(dtype=float)

    if candidate.kind == "support":
        return lows
    if candidate.kind == "resistance":
        return highs

    projected = candidate.slope * np.arange(len(df)) + candidate.intercept
    return np.where(projected <= (lows + highs) / 2, lows, highs)


def evaluate_touches(
    candidate: LineCandidate,
    df: pd.DataFrame,
    tolerance_pct: float = 0.0075,
) -> TouchResult:
    """
    Count the bars of the whole series that touch a candidate line.

    Args:
        candidate: Line to project across the series
        df: DataFrame with OHLCV data
        tolerance_pct: Fractional touch band around the projected price

    Returns:
        TouchResult whose indices always include both anchors
    """
    projected = candidate.slope * np.arange(len(df)) + candidate.intercept
    prices = relevant_prices(candidate, df)

    positive = projected > 0
    deviation = np.full(len(df), np.inf)
    deviation[positive] = np.abs(prices[positive] - projected[positive]) / projected[positive]

    touching = set(np.flatnonzero(deviation <= tolerance_pct).tolist())
    touching.update((candidate.first.index, candidate.second.index))

    return TouchResult(candidate=candidate, touch_indices=sorted(touching))


def filter_by_touch_count(results: list[TouchResult], min_touch_count: int) -> list[TouchResult]:
    """Drop lines touched by fewer than min_touch_count bars."""
    return [r for r in results if r.touch_count >= min_touch_count]
