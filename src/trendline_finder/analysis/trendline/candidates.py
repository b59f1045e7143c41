"""Line candidate generation from pivot pairs."""

import numpy as np
import pandas as pd

from trendline_finder.analysis.models import Direction, LineCandidate, Pivot


def _side_states(candidate: LineCandidate, df: pd.DataFrame) -> np.ndarray:
    """Per bar: +1 when the line is above the bar's High, -1 when below its Low, 0 otherwise."""
    projected = candidate.slope * np.arange(len(df)) + candidate.intercept
    highs = df["High"].to_numpy(dtype=float)
    lows = df["Low"].to_numpy(dtype=float)

    states = np.zeros(len(df), dtype=int)
    states[projected > highs] = 1
    states[projected < lows] = -1
    return states


def count_crossings(candidate: LineCandidate, df: pd.DataFrame) -> int:
    """
    Count how often price action switches sides of a line.

    Bars the line passes through are ignored; only switches between bars
    that sit entirely above and entirely below the line count. The test
    does not depend on the touch tolerance, so a line keeps its direction
    whatever band it is later evaluated with.
    """
    states = _side_states(candidate, df)
    sided = states[states != 0]
    if len(sided) < 2:
        return 0
    return int(np.count_nonzero(np.diff(sided)))


def classify_mixed_pair(first: Pivot, second: Pivot, df: pd.DataFrame) -> LineCandidate:
    """
    Classify a line through one swing high and one swing low.

    The line is a cross when price moves from one side of it to the other at
    least once. When no such switch is visible the pair is ambiguous and is
    labelled after the later pivot: support for a low, resistance for a high.
    """
    candidate = LineCandidate.through(first, second, "cross")
    if count_crossings(candidate, df) > 0:
        return candidate

    fallback: Direction = "support" if second.kind == "low" else "resistance"
    return LineCandidate.through(first, second, fallback)


def generate_candidates(
    pivots: list[Pivot],
    df: pd.DataFrame,
    min_span: int = 1,
) -> list[LineCandidate]:
    """
    Build every candidate line from pairs of pivots.

    Two lows give a support candidate, two highs a resistance candidate and
    one of each a cross candidate (see classify_mixed_pair). The number of
    candidates grows with the square of the pivot count, so a wider pivot
    window is the way to keep long series cheap.

    Args:
        pivots: Pivots ordered by bar index
        df: DataFrame with OHLCV data the pivots came from
        min_span: Minimum bars between the two anchors

    Returns:
        Candidates in pair order (earlier first anchor first)
    """
    candidates = []

    for i, first in enumerate(pivots):
        for second in pivots[i + 1 :]:
            if second.index - first.index < min_span:
                continue

            if first.kind == second.kind == "low":
                candidates.append(LineCandidate.through(first, second, "support"))
            elif first.kind == second.kind == "high":
                candidates.append(LineCandidate.through(first, second, "resistance"))
            else:
                candidates.append(classify_mixed_pair(first, second, df))

    return candidates
