"""Deduplication, ordering and shaping of surviving trendlines."""

from collections import Counter

import pandas as pd

from trendline_finder.analysis.models import TouchResult, TrendlineData, TrendPoint


def _dedup_priority(result: TouchResult) -> tuple:
    c = result.candidate
    return (-result.touch_count, -c.anchor_span, -c.recency, c.first.index, c.second.index)


def _rank_key(result: TouchResult) -> tuple:
    c = result.candidate
    return (-result.touch_count, -c.recency, -c.anchor_span, c.kind, c.first.index, c.second.index)


def is_duplicate(
    a: TouchResult,
    b: TouchResult,
    midpoint: float,
    tolerance_pct: float,
    slope_tolerance: float,
) -> bool:
    """
    Check whether two lines describe the same level.

    Lines are compared at the series midpoint: they are duplicates when they
    share a direction, their slopes relative to the midpoint price differ by
    less than slope_tolerance, and their midpoint prices differ by less than
    tolerance_pct of the larger one. Comparing relative slopes keeps
    near-horizontal lines comparable.
    """
    ca, cb = a.candidate, b.candidate
    if ca.kind != cb.kind:
        return False

    va, vb = ca.price_at(midpoint), cb.price_at(midpoint)
    if va <= 0 or vb <= 0:
        return ca.slope == cb.slope and ca.intercept == cb.intercept

    relative_slope_diff = abs(ca.slope / va - cb.slope / vb)
    return relative_slope_diff < slope_tolerance and abs(va - vb) < tolerance_pct * max(va, vb)


def deduplicate(
    results: list[TouchResult],
    bar_count: int,
    tolerance_pct: float,
    slope_tolerance: float,
) -> list[TouchResult]:
    """
    Collapse near-identical lines, keeping the strongest of each group.

    The strongest line has the most touches; ties go to the longer anchor
    span, then the more recent anchor, then the earlier first anchor.
    """
    midpoint = (bar_count - 1) / 2
    kept: list[TouchResult] = []

    for result in sorted(results, key=_dedup_priority):
        if any(is_duplicate(result, k, midpoint, tolerance_pct, slope_tolerance) for k in kept):
            continue
        kept.append(result)

    return kept


def order_results(results: list[TouchResult]) -> list[TouchResult]:
    """Sort by touch count, then recency of the latest anchor, both descending."""
    return sorted(results, key=_rank_key)


def cap_per_direction(results: list[TouchResult], max_per_direction: int) -> list[TouchResult]:
    """Keep the first max_per_direction results of each direction, preserving order."""
    seen: Counter = Counter()
    capped = []
    for result in results:
        kind = result.candidate.kind
        if seen[kind] >= max_per_direction:
            continue
        seen[kind] += 1
        capped.append(result)
    return capped


def to_trendline_data(result: TouchResult, df: pd.DataFrame) -> TrendlineData:
    """Shape a touch result as a renderable segment between its anchors."""
    c = result.candidate
    points = [
        TrendPoint(time=df.index[i].date(), value=float(c.price_at(i)))
        for i in (c.first.index, c.second.index)
    ]
    return TrendlineData(
        direction=c.kind,
        touch_count=result.touch_count,
        points=points,
        slope=c.slope,
        intercept=c.intercept,
        anchor_indices=(c.first.index, c.second.index),
    )


def rank_trendlines(
    results: list[TouchResult],
    df: pd.DataFrame,
    tolerance_pct: float = 0.0075,
    slope_tolerance: float = 0.001,
    max_per_direction: int = 3,
) -> list[TrendlineData]:
    """
    Turn significant lines into the ordered output list.

    Args:
        results: Lines that already passed the minimum touch filter
        df: DataFrame the lines were evaluated on
        tolerance_pct: Touch tolerance, reused as the duplicate price band
        slope_tolerance: Relative slope band for duplicates
        max_per_direction: Cap applied after ordering

    Returns:
        Ordered TrendlineData list
    """
    unique = deduplicate(results, len(df), tolerance_pct, slope_tolerance)
    ordered = order_results(unique)
    capped = cap_per_direction(ordered, max_per_direction)
    return [to_trendline_data(r, df) for r in capped]
