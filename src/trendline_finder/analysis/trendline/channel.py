"""Parallel channel lines for detected trendlines."""

import numpy as np
import pandas as pd

from trendline_finder.analysis.models import ChannelData, TrendlineData, TrendPoint


def find_channel(
    trendline: TrendlineData,
    df: pd.DataFrame,
    tolerance_pct: float = 0.02,
) -> ChannelData | None:
    """
    Find the parallel line on the far side of price with the most touches.

    A support line gets a channel through bar Highs above it, a resistance
    line a channel through bar Lows below it. Every bar on the right side
    proposes an offset; the offset touched by the most bars wins, the
    earliest proposal on ties. Cross lines have no channel.

    Args:
        trendline: The main line
        df: DataFrame with OHLCV data the line was fitted on
        tolerance_pct: Fractional touch band for the channel line

    Returns:
        ChannelData, or None when no bar sits on the far side
    """
    if trendline.direction == "support":
        prices = df["High"].to_numpy(dtype=float)
        sign = 1
    elif trendline.direction == "resistance":
        prices = df["Low"].to_numpy(dtype=float)
        sign = -1
    else:
        return None

    main = trendline.slope * np.arange(len(df)) + trendline.intercept
    offsets = prices - main

    best_offset = 0.0
    best_count = 0

    for offset in offsets:
        if offset * sign <= 0:
            continue

        shifted = main + offset
        positive = shifted > 0
        deviation = np.abs(prices[positive] - shifted[positive]) / shifted[positive]
        count = int(np.count_nonzero(deviation <= tolerance_pct))

        if count > best_count:
            best_count = count
            best_offset = float(offset)

    if best_count == 0:
        return None

    return ChannelData(
        offset=best_offset,
        touch_count=best_count,
        points=[TrendPoint(time=p.time, value=p.value + best_offset) for p in trendline.points],
    )
