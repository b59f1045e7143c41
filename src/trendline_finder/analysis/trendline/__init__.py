"""Trendline detection algorithms."""

from trendline_finder.analysis.trendline.swing_detection import (
    detect_pivots,
    detect_swing_highs,
    detect_swing_lows,
    filter_historical_highs,
)
from trendline_finder.analysis.trendline.candidates import generate_candidates
from trendline_finder.analysis.trendline.touch_detection import (
    detect_touches,
    evaluate_touches,
    filter_by_touch_count,
)
from trendline_finder.analysis.trendline.ranking import rank_trendlines
from trendline_finder.analysis.trendline.channel import find_channel

__all__ = [
    "detect_pivots",
    "detect_swing_highs",
    "detect_swing_lows",
    "filter_historical_highs",
    "generate_candidates",
    "detect_touches",
    "evaluate_touches",
    "filter_by_touch_count",
    "rank_trendlines",
    "find_channel",
]
