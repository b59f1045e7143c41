"""Trendline detection: pivots, candidate lines, touches and ranking."""

from trendline_finder.analysis.models import (
    ChannelData,
    LineCandidate,
    Pivot,
    TouchPoint,
    TouchResult,
    TrendlineData,
    TrendlineResult,
    TrendPoint,
)
from trendline_finder.analysis.engine import TrendlineEngine, find_trendlines

__all__ = [
    "ChannelData",
    "LineCandidate",
    "Pivot",
    "TouchPoint",
    "TouchResult",
    "TrendlineData",
    "TrendlineResult",
    "TrendPoint",
    "TrendlineEngine",
    "find_trendlines",
]
