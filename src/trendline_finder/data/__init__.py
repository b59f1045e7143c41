"""Input adapters for local OHLC data."""

from trendline_finder.data.loader import (
    bars_to_frame,
    frame_to_bars,
    load_csv,
    load_json,
    load_series,
)
from trendline_finder.data.resample import resample_bars

__all__ = [
    "bars_to_frame",
    "frame_to_bars",
    "load_csv",
    "load_json",
    "load_series",
    "resample_bars",
]
