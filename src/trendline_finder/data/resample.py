"""Interval resampling for daily bars."""

import pandas as pd

from trendline_finder.errors import ConfigurationError

# pandas offset aliases per interval
RESAMPLE_RULES = {
    "1wk": "W",
    "1mo": "MS",
}


def resample_bars(df: pd.DataFrame, interval: str = "1d") -> pd.DataFrame:
    """
    Resample daily OHLCV data to a coarser interval.

    Args:
        df: Daily OHLCV DataFrame with DatetimeIndex
        interval: "1d" (unchanged), "1wk" or "1mo"

    Returns:
        Resampled DataFrame; periods without bars are dropped
    """
    if interval == "1d":
        return df
    if interval not in RESAMPLE_RULES:
        raise ConfigurationError(f"Unknown interval: {interval}")

    agg = {
        "Open": "first",
        "High": "max",
        "Low": "min",
        "Close": "last",
    }
    if "Volume" in df.columns:
        agg["Volume"] = "sum"

    return df.resample(RESAMPLE_RULES[interval]).agg(agg).dropna(subset=["Open", "High", "Low", "Close"])
