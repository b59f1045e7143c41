"""TrendlineEngine - Runs the trendline detection pipeline for one series."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence, Union

import numpy as np
import pandas as pd
import structlog

from trendline_finder.analysis.models import TrendlineData, TrendlineResult
from trendline_finder.analysis.trendline.candidates import generate_candidates
from trendline_finder.analysis.trendline.channel import find_channel
from trendline_finder.analysis.trendline.ranking import rank_trendlines
from trendline_finder.analysis.trendline.swing_detection import detect_pivots
from trendline_finder.analysis.trendline.touch_detection import (
    evaluate_touches,
    filter_by_touch_count,
)
from trendline_finder.config import TrendlineConfig
from trendline_finder.data.loader import bars_to_frame
from trendline_finder.data.resample import resample_bars
from trendline_finder.errors import InvalidInputError
from trendline_finder.models.series import Bar, PriceSeries

logger = structlog.get_logger()

PRICE_COLUMNS = ["Open", "High", "Low", "Close"]

BarsInput = Union[pd.DataFrame, Sequence[Bar], PriceSeries]


def to_frame(bars: BarsInput) -> pd.DataFrame:
    """Accept a DataFrame, a PriceSeries or a sequence of Bar records."""
    if isinstance(bars, PriceSeries):
        return bars.data
    if isinstance(bars, pd.DataFrame):
        return bars
    return bars_to_frame(list(bars))


def validate_bars(df: pd.DataFrame) -> None:
    """
    Check that a series can be analysed as given.

    Raises:
        InvalidInputError: If columns are missing, dates are not unique and
            ascending, prices are missing or non-positive, volume is negative,
            or any bar has Low above High
    """
    missing = [c for c in PRICE_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidInputError(f"Missing columns: {', '.join(missing)}")

    if not isinstance(df.index, pd.DatetimeIndex):
        raise InvalidInputError("Series must be indexed by date")

    if len(df) == 0:
        return

    if df.index.has_duplicates:
        dupes = df.index[df.index.duplicated()]
        raise InvalidInputError(f"Duplicate dates: {dupes[0].date().isoformat()}")

    if not df.index.is_monotonic_increasing:
        diffs = np.diff(df.index.to_numpy())
        position = int(np.argmax(diffs < np.timedelta64(0))) + 1
        raise InvalidInputError(
            f"Series not sorted ascending by time at {df.index[position].date().isoformat()}"
        )

    prices = df[PRICE_COLUMNS]
    if prices.isna().to_numpy().any():
        raise InvalidInputError("Series contains missing prices")
    if (prices <= 0).to_numpy().any():
        raise InvalidInputError("Series contains non-positive prices")

    if "Volume" in df.columns and (df["Volume"] < 0).any():
        raise InvalidInputError("Series contains negative volume")

    inverted = df["Low"] > df["High"]
    if inverted.any():
        first_bad = df.index[inverted.to_numpy()][0]
        raise InvalidInputError(f"Low above High on {first_bad.date().isoformat()}")


class TrendlineEngine:
    """
    Detects support, resistance and crossing trendlines in a price series.

    The pipeline:
    1. Validates the series (fails fast, never repairs)
    2. Detects swing highs and lows (pivots)
    3. Fits a line through every pair of pivots
    4. Counts the bars that touch each line and drops weak lines
    5. Deduplicates, orders by significance and caps per direction
    6. Optionally adds a parallel channel line to each result

    The engine keeps no state between calls; one instance can serve any
    number of series, from any number of threads.
    """

    def __init__(self, config: TrendlineConfig | None = None):
        """
        Initialize the engine.

        Args:
            config: Configuration options (uses defaults if not provided)
        """
        self.config = config or TrendlineConfig()

    def run(self, bars: BarsInput, symbol: str = "") -> TrendlineResult:
        """
        Find trendlines in one series.

        Args:
            bars: Price series, ascending by date, one row per period
            symbol: Symbol echoed back in the result

        Returns:
            TrendlineResult; its trendline list is empty when the series is
            too short or too flat to produce significant lines

        Raises:
            InvalidInputError: If the series fails validation
        """
        if isinstance(bars, PriceSeries) and not symbol:
            symbol = bars.symbol

        config = self.config
        df = to_frame(bars)
        validate_bars(df)
        df = resample_bars(df, config.interval)

        result = TrendlineResult(symbol=symbol, interval=config.interval, bar_count=len(df))

        if len(df) < 2 * config.pivot_window + 1:
            logger.debug(
                "Series too short for pivots",
                symbol=symbol,
                bars=len(df),
                window=config.pivot_window,
            )
            return result

        pivots = detect_pivots(df, config.pivot_window, config.drop_threshold)
        result.pivot_count = len(pivots)
        if len(pivots) < 2:
            logger.debug("Not enough pivots", symbol=symbol, pivots=len(pivots))
            return result

        candidates = generate_candidates(pivots, df, min_span=config.min_span)
        evaluated = [evaluate_touches(c, df, config.touch_tolerance_pct) for c in candidates]
        significant = filter_by_touch_count(evaluated, config.min_touch_count)

        trendlines = rank_trendlines(
            significant,
            df,
            tolerance_pct=config.touch_tolerance_pct,
            slope_tolerance=config.dedup_slope_tolerance,
            max_per_direction=config.max_lines_per_direction,
        )

        if config.detect_channels:
            trendlines = [self._with_channel(t, df) for t in trendlines]

        result.trendlines = trendlines

        logger.debug(
            "Trendline detection complete",
            symbol=symbol,
            bars=len(df),
            pivots=len(pivots),
            candidates=len(candidates),
            significant=len(significant),
            emitted=len(trendlines),
        )

        return result

    def _with_channel(self, trendline: TrendlineData, df: pd.DataFrame) -> TrendlineData:
        channel = find_channel(trendline, df, self.config.channel_tolerance_pct)
        return replace(trendline, channel=channel)


def find_trendlines(
    bars: BarsInput,
    config: TrendlineConfig | None = None,
    symbol: str = "",
) -> TrendlineResult:
    """Convenience wrapper: run a default or given engine over one series."""
    return TrendlineEngine(config).run(bars, symbol=symbol)
