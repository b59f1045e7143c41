"""Conversion between bar records, DataFrames and local OHLC files."""

import json
from pathlib import Path
from typing import Sequence

import pandas as pd
import structlog

from trendline_finder.errors import InvalidInputError
from trendline_finder.models.series import Bar, PriceSeries

logger = structlog.get_logger()

OHLCV_COLUMNS = ["Open", "High", "Low", "Close", "Volume"]
DATE_COLUMNS = ("date", "time", "datetime", "timestamp")


def bars_to_frame(bars: Sequence[Bar]) -> pd.DataFrame:
    """
    Convert bar records to an OHLCV DataFrame.

    Rows keep the order they were given in; nothing is sorted or dropped.

    Args:
        bars: Sequence of Bar records

    Returns:
        DataFrame with Open/High/Low/Close/Volume columns and DatetimeIndex
    """
    index = pd.DatetimeIndex([pd.Timestamp(b.time) for b in bars], name="Date")
    return pd.DataFrame(
        {
            "Open": [float(b.open) for b in bars],
            "High": [float(b.high) for b in bars],
            "Low": [float(b.low) for b in bars],
            "Close": [float(b.close) for b in bars],
            "Volume": [int(b.volume) for b in bars],
        },
        index=index,
    )


def frame_to_bars(df: pd.DataFrame) -> list[Bar]:
    """Convert an OHLCV DataFrame back to Bar records."""
    volumes = df["Volume"] if "Volume" in df.columns else pd.Series(0, index=df.index)
    return [
        Bar(
            time=ts.date(),
            open=float(row["Open"]),
            high=float(row["High"]),
            low=float(row["Low"]),
            close=float(row["Close"]),
            volume=int(volume),
        )
        for (ts, row), volume in zip(df.iterrows(), volumes)
    ]


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize a raw table to the OHLCV layout.

    Column names are matched case-insensitively and the date column becomes
    a DatetimeIndex. A missing Volume column is filled with zeros.

    Raises:
        InvalidInputError: If the date column or a price column is missing,
            or a date cannot be parsed
    """
    lookup = {str(c).strip().lower(): c for c in df.columns}

    date_column = next((lookup[name] for name in DATE_COLUMNS if name in lookup), None)
    if date_column is None:
        raise InvalidInputError(f"No date column found (expected one of {', '.join(DATE_COLUMNS)})")

    missing = [c for c in OHLCV_COLUMNS[:4] if c.lower() not in lookup]
    if missing:
        raise InvalidInputError(f"Missing price columns: {', '.join(missing)}")

    out = pd.DataFrame(
        {c: pd.to_numeric(df[lookup[c.lower()]], errors="coerce") for c in OHLCV_COLUMNS[:4]}
    )
    if "volume" in lookup:
        out["Volume"] = pd.to_numeric(df[lookup["volume"]], errors="coerce").fillna(0).astype(int)
    else:
        out["Volume"] = 0

    try:
        dates = pd.to_datetime(df[date_column])
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"Unparseable date in column '{date_column}': {e}") from e

    out.index = pd.DatetimeIndex(dates, name="Date")
    return out


def load_csv(path: Path | str) -> pd.DataFrame:
    """Load an OHLCV CSV file."""
    try:
        raw = pd.read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise InvalidInputError(f"{path}: {e}") from e
    return normalize_columns(raw)


def load_json(path: Path | str) -> pd.DataFrame:
    """
    Load bars from a JSON file.

    Accepts either a list of bar objects or an object with a ``data`` list,
    which is the shape the chart endpoint returns.
    """
    with open(path) as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"{path}: invalid JSON ({e})") from e

    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        raise InvalidInputError(f"{path}: expected a list of bars")

    return normalize_columns(pd.DataFrame(payload))


def load_series(path: Path | str, symbol: str | None = None) -> PriceSeries:
    """
    Load a local OHLC file as a PriceSeries.

    Args:
        path: CSV or JSON file
        symbol: Symbol name, defaults to the upper-cased file stem

    Returns:
        PriceSeries with unvalidated data
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        df = load_json(path)
    elif suffix in (".csv", ".txt"):
        df = load_csv(path)
    else:
        raise InvalidInputError(f"Unsupported file type: {path.suffix}")

    symbol = symbol or path.stem.upper()
    logger.debug("Loaded price series", symbol=symbol, bars=len(df), path=str(path))
    return PriceSeries(symbol=symbol, data=df)
