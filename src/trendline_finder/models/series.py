"""Data models for input price series."""

from dataclasses import dataclass
from datetime import date

import pandas as pd


@dataclass(frozen=True)
class Bar:
    """One OHLC record for one trading period."""

    time: date
    open: float
    high: float
    low: float
    close: float
    volume: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "time": self.time.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Bar":
        """Create from dictionary (``time`` or ``date`` key, ISO string or date)."""
        time_value = data.get("time", data.get("date"))
        if isinstance(time_value, str):
            time_value = date.fromisoformat(time_value[:10])
        return cls(
            time=time_value,
            open=float(data["open"]),
            high=float(data["high"]),
            low=float(data["low"]),
            close=float(data["close"]),
            volume=int(data.get("volume") or 0),
        )


@dataclass
class PriceSeries:
    """Historical price data for one symbol."""

    symbol: str
    data: pd.DataFrame  # OHLCV data with DatetimeIndex

    @property
    def start_date(self) -> date:
        """First date in the data."""
        return self.data.index.min().date()

    @property
    def end_date(self) -> date:
        """Last date in the data."""
        return self.data.index.max().date()

    @property
    def bar_count(self) -> int:
        """Number of bars in the data."""
        return len(self.data)
