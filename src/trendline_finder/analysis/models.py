"""Data models for trendline detection."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

PivotKind = Literal["high", "low"]
Direction = Literal["support", "resistance", "cross"]


@dataclass(frozen=True)
class Pivot:
    """A swing high or swing low in price data."""

    index: int  # Position in the input series
    kind: PivotKind
    price: float  # The bar's High for swing highs, Low for swing lows
    date: date


@dataclass(frozen=True)
class LineCandidate:
    """A line fitted exactly through two anchor pivots."""

    first: Pivot
    second: Pivot
    slope: float  # Price change per bar
    intercept: float  # Price at bar 0
    kind: Direction

    @classmethod
    def through(cls, first: Pivot, second: Pivot, kind: Direction) -> "LineCandidate":
        """Fit the unique line through two pivots (first.index < second.index)."""
        slope = (second.price - first.price) / (second.index - first.index)
        intercept = first.price - slope * first.index
        return cls(first=first, second=second, slope=slope, intercept=intercept, kind=kind)

    def price_at(self, index: float) -> float:
        """Calculate line price at a given bar index."""
        return self.slope * index + self.intercept

    @property
    def anchor_span(self) -> int:
        """Bars between the two anchors."""
        return self.second.index - self.first.index

    @property
    def recency(self) -> int:
        """Index of the most recent anchor."""
        return max(self.first.index, self.second.index)


@dataclass
class TouchPoint:
    """A bar whose extreme price came within tolerance of a line."""

    date: date
    price: float
    line_price: float
    deviation_pct: float  # How far from the line (negative = below)
    bar_index: int


@dataclass
class TouchResult:
    """A candidate together with the bars that touch it."""

    candidate: LineCandidate
    touch_indices: list[int] = field(default_factory=list)

    @property
    def touch_count(self) -> int:
        return len(self.touch_indices)


@dataclass(frozen=True)
class TrendPoint:
    """One renderable point of a line."""

    time: date
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"time": self.time.isoformat(), "value": self.value}


@dataclass
class ChannelData:
    """A line parallel to a trendline on the other side of price."""

    offset: float  # Price distance from the main line
    touch_count: int
    points: list[TrendPoint] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "touchCount": self.touch_count,
            "points": [p.to_dict() for p in self.points],
        }


@dataclass
class TrendlineData:
    """A ranked trendline, shaped for the charting front end."""

    direction: Direction
    touch_count: int
    points: list[TrendPoint]

    # Geometry for callers that want to re-project the line
    slope: float = 0.0
    intercept: float = 0.0
    anchor_indices: tuple[int, int] = (0, 0)
    channel: ChannelData | None = None

    @property
    def anchor_span(self) -> int:
        return self.anchor_indices[1] - self.anchor_indices[0]

    @property
    def recency(self) -> int:
        return max(self.anchor_indices)

    def price_at(self, index: float) -> float:
        """Calculate line price at a given bar index."""
        return self.slope * index + self.intercept

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape consumed by the chart."""
        data: dict[str, Any] = {
            "direction": self.direction,
            "touchCount": self.touch_count,
            "points": [p.to_dict() for p in self.points],
        }
        if self.channel is not None:
            data["channel"] = self.channel.to_dict()
        return data


@dataclass
class TrendlineResult:
    """All trendlines found for one symbol."""

    symbol: str
    trendlines: list[TrendlineData] = field(default_factory=list)
    interval: str = "1d"
    bar_count: int = 0
    pivot_count: int = 0

    def by_direction(self, direction: Direction) -> list[TrendlineData]:
        """Trendlines of one direction, in rank order."""
        return [t for t in self.trendlines if t.direction == direction]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "symbol": self.symbol,
            "trendlines": [t.to_dict() for t in self.trendlines],
        }
