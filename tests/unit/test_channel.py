"""Tests for parallel channel detection."""

from datetime import date

import pytest

from conftest import make_bars_df
from trendline_finder.analysis.models import TrendlineData, TrendPoint
from trendline_finder.analysis.trendline.channel import find_channel


def make_trendline(direction: str, value: float, slope: float = 0.0) -> TrendlineData:
    return TrendlineData(
        direction=direction,
        touch_count=3,
        points=[
            TrendPoint(time=date(2024, 1, 3), value=value + slope * 2),
            TrendPoint(time=date(2024, 1, 9), value=value + slope * 8),
        ],
        slope=slope,
        intercept=value,
        anchor_indices=(2, 8),
    )


class TestFindChannel:
    """Tests for find_channel function."""

    def test_support_channel_runs_through_highs(self):
        df = make_bars_df([105.0] * 10, [95.0] * 10)

        channel = find_channel(make_trendline("support", 95.0), df, tolerance_pct=0.02)

        assert channel is not None
        assert channel.offset == pytest.approx(10.0)
        assert channel.touch_count == 10
        assert [p.value for p in channel.points] == [pytest.approx(105.0), pytest.approx(105.0)]

    def test_resistance_channel_runs_through_lows(self):
        df = make_bars_df([105.0] * 10, [95.0] * 10)

        channel = find_channel(make_trendline("resistance", 105.0), df, tolerance_pct=0.02)

        assert channel is not None
        assert channel.offset == pytest.approx(-10.0)

    def test_picks_offset_with_most_touches(self):
        highs = [110.0, 104.0, 104.0, 104.0, 108.0, 104.0, 104.0, 110.0]
        df = make_bars_df(highs, [95.0] * 8)

        channel = find_channel(make_trendline("support", 95.0), df, tolerance_pct=0.005)

        assert channel.offset == pytest.approx(9.0)
        assert channel.touch_count == 5

    def test_sloped_channel_follows_the_line(self):
        lows = [95.0 + i for i in range(10)]
        df = make_bars_df([l + 8 for l in lows], lows)

        channel = find_channel(make_trendline("support", 95.0, slope=1.0), df, tolerance_pct=0.01)

        assert channel.offset == pytest.approx(8.0)
        assert channel.touch_count == 10

    def test_cross_has_no_channel(self):
        df = make_bars_df([105.0] * 10, [95.0] * 10)
        assert find_channel(make_trendline("cross", 100.0), df) is None

    def test_no_bars_on_far_side(self):
        df = make_bars_df([105.0] * 10, [95.0] * 10)
        assert find_channel(make_trendline("support", 200.0), df) is None

    def test_to_dict(self):
        df = make_bars_df([105.0] * 10, [95.0] * 10)
        channel = find_channel(make_trendline("support", 95.0), df)

        data = channel.to_dict()

        assert data["touchCount"] == 10
        assert data["points"][0] == {"time": "2024-01-03", "value": pytest.approx(105.0)}
