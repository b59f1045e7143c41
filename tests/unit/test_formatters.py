"""Unit tests for output formatters."""

import json
from datetime import date

import pytest
from rich.table import Table

from trendline_finder.analysis.models import TrendlineData, TrendlineResult, TrendPoint
from trendline_finder.output.formatters import (
    format_as_csv,
    format_as_json,
    format_as_table,
    save_results,
)


def make_line(direction: str, touches: int, start: float, end: float) -> TrendlineData:
    return TrendlineData(
        direction=direction,
        touch_count=touches,
        points=[
            TrendPoint(time=date(2024, 1, 5), value=start),
            TrendPoint(time=date(2024, 3, 1), value=end),
        ],
        slope=(end - start) / 40,
        intercept=start,
        anchor_indices=(0, 40),
    )


@pytest.fixture
def sample_results() -> list[TrendlineResult]:
    return [
        TrendlineResult(
            symbol="AAAA",
            trendlines=[
                make_line("support", 5, 90.0, 98.123),
                make_line("resistance", 4, 120.0, 110.0),
            ],
        ),
        TrendlineResult(symbol="BBBB", trendlines=[make_line("cross", 3, 50.0, 55.0)]),
    ]


class TestFormatAsCsv:
    """Tests for CSV formatting."""

    def test_includes_header(self, sample_results):
        header = format_as_csv(sample_results).splitlines()[0]

        assert "symbol" in header
        assert "direction" in header
        assert "touch_count" in header

    def test_one_row_per_trendline(self, sample_results):
        lines = format_as_csv(sample_results).strip().split("\n")
        assert len(lines) == 4

    def test_values_are_rounded(self, sample_results):
        row = format_as_csv(sample_results).splitlines()[1].split(",")

        assert row[:4] == ["AAAA", "1", "support", "5"]
        assert "98.12" in row

    def test_empty_results_header_only(self):
        assert len(format_as_csv([]).strip().split("\n")) == 1


class TestFormatAsJson:
    """Tests for JSON formatting."""

    def test_single_result_is_object(self, sample_results):
        data = json.loads(format_as_json(sample_results[:1]))

        assert data["symbol"] == "AAAA"
        assert data["trendlines"][0] == {
            "direction": "support",
            "touchCount": 5,
            "points": [
                {"time": "2024-01-05", "value": 90.0},
                {"time": "2024-03-01", "value": 98.123},
            ],
        }

    def test_multiple_results_are_list(self, sample_results):
        data = json.loads(format_as_json(sample_results))

        assert [d["symbol"] for d in data] == ["AAAA", "BBBB"]


class TestFormatAsTable:
    """Tests for rich table formatting."""

    def test_returns_table_with_all_rows(self, sample_results):
        table = format_as_table(sample_results)

        assert isinstance(table, Table)
        assert table.row_count == 3


class TestSaveResults:
    """Tests for save_results function."""

    def test_saves_csv(self, tmp_path, sample_results):
        path = save_results(sample_results, tmp_path / "out", "csv")

        assert path.exists()
        assert path.suffix == ".csv"
        assert path.read_text() == format_as_csv(sample_results)

    def test_saves_json(self, tmp_path, sample_results):
        path = save_results(sample_results, tmp_path, "json")

        assert json.loads(path.read_text())[1]["symbol"] == "BBBB"
