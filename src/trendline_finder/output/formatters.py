"""Formatters for trendline results: rich table, JSON and CSV."""

import csv
import io
import json
from datetime import datetime
from pathlib import Path

from rich.table import Table

from trendline_finder.analysis.models import TrendlineResult

CSV_FIELDS = [
    "symbol",
    "rank",
    "direction",
    "touch_count",
    "start_time",
    "start_value",
    "end_time",
    "end_value",
    "slope",
]

DIRECTION_STYLES = {
    "support": "green",
    "resistance": "red",
    "cross": "yellow",
}


def _rows(results: list[TrendlineResult]) -> list[dict]:
    rows = []
    for result in results:
        for rank, line in enumerate(result.trendlines, 1):
            start, end = line.points[0], line.points[-1]
            rows.append(
                {
                    "symbol": result.symbol,
                    "rank": rank,
                    "direction": line.direction,
                    "touch_count": line.touch_count,
                    "start_time": start.time.isoformat(),
                    "start_value": round(start.value, 2),
                    "end_time": end.time.isoformat(),
                    "end_value": round(end.value, 2),
                    "slope": round(line.slope, 4),
                }
            )
    return rows


def format_as_table(results: list[TrendlineResult]) -> Table:
    """Format results as a rich table, one row per trendline."""
    table = Table(title="Trendlines")
    table.add_column("Symbol", style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Direction")
    table.add_column("Touches", justify="right")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Slope/bar", justify="right")

    for row in _rows(results):
        style = DIRECTION_STYLES.get(row["direction"], "white")
        table.add_row(
            row["symbol"],
            str(row["rank"]),
            f"[{style}]{row['direction']}[/{style}]",
            str(row["touch_count"]),
            f"{row['start_time']} @ {row['start_value']:.2f}",
            f"{row['end_time']} @ {row['end_value']:.2f}",
            f"{row['slope']:+.4f}",
        )

    return table


def format_as_json(results: list[TrendlineResult]) -> str:
    """Format results as JSON in the chart endpoint shape."""
    if len(results) == 1:
        return json.dumps(results[0].to_dict(), indent=2)
    return json.dumps([r.to_dict() for r in results], indent=2)


def format_as_csv(results: list[TrendlineResult]) -> str:
    """Format results as CSV, one row per trendline."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(_rows(results))
    return buffer.getvalue()


def save_results(
    results: list[TrendlineResult],
    directory: Path,
    file_format: str = "csv",
) -> Path:
    """
    Save results to a timestamped file.

    Args:
        results: Results to save
        directory: Output directory (created if missing)
        file_format: "csv" or "json"

    Returns:
        Path of the written file
    """
    directory.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = directory / f"trendlines_{timestamp}.{file_format}"

    content = format_as_json(results) if file_format == "json" else format_as_csv(results)
    path.write_text(content)
    return path
