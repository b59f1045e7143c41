"""Tests for the command-line interface."""

import json
import logging
import sys

import pytest
import structlog
from click.testing import CliRunner

from conftest import make_bars_df, make_noisy_df
from trendline_finder.cli import cli


def write_csv(path, df) -> None:
    out = df.copy()
    out.index.name = "date"
    out.to_csv(path)


def quiet_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Warnings only, and no loggers cached against a runner's streams."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr("trendline_finder.cli.setup_logging", quiet_logging)
    yield
    structlog.reset_defaults()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def flat_csv(tmp_path):
    path = tmp_path / "flat.csv"
    write_csv(path, make_bars_df([100.0] * 50, [100.0] * 50))
    return path


class TestDetectCommand:
    """Tests for the detect command."""

    def test_json_output(self, runner, flat_csv):
        result = runner.invoke(cli, ["detect", str(flat_csv), "--output", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["symbol"] == "FLAT"
        assert sorted(t["direction"] for t in data["trendlines"]) == ["resistance", "support"]

    def test_symbol_override(self, runner, flat_csv):
        result = runner.invoke(cli, ["detect", str(flat_csv), "--symbol", "ZZZ", "--output", "json"])

        assert json.loads(result.output)["symbol"] == "ZZZ"

    def test_csv_output(self, runner, flat_csv):
        result = runner.invoke(cli, ["detect", str(flat_csv), "--output", "csv"])

        assert result.exit_code == 0
        assert result.output.splitlines()[0].startswith("symbol,rank,direction")

    def test_table_output(self, runner, flat_csv):
        result = runner.invoke(cli, ["detect", str(flat_csv)])

        assert result.exit_code == 0
        assert "FLAT" in result.output

    def test_invalid_series(self, runner, tmp_path):
        path = tmp_path / "bad.csv"
        write_csv(path, make_noisy_df(bars=30).iloc[::-1])

        result = runner.invoke(cli, ["detect", str(path)])

        assert result.exit_code == 1
        assert "InvalidInputError" in result.output

    def test_invalid_option(self, runner, flat_csv):
        result = runner.invoke(cli, ["detect", str(flat_csv), "--window", "0"])

        assert result.exit_code == 1
        assert "ConfigurationError" in result.output

    def test_unparseable_date(self, runner, tmp_path):
        path = tmp_path / "baddate.csv"
        path.write_text("date,open,high,low,close\nnot-a-date,1,2,0.5,1.5\n")

        result = runner.invoke(cli, ["detect", str(path)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "InvalidInputError" in result.output

    def test_save(self, runner, flat_csv, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["detect", str(flat_csv), "--output", "json", "--save"])

        assert result.exit_code == 0
        assert list((tmp_path / "output").glob("trendlines_*.json"))


class TestBatchCommand:
    """Tests for the batch command."""

    def test_batch_csv(self, runner, tmp_path):
        paths = []
        for seed in (1, 2):
            path = tmp_path / f"sym{seed}.csv"
            write_csv(path, make_noisy_df(bars=150, seed=seed))
            paths.append(str(path))

        result = runner.invoke(
            cli, ["batch", *paths, "--output", "csv", "--workers", "2", "--min-touches", "2"]
        )

        assert result.exit_code == 0, result.output
        assert "SYM1" in result.output
        assert "SYM2" in result.output

    def test_batch_reports_failures(self, runner, tmp_path, flat_csv):
        bad = tmp_path / "bad.csv"
        write_csv(bad, make_noisy_df(bars=30).iloc[::-1])

        result = runner.invoke(cli, ["batch", str(flat_csv), str(bad), "--output", "csv"])

        assert result.exit_code == 1
        assert "BAD" in result.output
        assert "FLAT" in result.output

    def test_batch_skips_unparseable_file(self, runner, tmp_path, flat_csv):
        bad = tmp_path / "baddate.csv"
        bad.write_text("date,open,high,low,close\nnot-a-date,1,2,0.5,1.5\n")

        result = runner.invoke(cli, ["batch", str(bad), str(flat_csv), "--output", "csv"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Skipping" in result.output
        assert "FLAT" in result.output

    def test_batch_reports_duplicate_symbols(self, runner, tmp_path):
        paths = []
        for folder in ("a", "b"):
            (tmp_path / folder).mkdir()
            path = tmp_path / folder / "flat.csv"
            write_csv(path, make_bars_df([100.0] * 50, [100.0] * 50))
            paths.append(str(path))

        result = runner.invoke(cli, ["batch", *paths, "--output", "csv"])

        assert result.exit_code == 1
        assert "already" in result.output
        assert "Analyzed 1 of 2" in result.output
