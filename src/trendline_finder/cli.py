"""Command-line interface for trendline finder."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from trendline_finder import __version__
from trendline_finder.analysis.engine import TrendlineEngine
from trendline_finder.config import get_settings, load_settings
from trendline_finder.data.loader import load_series
from trendline_finder.errors import TrendlineError
from trendline_finder.output.formatters import (
    format_as_csv,
    format_as_json,
    format_as_table,
    save_results,
)
from trendline_finder.utils.logging import setup_logging
from trendline_finder.utils.parallel import BatchTrendlineRunner

console = Console()
err_console = Console(stderr=True)


def tuning_options(func):
    """Shared engine tuning options."""
    options = [
        click.option("--window", type=int, default=None, help="Pivot window (bars on each side)"),
        click.option(
            "--tolerance",
            type=float,
            default=None,
            help="Touch tolerance as a fraction, e.g. 0.0075 for 0.75%",
        ),
        click.option("--min-touches", type=int, default=None, help="Minimum touch count"),
        click.option("--max-lines", type=int, default=None, help="Maximum lines per direction"),
        click.option(
            "--interval",
            type=click.Choice(["1d", "1wk", "1mo"]),
            default=None,
            help="Resample daily bars before detection",
        ),
        click.option("--channels", is_flag=True, default=None, help="Also find parallel channel lines"),
        click.option(
            "--output",
            "output_format",
            type=click.Choice(["table", "csv", "json"]),
            default=None,
            help="Output format (default: from config)",
        ),
        click.option("--save", is_flag=True, help="Save results to file"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_config(settings, window, tolerance, min_touches, max_lines, interval, channels):
    """Apply command-line overrides on top of the configured defaults."""
    return settings.trendline.with_overrides(
        pivot_window=window,
        touch_tolerance_pct=tolerance,
        min_touch_count=min_touches,
        max_lines_per_direction=max_lines,
        interval=interval,
        detect_channels=channels or None,
    )


def emit(results, output_format: str, save: bool, settings) -> None:
    """Print results and optionally save them."""
    if output_format == "table":
        console.print(format_as_table(results))
    elif output_format == "csv":
        click.echo(format_as_csv(results), nl=False)
    elif output_format == "json":
        click.echo(format_as_json(results))

    if save:
        file_format = "csv" if output_format == "table" else output_format
        saved_path = save_results(results, Path(settings.output.save_dir), file_format)
        err_console.print(f"[green]Results saved to: {saved_path}[/green]")


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.option("--config", type=click.Path(exists=True), help="Path to config file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """Trendline Finder - Detect support, resistance and crossing lines."""
    ctx.ensure_object(dict)

    try:
        settings = load_settings(config) if config else get_settings()
    except TrendlineError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(2)
    ctx.obj["settings"] = settings

    log_level = "DEBUG" if verbose else settings.logging.level
    setup_logging(log_level, json_logs=settings.logging.json_logs)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--symbol", type=str, default=None, help="Symbol name (default: file name)")
@tuning_options
@click.pass_context
def detect(
    ctx: click.Context,
    path: str,
    symbol: str | None,
    window: int | None,
    tolerance: float | None,
    min_touches: int | None,
    max_lines: int | None,
    interval: str | None,
    channels: bool | None,
    output_format: str | None,
    save: bool,
) -> None:
    """Detect trendlines in one OHLC file (CSV or JSON)."""
    settings = ctx.obj["settings"]

    try:
        config = build_config(settings, window, tolerance, min_touches, max_lines, interval, channels)
        series = load_series(path, symbol)
        result = TrendlineEngine(config).run(series)
    except TrendlineError as e:
        err_console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/red]")
        ctx.exit(1)

    if not result.trendlines:
        err_console.print(f"[yellow]No significant trendlines for {result.symbol}[/yellow]")

    emit([result], output_format or settings.output.default_format, save, settings)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of parallel workers (default: from config, use 1 for sequential)",
)
@tuning_options
@click.pass_context
def batch(
    ctx: click.Context,
    paths: tuple[str, ...],
    workers: int | None,
    window: int | None,
    tolerance: float | None,
    min_touches: int | None,
    max_lines: int | None,
    interval: str | None,
    channels: bool | None,
    output_format: str | None,
    save: bool,
) -> None:
    """Detect trendlines in several OHLC files, one symbol per file."""
    settings = ctx.obj["settings"]

    try:
        config = build_config(settings, window, tolerance, min_touches, max_lines, interval, channels)
    except TrendlineError as e:
        err_console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/red]")
        ctx.exit(1)

    parallel_config = settings.parallel.model_copy()
    if workers is not None:
        parallel_config.max_workers = workers
        parallel_config.enabled = workers > 1

    series = {}
    for path in paths:
        try:
            loaded = load_series(path)
        except TrendlineError as e:
            err_console.print(f"[red]Skipping {path}: {escape(str(e))}[/red]")
            continue
        if loaded.symbol in series:
            err_console.print(
                f"[red]Skipping {path}: symbol {loaded.symbol} "
                "already loaded from another file[/red]"
            )
            continue
        series[loaded.symbol] = loaded

    runner = BatchTrendlineRunner(config, parallel_config)
    task_results = runner.run(series)

    failed = [t for t in task_results if not t.success]
    for task in failed:
        err_console.print(f"[red]Error analyzing {task.symbol}: {escape(task.error or '')}[/red]")

    results = [t.result for t in task_results if t.success]
    if results:
        emit(results, output_format or settings.output.default_format, save, settings)

    err_console.print(
        f"[green]Analyzed {len(results)} of {len(paths)} files[/green]"
        + (f" [red]({len(failed)} failed)[/red]" if failed else "")
    )

    if failed or len(series) < len(paths):
        ctx.exit(1)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
