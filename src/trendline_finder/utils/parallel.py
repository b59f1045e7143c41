"""Run trendline detection for many symbols on a thread pool."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Mapping

import structlog

from trendline_finder.analysis.engine import BarsInput, TrendlineEngine
from trendline_finder.analysis.models import TrendlineResult
from trendline_finder.config import ParallelConfig, TrendlineConfig

logger = structlog.get_logger()


@dataclass
class TaskResult:
    """Outcome of detecting trendlines for one symbol."""

    symbol: str
    success: bool
    result: TrendlineResult | None
    error: str | None


ProgressCallback = Callable[[int, int, TaskResult], None]


class BatchTrendlineRunner:
    """
    Detect trendlines for many series, one independent engine call each.

    Engine calls share no state, so symbols run concurrently on a thread
    pool. A failing symbol is reported in its TaskResult and never stops
    the batch.
    """

    def __init__(
        self,
        config: TrendlineConfig | None = None,
        parallel_config: ParallelConfig | None = None,
    ):
        """
        Initialize the runner.

        Args:
            config: Trendline configuration shared by every symbol
            parallel_config: Worker settings. If None, uses defaults.
        """
        self.engine = TrendlineEngine(config)
        self.parallel_config = parallel_config or ParallelConfig()

    @property
    def max_workers(self) -> int:
        if not self.parallel_config.enabled:
            return 1
        return max(1, self.parallel_config.max_workers)

    def run(
        self,
        series: Mapping[str, BarsInput],
        on_progress: ProgressCallback | None = None,
    ) -> list[TaskResult]:
        """
        Run the engine for every symbol.

        Args:
            series: Mapping of symbol -> price series
            on_progress: Optional callback(completed, total, task_result)

        Returns:
            TaskResults in the same order as the input mapping
        """
        if not series:
            return []

        symbols = list(series)
        total = len(symbols)
        results: dict[str, TaskResult] = {}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_symbol = {
                executor.submit(self._run_single, symbol, series[symbol]): symbol
                for symbol in symbols
            }

            for future in as_completed(future_to_symbol):
                symbol = future_to_symbol[future]
                task_result = future.result()
                results[symbol] = task_result

                if on_progress:
                    on_progress(len(results), total, task_result)

        return [results[s] for s in symbols]

    def _run_single(self, symbol: str, bars: BarsInput) -> TaskResult:
        try:
            result = self.engine.run(bars, symbol=symbol)
            return TaskResult(symbol=symbol, success=True, result=result, error=None)
        except Exception as e:
            logger.warning("Trendline detection failed", symbol=symbol, error=str(e))
            return TaskResult(symbol=symbol, success=False, result=None, error=str(e))
