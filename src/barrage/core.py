import asyncio
import logging
from collections.abc import Callable

import aiohttp
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .counter import WorkCounter
from .executor import RequestExecutor, log_result
from .metrics import Aggregates
from .models import MetricsCallback, RunReport
from .report import assemble_report
from .template import RequestTemplate
from .utils import default_tasks, now

logger = logging.getLogger(__name__)

ExecutorFactory = Callable[[aiohttp.ClientSession], RequestExecutor]


class LoadRunner:
    def __init__(
        self,
        template: RequestTemplate,
        count: int,
        tasks: int | None = None,
        timeout_s: float = 5.0,
        silent: bool = False,
        error: float = 0.001,
        executor_factory: ExecutorFactory | None = None,
        metrics_callback: MetricsCallback | None = None,
        use_progress_bar: bool = False,
        preview_limit: int = 200,
    ) -> None:
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        self.template = template
        self.count = count
        self.tasks = tasks if tasks is not None else default_tasks()
        if self.tasks < 1:
            raise ValueError(f"tasks must be >= 1, got {self.tasks}")
        self.timeout_s = timeout_s
        self.silent = silent
        self.executor_factory = executor_factory or (
            lambda session: RequestExecutor(session, template)
        )
        self.metrics_callback = metrics_callback
        self.use_progress_bar = use_progress_bar
        self.preview_limit = preview_limit

        # Runtime state
        self.counter = WorkCounter(count)
        self.aggregates = Aggregates(count, error)
        self._progress: Progress | None = None
        self._task_id = None

        logger.debug(
            f"Initialized runner: {template.method} {template.url}, "
            f"count={count}, tasks={self.tasks}, timeout={timeout_s}s"
        )

    # ────────────────────────────────
    # Worker Loop
    # ────────────────────────────────

    async def _worker(self, worker_id: int, executor) -> None:
        handled = 0
        while True:
            unit = self.counter.claim()
            if unit is None:
                break
            result = await executor.execute(unit)
            self.aggregates.record(result)
            handled += 1
            if not self.silent:
                log_result(result, self.count, self.preview_limit)
            if self._progress is not None:
                self._progress.advance(self._task_id)

        logger.debug(f"Worker {worker_id} stopped after {handled} units")

    # ────────────────────────────────
    # Main Runner
    # ────────────────────────────────

    def _start_progress(self) -> None:
        if not self.use_progress_bar:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
        )
        self._progress.start()
        self._task_id = self._progress.add_task("[cyan]Sending...", total=self.count)

    def _stop_progress(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None

    async def run(self) -> RunReport:
        connector = aiohttp.TCPConnector(limit=0)
        timeout = aiohttp.ClientTimeout(total=self.timeout_s)
        async with aiohttp.ClientSession(
            connector=connector, timeout=timeout
        ) as session:
            executors = [self.executor_factory(session) for _ in range(self.tasks)]

            logger.debug(f"Starting {self.count} requests with {self.tasks} workers")
            self._start_progress()
            t0 = now()
            try:
                await asyncio.gather(
                    *(self._worker(i, ex) for i, ex in enumerate(executors))
                )
            finally:
                self._stop_progress()
            elapsed_s = now() - t0

        agg = self.aggregates
        return assemble_report(
            self.count,
            elapsed_s,
            agg.mean,
            agg.sketch,
            agg.errors,
            agg.successes,
            self.metrics_callback,
        )
