import logging
import queue
import threading

from .models import ErrorRecord, ExchangeResult, Failure
from .quantiles import QuantileSketch

logger = logging.getLogger(__name__)


class RunningMean:
    """Running mean over a known number of samples.

    Each ``add`` contributes ``latency / total``, so the value equals the
    arithmetic mean once ``total`` samples have been added.
    """

    def __init__(self, total: int) -> None:
        if total < 1:
            raise ValueError(f"total must be >= 1, got {total}")
        self.total = total
        self._value = 0.0
        self._lock = threading.Lock()

    def add(self, latency: float) -> None:
        contribution = latency / self.total
        with self._lock:
            self._value += contribution

    @property
    def value(self) -> float:
        return self._value


class ErrorAggregator:
    def __init__(self) -> None:
        self._q: queue.SimpleQueue[ErrorRecord] = queue.SimpleQueue()

    def push(self, record: ErrorRecord) -> None:
        self._q.put(record)

    def __len__(self) -> int:
        return self._q.qsize()

    def drain(self) -> list[ErrorRecord]:
        records = []
        while True:
            try:
                records.append(self._q.get_nowait())
            except queue.Empty:
                break
        logger.debug(f"Drained {len(records)} error records")
        return records


class Aggregates:
    """Shared sinks every worker folds its results into."""

    def __init__(self, total: int, error: float = 0.001) -> None:
        self.total = total
        self.sketch = QuantileSketch(error)
        self.mean = RunningMean(total)
        self.errors = ErrorAggregator()
        self.successes = 0
        self._lock = threading.Lock()

    def record(self, result: ExchangeResult) -> None:
        if isinstance(result, Failure):
            self.errors.push(ErrorRecord(result.unit, result.reason))
            return

        with self._lock:
            self.sketch.insert(result.elapsed_ms)
            self.successes += 1
        self.mean.add(result.elapsed_ms)
