from dataclasses import dataclass, field, asdict
from typing import Any, Literal
from collections.abc import Callable


# Claim index in [1, N]
WorkUnit = int

# Fixed quantile queries issued for every report
QUANTILES: tuple[float, ...] = (0.0, 0.01, 0.25, 0.50, 0.75, 0.99, 1.0)


@dataclass(frozen=True)
class FailureReason:
    kind: Literal["status", "transport"]
    detail: str
    status: int | None = None

    def __str__(self) -> str:
        return self.detail


@dataclass(frozen=True)
class Success:
    unit: WorkUnit
    status: int
    elapsed_ms: float
    body: str = ""

    ok = True


@dataclass(frozen=True)
class Failure:
    unit: WorkUnit
    elapsed_ms: float
    reason: FailureReason

    ok = False


ExchangeResult = Success | Failure


@dataclass(frozen=True)
class ErrorRecord:
    unit: WorkUnit
    reason: FailureReason

    def __str__(self) -> str:
        return f"[{self.unit}] {self.reason}"


@dataclass(frozen=True)
class RunReport:
    count: int
    elapsed_s: float
    mean_ms: float
    quantiles: dict[float, float]
    successes: int
    errors: tuple[ErrorRecord, ...] = field(default_factory=tuple)

    @property
    def throughput(self) -> float:
        if self.elapsed_s <= 0:
            return float("nan")
        return self.count / self.elapsed_s

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["throughput"] = self.throughput
        data["errors"] = [str(e) for e in self.errors]
        return data


# Metrics callback: callable accepting the report as a dict
MetricsCallback = Callable[[dict[str, Any]], None]
