import logging
import math

from .metrics import ErrorAggregator, RunningMean
from .models import QUANTILES, MetricsCallback, RunReport
from .quantiles import QuantileSketch

logger = logging.getLogger(__name__)

_LABELS = {0.0: "p0 (min)", 0.5: "p50 (median)", 1.0: "p100 (max)"}


def _label(phi: float) -> str:
    return _LABELS.get(phi, f"p{round(phi * 100)}")


def assemble_report(
    count: int,
    elapsed_s: float,
    mean: RunningMean,
    sketch: QuantileSketch,
    errors: ErrorAggregator,
    successes: int,
    metrics_callback: MetricsCallback | None = None,
) -> RunReport:
    records = errors.drain()
    quantiles = {}
    for phi in QUANTILES:
        value = sketch.query(phi)
        quantiles[phi] = math.nan if value is None else value

    if not successes:
        logger.warning("No successful latencies recorded.")

    report = RunReport(
        count=count,
        elapsed_s=elapsed_s,
        mean_ms=mean.value,
        quantiles=quantiles,
        successes=successes,
        errors=tuple(records),
    )
    if metrics_callback:
        metrics_callback(report.to_dict())
    return report


def render_summary(report: RunReport) -> str:
    stats = " / ".join(
        f"{_label(phi)}: {value:.02f}ms" for phi, value in report.quantiles.items()
    )
    return (
        f"Sent {report.count} requests in {report.elapsed_s:.04f}s "
        f"({report.throughput:.02f} rps / {report.mean_ms:.02f}ms mean)\n"
        f"- Stats: [ {stats} ]"
    )


def render_errors(report: RunReport) -> str:
    if not report.errors:
        return ""
    return "Errors:\n" + "\n".join(f"- {e}" for e in report.errors)


def log_report(report: RunReport) -> None:
    if report.errors:
        logger.error(render_errors(report))
    logger.info(render_summary(report))
