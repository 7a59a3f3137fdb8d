"""Prometheus metrics for rolloutscope."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram

if TYPE_CHECKING:
    from rolloutscope.models.info import RolloutInfo

# Assembly metrics
rollout_info_total = Counter(
    "rolloutscope_rollout_info_total",
    "Total RolloutInfo summaries assembled",
    ["strategy"],
)

assemble_duration_seconds = Histogram(
    "rolloutscope_assemble_duration_seconds",
    "Time spent assembling a RolloutInfo in seconds",
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5),
)

# Analysis metrics
analysis_runs_total = Counter(
    "rolloutscope_analysis_runs_total",
    "Analysis runs observed in assembled summaries",
    ["outcome"],
)

# Request metrics
invalid_requests_total = Counter(
    "rolloutscope_invalid_requests_total",
    "Requests rejected because the rollout or tree payload was unusable",
)


def record_rollout_info(info: RolloutInfo, duration_seconds: float) -> None:
    """Record one assembled summary."""
    rollout_info_total.labels(strategy=info.strategy.value).inc()
    assemble_duration_seconds.observe(duration_seconds)
    for run in info.analysis_runs:
        analysis_runs_total.labels(outcome=run.status.value).inc()
