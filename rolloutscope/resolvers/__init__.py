"""Resolvers that derive one facet of a RolloutInfo from a GraphIndex."""

from rolloutscope.resolvers.analysis import analysis_outcome, resolve_analysis_runs
from rolloutscope.resolvers.canary import (
    CurrentStep,
    resolve_actual_weight,
    resolve_current_step,
    resolve_set_weight,
    step_progress,
)
from rolloutscope.resolvers.extractors import extract_pod_status_reason, extract_revision
from rolloutscope.resolvers.ownership import (
    CanaryDetector,
    no_canary_detector,
    pod_hash_canary_detector,
    resolve_replica_sets,
)
from rolloutscope.resolvers.workload import resolve_containers, resolve_workload

__all__ = [
    "CanaryDetector",
    "CurrentStep",
    "analysis_outcome",
    "extract_pod_status_reason",
    "extract_revision",
    "no_canary_detector",
    "pod_hash_canary_detector",
    "resolve_actual_weight",
    "resolve_analysis_runs",
    "resolve_containers",
    "resolve_current_step",
    "resolve_replica_sets",
    "resolve_set_weight",
    "resolve_workload",
    "step_progress",
]
