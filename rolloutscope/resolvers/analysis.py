"""AnalysisRun collection and outcome normalization."""

from __future__ import annotations

from rolloutscope.graph.index import GraphIndex
from rolloutscope.models.info import AnalysisOutcome, AnalysisRunInfo
from rolloutscope.models.nodes import ResourceNode
from rolloutscope.models.rollout import Rollout
from rolloutscope.resolvers.extractors import extract_revision

_OUTCOMES: dict[str, AnalysisOutcome] = {
    "Healthy": AnalysisOutcome.SUCCESSFUL,
    "Progressing": AnalysisOutcome.RUNNING,
    "Degraded": AnalysisOutcome.FAILURE,
}


def analysis_outcome(health: str | None) -> AnalysisOutcome:
    """Map an Argo CD health status to an AnalysisOutcome.

    Total: unknown or missing health is an Error, never dropped.
    """
    if health is None:
        return AnalysisOutcome.ERROR
    return _OUTCOMES.get(health, AnalysisOutcome.ERROR)


def _run_info(node: ResourceNode) -> AnalysisRunInfo:
    return AnalysisRunInfo(
        name=node.name,
        namespace=node.namespace,
        uid=node.uid,
        created_at=node.created_at,
        resource_version=node.version,
        revision=extract_revision(node),
        status=analysis_outcome(node.health),
    )


def resolve_analysis_runs(index: GraphIndex, rollout: Rollout) -> tuple[AnalysisRunInfo, ...]:
    """AnalysisRuns with a parent ref naming the rollout, in tree order."""
    return tuple(_run_info(node) for node in index.analysis_runs_of(rollout.name))
