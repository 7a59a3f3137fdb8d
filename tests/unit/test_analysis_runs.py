"""Tests for rolloutscope.resolvers.analysis."""

from __future__ import annotations

import pytest

from rolloutscope.graph.index import GraphIndex
from rolloutscope.models.info import AnalysisOutcome
from rolloutscope.models.nodes import InfoItem, ParentRef, ResourceNode
from rolloutscope.models.rollout import ObjectMeta, Rollout, RolloutSpec, RolloutStatus
from rolloutscope.resolvers.analysis import analysis_outcome, resolve_analysis_runs


def _rollout(name: str = "web") -> Rollout:
    return Rollout(metadata=ObjectMeta(name=name), spec=RolloutSpec(), status=RolloutStatus())


def _run(name: str, parent: str = "web", health: str | None = "Healthy") -> ResourceNode:
    return ResourceNode(
        kind="AnalysisRun",
        name=name,
        namespace="prod",
        uid=f"uid-{name}",
        created_at="2026-03-01T10:00:00Z",
        version="77",
        parent_refs=(ParentRef("Rollout", parent),),
        info=(InfoItem("Revision", "Rev:4"),),
        health=health,
    )


class TestAnalysisOutcome:
    @pytest.mark.parametrize(
        ("health", "expected"),
        [
            ("Healthy", AnalysisOutcome.SUCCESSFUL),
            ("Progressing", AnalysisOutcome.RUNNING),
            ("Degraded", AnalysisOutcome.FAILURE),
            ("Weird", AnalysisOutcome.ERROR),
            ("Suspended", AnalysisOutcome.ERROR),
            (None, AnalysisOutcome.ERROR),
        ],
    )
    def test_mapping_is_total(self, health: str | None, expected: AnalysisOutcome) -> None:
        assert analysis_outcome(health) is expected


class TestResolveAnalysisRuns:
    def test_runs_of_rollout(self) -> None:
        index = GraphIndex.build([_run("web-1"), _run("api-1", parent="api"), _run("web-2", health="Degraded")])
        runs = resolve_analysis_runs(index, _rollout())
        assert [r.name for r in runs] == ["web-1", "web-2"]
        assert [r.status for r in runs] == [AnalysisOutcome.SUCCESSFUL, AnalysisOutcome.FAILURE]

    def test_identity_and_timestamps_copied(self) -> None:
        index = GraphIndex.build([_run("web-1")])
        run = resolve_analysis_runs(index, _rollout())[0]
        assert run.namespace == "prod"
        assert run.uid == "uid-web-1"
        assert run.created_at == "2026-03-01T10:00:00Z"
        assert run.resource_version == "77"
        assert run.revision == "4"

    def test_unknown_health_kept_as_error(self) -> None:
        index = GraphIndex.build([_run("web-1", health=None)])
        runs = resolve_analysis_runs(index, _rollout())
        assert len(runs) == 1
        assert runs[0].status is AnalysisOutcome.ERROR
