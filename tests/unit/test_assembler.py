"""Tests for rolloutscope.assembler -- RolloutInfo assembly end to end."""

from __future__ import annotations

import pytest

from rolloutscope.assembler import assemble, canary_detector_for
from rolloutscope.graph.index import GraphIndex
from rolloutscope.models.info import AnalysisOutcome, Strategy
from rolloutscope.models.nodes import parse_tree
from rolloutscope.models.rollout import InvalidRolloutError, parse_rollout
from rolloutscope.observability.hooks import NullObserver, RecordingObserver
from rolloutscope.resolvers.ownership import no_canary_detector, pod_hash_canary_detector


def _canary_rollout(
    steps: list[dict[str, object]] | None = None,
    status: dict[str, object] | None = None,
    traffic_routing: bool = False,
    **spec_extra: object,
) -> dict[str, object]:
    canary: dict[str, object] = {"steps": steps if steps is not None else []}
    if traffic_routing:
        canary["trafficRouting"] = {"istio": {"virtualService": {"name": "web"}}}
    spec: dict[str, object] = {"strategy": {"canary": canary}}
    spec.update(spec_extra)
    return {
        "metadata": {"name": "web", "namespace": "prod", "uid": "ro-1"},
        "spec": spec,
        "status": status if status is not None else {},
    }


def _tree() -> dict[str, object]:
    return {
        "nodes": [
            {
                "kind": "ReplicaSet",
                "name": "web-aaa",
                "uid": "rs-a",
                "parentRefs": [{"kind": "Rollout", "name": "web"}],
                "info": [{"name": "Revision", "value": "Rev:1"}],
                "health": {"status": "Healthy"},
            },
            {
                "kind": "ReplicaSet",
                "name": "web-bbb",
                "uid": "rs-b",
                "parentRefs": [{"kind": "Rollout", "name": "web"}],
                "info": [{"name": "Revision", "value": "Rev:2"}],
                "health": {"status": "Progressing"},
            },
            {
                "kind": "Pod",
                "name": "web-aaa-1",
                "uid": "p-a1",
                "parentRefs": [{"kind": "ReplicaSet", "name": "web-aaa"}],
                "info": [{"name": "Status Reason", "value": "Running"}],
                "health": {"status": "Healthy"},
            },
            {
                "kind": "Pod",
                "name": "web-aaa-2",
                "uid": "p-a2",
                "parentRefs": [{"kind": "ReplicaSet", "name": "web-aaa"}],
                "health": {"status": "Healthy"},
            },
            {
                "kind": "Pod",
                "name": "web-aaa-3",
                "uid": "p-a3",
                "parentRefs": [{"kind": "ReplicaSet", "name": "web-aaa"}],
                "health": {"status": "Healthy"},
            },
            {
                "kind": "Pod",
                "name": "web-bbb-1",
                "uid": "p-b1",
                "parentRefs": [{"kind": "ReplicaSet", "name": "web-bbb"}],
                "health": {"status": "Healthy"},
            },
            {
                "kind": "Pod",
                "name": "api-zzz-1",
                "uid": "p-z1",
                "parentRefs": [{"kind": "ReplicaSet", "name": "api-zzz"}],
                "health": {"status": "Healthy"},
            },
            {
                "kind": "AnalysisRun",
                "name": "web-bbb-2-1",
                "uid": "ar-1",
                "createdAt": "2026-03-01T10:00:00Z",
                "parentRefs": [{"kind": "Rollout", "name": "web"}],
                "info": [{"name": "Revision", "value": "Rev:2"}],
                "health": {"status": "Weird"},
            },
        ]
    }


_STEPS: list[dict[str, object]] = [{"setWeight": 20}, {"pause": {}}, {"setWeight": 40}]


class TestStrategy:
    def test_blue_green_has_no_step_fields(self) -> None:
        rollout = {
            "metadata": {"name": "web"},
            "spec": {"strategy": {"blueGreen": {"activeService": "web"}}},
            "status": {"currentStepIndex": 0, "availableReplicas": 3},
        }
        info = assemble(_tree(), rollout, observer=NullObserver())
        assert info.strategy is Strategy.BLUE_GREEN
        assert info.steps is None
        assert info.step is None
        assert info.set_weight is None
        assert info.actual_weight is None
        assert "setWeight" not in info.to_dict()

    def test_missing_strategy_is_blue_green(self) -> None:
        info = assemble({"nodes": []}, {"metadata": {"name": "web"}, "spec": {}}, observer=NullObserver())
        assert info.strategy is Strategy.BLUE_GREEN

    def test_canary(self) -> None:
        info = assemble(_tree(), _canary_rollout(_STEPS), observer=NullObserver())
        assert info.strategy is Strategy.CANARY
        assert info.steps == tuple(_STEPS)


class TestCanaryFields:
    def test_empty_steps(self) -> None:
        info = assemble(_tree(), _canary_rollout([], {"availableReplicas": 2}), observer=NullObserver())
        assert info.set_weight == "0"
        assert info.step is None
        # no current step means the rollout counts as fully rolled out
        assert info.actual_weight == "100"

    def test_walks_back_past_pause(self) -> None:
        info = assemble(_tree(), _canary_rollout(_STEPS, {"currentStepIndex": 1}), observer=NullObserver())
        assert info.set_weight == "20"
        assert info.step == "1/3"

    def test_abort_zeroes_set_weight(self) -> None:
        status = {"currentStepIndex": 2, "abort": True, "availableReplicas": 4}
        info = assemble(_tree(), _canary_rollout(_STEPS, status, traffic_routing=True), observer=NullObserver())
        assert info.set_weight == "0"
        assert info.actual_weight == "0"

    def test_no_available_replicas(self) -> None:
        status = {"currentStepIndex": 0, "availableReplicas": 0}
        info = assemble(_tree(), _canary_rollout(_STEPS, status), observer=NullObserver())
        assert info.actual_weight == "0"

    def test_completed_steps(self) -> None:
        status = {"currentStepIndex": 3, "availableReplicas": 0}
        info = assemble(_tree(), _canary_rollout(_STEPS, status), observer=NullObserver())
        assert info.actual_weight == "100"
        assert info.set_weight == "40"
        assert info.step == "3/3"

    def test_traffic_routing(self) -> None:
        status = {"currentStepIndex": 0, "availableReplicas": 4}
        info = assemble(_tree(), _canary_rollout(_STEPS, status, traffic_routing=True), observer=NullObserver())
        assert info.actual_weight == "20"

    def test_empty_traffic_routing_block_uses_set_weight(self) -> None:
        status = {"currentStepIndex": 0, "availableReplicas": 4, "currentPodHash": "bbb", "stableRS": "aaa"}
        rollout = _canary_rollout([{"setWeight": 20}, {"pause": {}}], status)
        rollout["spec"]["strategy"]["canary"]["trafficRouting"] = {}  # type: ignore[index]
        info = assemble(_tree(), rollout, observer=NullObserver())
        assert info.actual_weight == "20"

    def test_integral_float_step_index(self) -> None:
        info = assemble(_tree(), _canary_rollout(_STEPS, {"currentStepIndex": 1.0}), observer=NullObserver())
        assert info.step == "1/3"
        assert info.set_weight == "20"

    def test_actual_weight_from_canary_replica_set(self) -> None:
        status = {"currentStepIndex": 0, "availableReplicas": 4, "currentPodHash": "bbb", "stableRS": "aaa"}
        info = assemble(_tree(), _canary_rollout(_STEPS, status), observer=NullObserver())
        assert [rs.canary for rs in info.replica_sets] == [False, True]
        assert info.actual_weight == "0.25"

    def test_detector_can_be_disabled(self) -> None:
        status = {"currentStepIndex": 0, "availableReplicas": 4, "currentPodHash": "bbb", "stableRS": "aaa"}
        info = assemble(
            _tree(),
            _canary_rollout(_STEPS, status),
            canary_detector=no_canary_detector,
            observer=NullObserver(),
        )
        assert info.actual_weight == "0"


class TestOwnedResources:
    def test_replica_sets_and_pods(self) -> None:
        info = assemble(_tree(), _canary_rollout(_STEPS), observer=NullObserver())
        assert [rs.name for rs in info.replica_sets] == ["web-aaa", "web-bbb"]
        assert [rs.revision for rs in info.replica_sets] == ["1", "2"]
        all_pods = [p.name for rs in info.replica_sets for p in rs.pods]
        assert "api-zzz-1" not in all_pods
        assert len(all_pods) == 4

    def test_analysis_runs(self) -> None:
        info = assemble(_tree(), _canary_rollout(_STEPS), observer=NullObserver())
        assert len(info.analysis_runs) == 1
        assert info.analysis_runs[0].status is AnalysisOutcome.ERROR
        assert info.analysis_runs[0].revision == "2"

    def test_replica_counts_copied(self) -> None:
        status = {"replicas": 5, "updatedReplicas": 2, "availableReplicas": 4}
        info = assemble(_tree(), _canary_rollout(_STEPS, status), observer=NullObserver())
        assert (info.current, info.updated, info.available) == (5, 2, 4)


class TestContainers:
    def test_inline_template(self) -> None:
        rollout = _canary_rollout(_STEPS, template={"spec": {"containers": [{"name": "app", "image": "web:2"}]}})
        info = assemble(_tree(), rollout, observer=NullObserver())
        assert [(c.name, c.image) for c in info.containers] == [("app", "web:2")]

    def test_unresolvable_workload_ref(self) -> None:
        rollout = _canary_rollout(_STEPS, workloadRef={"kind": "Deployment", "name": "missing"})
        info = assemble(_tree(), rollout, observer=NullObserver())
        assert info.containers == ()

    def test_workload_ref_resolved_from_tree(self) -> None:
        tree = _tree()
        nodes = tree["nodes"]
        assert isinstance(nodes, list)
        nodes.append(
            {
                "kind": "Deployment",
                "name": "web-tpl",
                "spec": {"template": {"spec": {"containers": [{"name": "app", "image": "web:9"}]}}},
            }
        )
        rollout = _canary_rollout(_STEPS, workloadRef={"kind": "Deployment", "name": "web-tpl"})
        info = assemble(tree, rollout, observer=NullObserver())
        assert [c.image for c in info.containers] == ["web:9"]


class TestInputs:
    def test_accepts_parsed_inputs_and_index(self) -> None:
        nodes = parse_tree(_tree())
        rollout = parse_rollout(_canary_rollout(_STEPS))
        from_nodes = assemble(nodes, rollout, observer=NullObserver())
        from_index = assemble(GraphIndex.build(nodes), rollout, observer=NullObserver())
        assert from_nodes == from_index

    def test_does_not_mutate_tree(self) -> None:
        tree = _tree()
        before = repr(tree)
        assemble(tree, _canary_rollout(_STEPS), observer=NullObserver())
        assert repr(tree) == before

    def test_steps_output_cannot_reach_rollout_payload(self) -> None:
        steps: list[dict[str, object]] = [{"setWeight": 20}, {"pause": {"duration": "10m"}}]
        rollout = _canary_rollout(steps, {"currentStepIndex": 1})
        before = repr(rollout)
        info = assemble(_tree(), rollout, observer=NullObserver())
        with pytest.raises(TypeError):
            info.steps[1]["pause"]["duration"] = "1h"  # type: ignore[index]
        with pytest.raises(TypeError):
            info.steps[1]["pause"] = {}  # type: ignore[index]
        assert repr(rollout) == before
        assert info.to_dict()["steps"] == [{"setWeight": 20}, {"pause": {"duration": "10m"}}]

    def test_repeated_calls_are_identical(self) -> None:
        rollout = _canary_rollout(_STEPS, {"currentStepIndex": 1, "availableReplicas": 4})
        assert assemble(_tree(), rollout, observer=NullObserver()) == assemble(_tree(), rollout, observer=NullObserver())

    def test_none_rollout_fails_fast(self) -> None:
        with pytest.raises(InvalidRolloutError):
            assemble(_tree(), None)

    def test_none_tree_fails_fast(self) -> None:
        with pytest.raises(InvalidRolloutError):
            assemble(None, _canary_rollout(_STEPS))

    def test_scalar_tree_rejected(self) -> None:
        with pytest.raises(InvalidRolloutError):
            assemble("nodes", _canary_rollout(_STEPS))


class TestObserver:
    def test_events_emitted(self) -> None:
        observer = RecordingObserver()
        assemble(_tree(), _canary_rollout(_STEPS, {"currentStepIndex": 1}), observer=observer)
        assert observer.names() == ["replica_sets_resolved", "canary_step_resolved", "rollout_info_assembled"]
        _, fields = observer.events[1]
        assert fields["set_weight"] == "20"
        assert fields["step_index"] == 1


class TestCanaryDetectorFor:
    def test_known_names(self) -> None:
        assert canary_detector_for("pod-hash") is pod_hash_canary_detector
        assert canary_detector_for("none") is no_canary_detector

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError):
            canary_detector_for("labels")
