"""RolloutInfo assembly.

``assemble`` is the single entry point: it indexes the tree once, runs the
resolvers and merges their results into one immutable RolloutInfo. Every
resolver degrades to a documented default, so the only failure is an
unusable rollout or tree payload (InvalidRolloutError).
"""

from __future__ import annotations

from rolloutscope.graph.index import GraphIndex
from rolloutscope.models.info import RolloutInfo, Strategy
from rolloutscope.models.nodes import ResourceNode, parse_tree
from rolloutscope.models.rollout import InvalidRolloutError, Rollout, parse_rollout
from rolloutscope.observability.hooks import LoggingObserver, Observer
from rolloutscope.resolvers.analysis import resolve_analysis_runs
from rolloutscope.resolvers.canary import (
    resolve_actual_weight,
    resolve_current_step,
    resolve_set_weight,
    step_progress,
)
from rolloutscope.resolvers.ownership import (
    CanaryDetector,
    no_canary_detector,
    pod_hash_canary_detector,
    resolve_replica_sets,
)
from rolloutscope.resolvers.workload import resolve_containers

_DETECTORS: dict[str, CanaryDetector] = {
    "pod-hash": pod_hash_canary_detector,
    "none": no_canary_detector,
}


def canary_detector_for(name: str) -> CanaryDetector:
    """Return the detector registered under a ROLLOUTSCOPE_CANARY_DETECTOR name."""
    try:
        return _DETECTORS[name]
    except KeyError:
        raise ValueError(f"unknown canary detector: {name!r}") from None


def _nodes(tree: object) -> tuple[ResourceNode, ...]:
    if tree is None:
        raise InvalidRolloutError("resource tree is required")
    if isinstance(tree, GraphIndex):
        return tree.nodes
    if isinstance(tree, (list, tuple)):
        if all(isinstance(n, ResourceNode) for n in tree):
            return tuple(tree)
        return parse_tree(list(tree))
    if isinstance(tree, dict):
        return parse_tree(tree)
    raise InvalidRolloutError(f"resource tree must be an object or a list, got {type(tree).__name__}")


def _rollout(rollout: object) -> Rollout:
    if rollout is None:
        raise InvalidRolloutError("rollout is required")
    if isinstance(rollout, Rollout):
        return rollout
    return parse_rollout(rollout)


def assemble(
    tree: object,
    rollout: object,
    *,
    canary_detector: CanaryDetector | None = None,
    observer: Observer | None = None,
) -> RolloutInfo:
    """Derive the RolloutInfo of *rollout* from a resource tree snapshot.

    Args:
        tree:            ``{"nodes": [...]}`` payload, a list of raw nodes, a
                         sequence of ResourceNode, or a prebuilt GraphIndex.
        rollout:         Rollout manifest dict or a parsed Rollout.
        canary_detector: Decides which owned ReplicaSet is the canary
                         generation. Defaults to pod_hash_canary_detector.
        observer:        Receives traversal diagnostics. Defaults to a
                         structlog-backed LoggingObserver.

    Raises:
        InvalidRolloutError: tree or rollout is missing or not usable.
    """
    ro = _rollout(rollout)
    index = tree if isinstance(tree, GraphIndex) else GraphIndex.build(_nodes(tree))
    detector = canary_detector or pod_hash_canary_detector
    obs = observer or LoggingObserver()

    replica_sets = resolve_replica_sets(index, ro, canary_detector=detector, observer=obs)
    analysis_runs = resolve_analysis_runs(index, ro)
    containers = resolve_containers(index, ro, observer=obs)
    status = ro.status

    canary = ro.spec.canary
    if canary is None:
        info = RolloutInfo(
            name=ro.metadata.name,
            namespace=ro.metadata.namespace,
            uid=ro.metadata.uid,
            strategy=Strategy.BLUE_GREEN,
            containers=containers,
            current=status.replicas,
            updated=status.updated_replicas,
            available=status.available_replicas,
            replica_sets=replica_sets,
            analysis_runs=analysis_runs,
        )
    else:
        current = resolve_current_step(canary, status)
        set_weight = resolve_set_weight(canary, status, current.index)
        actual_weight = resolve_actual_weight(canary, status, current, set_weight, replica_sets)
        obs.emit(
            "canary_step_resolved",
            rollout=ro.name,
            step_index=current.index,
            completed=current.step is None,
            abort=status.abort,
            set_weight=set_weight,
            actual_weight=actual_weight,
        )
        info = RolloutInfo(
            name=ro.metadata.name,
            namespace=ro.metadata.namespace,
            uid=ro.metadata.uid,
            strategy=Strategy.CANARY,
            containers=containers,
            current=status.replicas,
            updated=status.updated_replicas,
            available=status.available_replicas,
            replica_sets=replica_sets,
            analysis_runs=analysis_runs,
            steps=tuple(step.raw for step in canary.steps),
            step=step_progress(canary, status),
            set_weight=set_weight,
            actual_weight=actual_weight,
        )

    obs.emit(
        "rollout_info_assembled",
        rollout=ro.name,
        strategy=info.strategy.value,
        nodes=index.node_count,
        replica_sets=len(replica_sets),
        analysis_runs=len(analysis_runs),
    )
    return info
