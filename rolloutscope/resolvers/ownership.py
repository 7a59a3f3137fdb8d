"""ReplicaSet and Pod ownership resolution.

A ReplicaSet belongs to the rollout when one of its parent refs is
``{kind: Rollout, name: <rollout>}``; a Pod belongs to a ReplicaSet when one
of its parent refs is ``{kind: ReplicaSet, name: <rs>}``. Pods whose
ReplicaSet is not owned by the rollout are dropped.
"""

from __future__ import annotations

from collections.abc import Callable

from rolloutscope.graph.index import GraphIndex
from rolloutscope.models.info import PodInfo, ReplicaSetInfo
from rolloutscope.models.nodes import NodeKind, ResourceNode
from rolloutscope.models.rollout import Rollout
from rolloutscope.observability.hooks import NullObserver, Observer
from rolloutscope.resolvers.extractors import extract_pod_status_reason, extract_revision

CanaryDetector = Callable[[ResourceNode, Rollout], bool]

HEALTHY = "Healthy"


def pod_hash_canary_detector(replica_set: ResourceNode, rollout: Rollout) -> bool:
    """Flag the ReplicaSet of the current pod template hash as canary.

    Argo Rollouts names ReplicaSets ``<rollout>-<pod-template-hash>``. While
    an update is in flight ``status.currentPodHash`` differs from
    ``status.stableRS``; once promoted they are equal and nothing is canary.
    """
    current = rollout.status.current_pod_hash
    if not current or current == rollout.status.stable_rs:
        return False
    return replica_set.name.endswith(f"-{current}")


def no_canary_detector(replica_set: ResourceNode, rollout: Rollout) -> bool:
    return False


def _pod_info(pod: ResourceNode) -> PodInfo:
    return PodInfo(
        name=pod.name,
        uid=pod.uid,
        status=extract_pod_status_reason(pod),
        health=pod.health,
    )


def _count_orphaned_pods(index: GraphIndex) -> int:
    """Pods whose ReplicaSet parent refs name no ReplicaSet in the tree."""
    return sum(
        1
        for pod in index.pods
        if not any(
            index.find(ref.kind, ref.name) is not None
            for ref in pod.parent_refs
            if ref.kind == NodeKind.REPLICA_SET.value
        )
    )


def resolve_replica_sets(
    index: GraphIndex,
    rollout: Rollout,
    canary_detector: CanaryDetector = pod_hash_canary_detector,
    observer: Observer | None = None,
) -> tuple[ReplicaSetInfo, ...]:
    """Collect the rollout's ReplicaSets with their pods, in tree order."""
    observer = observer or NullObserver()
    owned: list[ReplicaSetInfo] = []
    attached: set[tuple[str, str]] = set()

    for rs in index.replica_sets_of(rollout.name):
        pods = tuple(_pod_info(p) for p in index.pods_of(rs.name))
        attached.update((p.name, p.uid) for p in pods)
        owned.append(
            ReplicaSetInfo(
                name=rs.name,
                uid=rs.uid,
                revision=extract_revision(rs),
                status=rs.health,
                pods=pods,
                canary=canary_detector(rs, rollout),
                available=sum(1 for p in pods if p.health == HEALTHY),
            )
        )

    observer.emit(
        "replica_sets_resolved",
        rollout=rollout.name,
        replica_sets=len(owned),
        pods=len(attached),
        orphaned_pods=_count_orphaned_pods(index),
    )
    return tuple(owned)
