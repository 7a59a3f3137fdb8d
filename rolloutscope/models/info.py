"""Summary records produced for the rollout widget.

All records are frozen. ``to_dict`` renders the camelCase shape the Argo
Rollouts UI models use (``objectMeta``, ``setWeight``, ``replicaSets``...).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from rolloutscope.models.nodes import ContainerInfo


def _thaw(value: object) -> object:
    """Plain dict/list copy of a read-only step payload, for JSON output."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


class Strategy(StrEnum):
    CANARY = "Canary"
    BLUE_GREEN = "BlueGreen"


class AnalysisOutcome(StrEnum):
    """Normalized AnalysisRun result."""

    SUCCESSFUL = "Successful"
    RUNNING = "Running"
    FAILURE = "Failure"
    ERROR = "Error"


@dataclass(frozen=True)
class PodInfo:
    name: str
    uid: str
    status: str | None = None
    health: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "objectMeta": {"name": self.name, "uid": self.uid},
            "status": self.status,
        }


@dataclass(frozen=True)
class ReplicaSetInfo:
    """A ReplicaSet owned by the rollout, with the pods it owns.

    ``available`` counts owned pods reporting Healthy. ``canary`` is set by
    the injected canary detector.
    """

    name: str
    uid: str
    revision: str
    status: str | None
    pods: tuple[PodInfo, ...] = ()
    canary: bool = False
    available: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "objectMeta": {"name": self.name, "uid": self.uid},
            "revision": self.revision,
            "status": self.status,
            "canary": self.canary,
            "available": self.available,
            "pods": [p.to_dict() for p in self.pods],
        }


@dataclass(frozen=True)
class AnalysisRunInfo:
    name: str
    namespace: str
    uid: str
    created_at: str | None
    resource_version: str
    revision: str
    status: AnalysisOutcome

    def to_dict(self) -> dict[str, object]:
        return {
            "objectMeta": {
                "creationTimestamp": {"seconds": self.created_at},
                "name": self.name,
                "namespace": self.namespace,
                "resourceVersion": self.resource_version,
                "uid": self.uid,
            },
            "revision": self.revision,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class RolloutInfo:
    """Point-in-time status summary of one Rollout.

    ``steps``, ``step``, ``set_weight`` and ``actual_weight`` are only set
    for canary rollouts. ``steps`` holds read-only copies of the declared
    step payloads.
    """

    name: str
    namespace: str
    uid: str
    strategy: Strategy
    containers: tuple[ContainerInfo, ...]
    current: int
    updated: int
    available: int
    replica_sets: tuple[ReplicaSetInfo, ...]
    analysis_runs: tuple[AnalysisRunInfo, ...]
    steps: tuple[Mapping[str, object], ...] | None = None
    step: str | None = None
    set_weight: str | None = None
    actual_weight: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "objectMeta": {"name": self.name, "namespace": self.namespace, "uid": self.uid},
            "strategy": self.strategy.value,
            "containers": [{"name": c.name, "image": c.image} for c in self.containers],
            "current": self.current,
            "updated": self.updated,
            "available": self.available,
            "replicaSets": [rs.to_dict() for rs in self.replica_sets],
            "analysisRuns": [ar.to_dict() for ar in self.analysis_runs],
        }
        if self.strategy is Strategy.CANARY:
            data["steps"] = [_thaw(s) for s in self.steps or ()]
            data["step"] = self.step
            data["setWeight"] = self.set_weight
            data["actualWeight"] = self.actual_weight
        return data
