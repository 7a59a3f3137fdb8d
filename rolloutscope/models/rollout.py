"""Argo Rollouts ``Rollout`` resource, reduced to the fields the summary reads."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from rolloutscope.models.nodes import ContainerInfo, template_containers


class InvalidRolloutError(ValueError):
    """Raised when the rollout or tree payload is absent or not an object.

    This is a caller bug, not a cluster-state problem: partial rollouts are
    accepted, only unusable payloads are rejected.
    """


@dataclass(frozen=True)
class ObjectMeta:
    name: str
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    creation_timestamp: str | None = None


@dataclass(frozen=True)
class WorkloadRef:
    """Indirect pod template reference (``spec.workloadRef``)."""

    kind: str
    name: str


@dataclass(frozen=True)
class CanaryStep:
    """One declared canary step.

    ``set_weight`` is kept as a string because the summary reports weights
    as strings. ``raw`` is a read-only copy of the declared step payload,
    echoed in output.
    """

    set_weight: str | None = None
    pause: Mapping[str, object] | None = None
    raw: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class CanaryStrategy:
    steps: tuple[CanaryStep, ...] = ()
    traffic_routing: bool = False


@dataclass(frozen=True)
class RolloutSpec:
    canary: CanaryStrategy | None = None
    blue_green: bool = False
    # None means the rollout carries no inline pod template
    template_containers: tuple[ContainerInfo, ...] | None = None
    workload_ref: WorkloadRef | None = None


@dataclass(frozen=True)
class RolloutStatus:
    current_step_index: int | None = None
    abort: bool = False
    replicas: int = 0
    updated_replicas: int = 0
    available_replicas: int = 0
    current_pod_hash: str = ""
    stable_rs: str = ""


@dataclass(frozen=True)
class Rollout:
    metadata: ObjectMeta
    spec: RolloutSpec
    status: RolloutStatus

    @property
    def name(self) -> str:
        return self.metadata.name


def _int(value: object, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def _optional_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    # JSON decoders may hand back 1.0 for an integral index
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _freeze(value: object) -> object:
    """Copy a JSON value into read-only containers (mappings and tuples)."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_freeze(v) for v in value)
    return value


def _parse_step(raw: object) -> CanaryStep:
    if not isinstance(raw, dict):
        return CanaryStep()
    frozen = MappingProxyType({k: _freeze(v) for k, v in raw.items()})
    weight = frozen.get("setWeight")
    pause = frozen.get("pause")
    return CanaryStep(
        set_weight=None if weight is None or isinstance(weight, bool) else str(weight),
        pause=pause if isinstance(pause, MappingProxyType) else None,
        raw=frozen,
    )


def _parse_strategy(strategy: object) -> tuple[CanaryStrategy | None, bool]:
    if not isinstance(strategy, dict):
        return None, False
    canary: CanaryStrategy | None = None
    canary_block = strategy.get("canary")
    # An empty canary block still selects the canary strategy
    if isinstance(canary_block, dict):
        steps = canary_block.get("steps")
        canary = CanaryStrategy(
            steps=tuple(_parse_step(s) for s in steps) if isinstance(steps, list) else (),
            # Presence selects router weighting, even for an empty block
            traffic_routing=canary_block.get("trafficRouting") is not None,
        )
    return canary, isinstance(strategy.get("blueGreen"), dict)


def _parse_metadata(raw: dict[str, object]) -> ObjectMeta:
    created = raw.get("creationTimestamp")
    return ObjectMeta(
        name=str(raw.get("name") or ""),
        namespace=str(raw.get("namespace") or ""),
        uid=str(raw.get("uid") or ""),
        resource_version=str(raw.get("resourceVersion") or ""),
        creation_timestamp=None if created is None else str(created),
    )


def _parse_status(raw: object) -> RolloutStatus:
    if not isinstance(raw, dict):
        return RolloutStatus()
    return RolloutStatus(
        current_step_index=_optional_int(raw.get("currentStepIndex")),
        abort=raw.get("abort") is True,
        replicas=_int(raw.get("replicas")),
        updated_replicas=_int(raw.get("updatedReplicas")),
        available_replicas=_int(raw.get("availableReplicas")),
        current_pod_hash=str(raw.get("currentPodHash") or ""),
        stable_rs=str(raw.get("stableRS") or ""),
    )


def parse_rollout(raw: object) -> Rollout:
    """Build a Rollout from its JSON manifest.

    Raises:
        InvalidRolloutError: payload is not an object, lacks ``metadata`` or
            ``spec``, or has no ``metadata.name``.
    """
    if not isinstance(raw, dict):
        raise InvalidRolloutError(f"rollout must be an object, got {type(raw).__name__}")
    metadata = raw.get("metadata")
    if not isinstance(metadata, dict):
        raise InvalidRolloutError("rollout.metadata must be an object")
    meta = _parse_metadata(metadata)
    if not meta.name:
        raise InvalidRolloutError("rollout.metadata.name is required")
    spec = raw.get("spec")
    if not isinstance(spec, dict):
        raise InvalidRolloutError("rollout.spec must be an object")

    canary, blue_green = _parse_strategy(spec.get("strategy"))

    workload_ref: WorkloadRef | None = None
    ref = spec.get("workloadRef")
    if isinstance(ref, dict) and ref.get("kind") and ref.get("name"):
        workload_ref = WorkloadRef(kind=str(ref["kind"]), name=str(ref["name"]))

    return Rollout(
        metadata=meta,
        spec=RolloutSpec(
            canary=canary,
            blue_green=blue_green,
            template_containers=template_containers(spec),
            workload_ref=workload_ref,
        ),
        status=_parse_status(raw.get("status")),
    )
