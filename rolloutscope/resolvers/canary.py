"""Canary step and traffic weight resolution.

Weights are reported as strings, the way the rollout widget displays them.

Known simplification: when several owned ReplicaSets are flagged canary,
the actual weight uses the last one in tree order, not the most recent
revision.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from rolloutscope.models.info import ReplicaSetInfo
from rolloutscope.models.rollout import CanaryStep, CanaryStrategy, RolloutStatus

NO_WEIGHT = "0"
FULL_WEIGHT = "100"


@dataclass(frozen=True)
class CurrentStep:
    """Active canary step and its index.

    ``step`` is None when no steps are declared (index -1) or when every
    step has completed (index >= number of steps).
    """

    step: CanaryStep | None
    index: int


def _steps(canary: CanaryStrategy | None) -> tuple[CanaryStep, ...]:
    return canary.steps if canary is not None else ()


def resolve_current_step(canary: CanaryStrategy | None, status: RolloutStatus) -> CurrentStep:
    steps = _steps(canary)
    if not steps:
        return CurrentStep(step=None, index=-1)
    index = max(status.current_step_index or 0, 0)
    if index >= len(steps):
        return CurrentStep(step=None, index=index)
    return CurrentStep(step=steps[index], index=index)


def resolve_set_weight(canary: CanaryStrategy | None, status: RolloutStatus, current_index: int) -> str:
    """Weight declared by the current step or the closest earlier one.

    An aborted rollout always reports ``"0"``.
    """
    if status.abort:
        return NO_WEIGHT
    steps = _steps(canary)
    # Completed rollouts report an index past the end; start from the last step
    start = min(current_index, len(steps) - 1)
    for i in range(start, -1, -1):
        weight = steps[i].set_weight
        if weight is not None:
            return weight
    return NO_WEIGHT


def format_weight(value: float) -> str:
    """Render a weight without a trailing ``.0`` for integral values."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def resolve_actual_weight(
    canary: CanaryStrategy | None,
    status: RolloutStatus,
    current: CurrentStep,
    set_weight: str,
    replica_sets: Sequence[ReplicaSetInfo],
) -> str:
    """Observed share of traffic on the canary generation.

    With a traffic router the declared weight is trusted. Without one the
    share is the canary ReplicaSet's available pods over the rollout's
    available replicas.
    """
    if current.step is None:
        return FULL_WEIGHT
    if status.available_replicas <= 0:
        return NO_WEIGHT
    if canary is not None and canary.traffic_routing:
        return set_weight

    weight = NO_WEIGHT
    for rs in replica_sets:
        if rs.canary:
            weight = format_weight(rs.available / status.available_replicas)
    return weight


def step_progress(canary: CanaryStrategy | None, status: RolloutStatus) -> str | None:
    """``"<currentStepIndex>/<steps>"`` when both are known."""
    steps = _steps(canary)
    if not steps or status.current_step_index is None:
        return None
    return f"{status.current_step_index}/{len(steps)}"
