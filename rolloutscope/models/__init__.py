"""Core data structures for rolloutscope."""

from rolloutscope.models.config import RolloutScopeConfig
from rolloutscope.models.info import (
    AnalysisOutcome,
    AnalysisRunInfo,
    PodInfo,
    ReplicaSetInfo,
    RolloutInfo,
    Strategy,
)
from rolloutscope.models.nodes import (
    ContainerInfo,
    InfoItem,
    NodeKind,
    ParentRef,
    ResourceNode,
    parse_node,
    parse_tree,
)
from rolloutscope.models.rollout import (
    CanaryStep,
    CanaryStrategy,
    InvalidRolloutError,
    ObjectMeta,
    Rollout,
    RolloutSpec,
    RolloutStatus,
    WorkloadRef,
    parse_rollout,
)

__all__ = [
    "AnalysisOutcome",
    "AnalysisRunInfo",
    "CanaryStep",
    "CanaryStrategy",
    "ContainerInfo",
    "InfoItem",
    "InvalidRolloutError",
    "NodeKind",
    "ObjectMeta",
    "ParentRef",
    "PodInfo",
    "ReplicaSetInfo",
    "ResourceNode",
    "Rollout",
    "RolloutInfo",
    "RolloutScopeConfig",
    "RolloutSpec",
    "RolloutStatus",
    "Strategy",
    "WorkloadRef",
    "parse_node",
    "parse_rollout",
    "parse_tree",
]
