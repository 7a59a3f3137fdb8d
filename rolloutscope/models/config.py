"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LogConfig:
    level: str = "info"


@dataclass(frozen=True)
class APIConfig:
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass(frozen=True)
class CanaryConfig:
    # "pod-hash" compares ReplicaSet names with status.currentPodHash,
    # "none" never flags a canary ReplicaSet
    detector: str = "pod-hash"


@dataclass(frozen=True)
class RolloutScopeConfig:
    log: LogConfig = field(default_factory=LogConfig)
    api: APIConfig = field(default_factory=APIConfig)
    canary: CanaryConfig = field(default_factory=CanaryConfig)
    metrics_enabled: bool = True
