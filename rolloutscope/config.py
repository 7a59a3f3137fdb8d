"""Load configuration from ROLLOUTSCOPE_* environment variables.

Unset variables fall back to defaults. Numeric values are clamped into
their allowed range; enumerated values that are not recognised raise
ValueError so that a misconfigured deployment fails at startup.
"""

from __future__ import annotations

import os

from rolloutscope.models.config import (
    APIConfig,
    CanaryConfig,
    LogConfig,
    RolloutScopeConfig,
)

_PREFIX = "ROLLOUTSCOPE_"

_LOG_LEVELS: frozenset[str] = frozenset({"debug", "info", "warning", "error"})
CANARY_DETECTORS: frozenset[str] = frozenset({"pod-hash", "none"})

_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "on"})


def _env(name: str, default: str) -> str:
    return os.environ.get(_PREFIX + name, default).strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, default: int, minimum: int, maximum: int) -> int:
    raw = os.environ.get(_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{_PREFIX}{name} must be an integer, got: {raw!r}") from exc
    return max(minimum, min(maximum, value))


def load_config() -> RolloutScopeConfig:
    """Build a RolloutScopeConfig from the process environment."""
    level = _env("LOG_LEVEL", "info").lower()
    if level not in _LOG_LEVELS:
        raise ValueError(f"{_PREFIX}LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got: {level!r}")

    detector = _env("CANARY_DETECTOR", "pod-hash").lower()
    if detector not in CANARY_DETECTORS:
        raise ValueError(f"{_PREFIX}CANARY_DETECTOR must be one of {sorted(CANARY_DETECTORS)}, got: {detector!r}")

    return RolloutScopeConfig(
        log=LogConfig(level=level),
        api=APIConfig(
            host=_env("API_HOST", "0.0.0.0") or "0.0.0.0",
            port=_env_int("API_PORT", 8080, minimum=1024, maximum=65535),
        ),
        canary=CanaryConfig(detector=detector),
        metrics_enabled=_env_bool("METRICS_ENABLED", True),
    )
