"""Pydantic request/response models for the rolloutscope REST API.

All models use Pydantic v2 syntax. Response fields are snake_case in Python
and serialised in camelCase, matching the Argo Rollouts UI models.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RolloutInfoRequest(BaseModel):
    """Request body for ``POST /api/v1/rollout-info``."""

    tree: dict[str, object] | list[dict[str, object]] = Field(
        ...,
        description="Argo CD application resource tree: ``{\"nodes\": [...]}`` or a bare node list.",
    )
    rollout: dict[str, object] = Field(
        ...,
        description="The Rollout manifest (``metadata``, ``spec``, ``status``).",
    )

    @field_validator("rollout")
    @classmethod
    def validate_rollout_has_metadata(cls, value: dict[str, object]) -> dict[str, object]:
        """Ensure the manifest at least names the rollout."""
        metadata = value.get("metadata")
        if not isinstance(metadata, dict) or not metadata.get("name"):
            raise ValueError("rollout.metadata.name is required")
        return value


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class HealthStatus(BaseModel):
    """Response body for ``GET /api/v1/health``."""

    status: str = Field(..., description="Always ``ok`` while the process is running.", examples=["ok"])
    version: str = Field(..., description="rolloutscope version string.", examples=["0.1.0"])


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx and 5xx responses."""

    error: str = Field(
        ...,
        description="Machine-readable error code.",
        examples=["INVALID_ROLLOUT", "INTERNAL_ERROR"],
    )
    detail: str = Field(
        ...,
        description="Human-readable description of the error.",
        examples=["rollout.metadata.name is required"],
    )


class ObjectMetaResponse(_CamelModel):
    name: str
    uid: str
    namespace: str | None = None


class CreationTimestampResponse(BaseModel):
    seconds: str | None = None


class AnalysisRunMetaResponse(_CamelModel):
    name: str
    namespace: str
    uid: str
    resource_version: str
    creation_timestamp: CreationTimestampResponse


class ContainerResponse(BaseModel):
    name: str
    image: str


class PodResponse(_CamelModel):
    object_meta: ObjectMetaResponse
    status: str | None = None


class ReplicaSetResponse(_CamelModel):
    object_meta: ObjectMetaResponse
    revision: str
    status: str | None = None
    canary: bool = False
    available: int = 0
    pods: list[PodResponse] = Field(default_factory=list)


class AnalysisRunResponse(_CamelModel):
    object_meta: AnalysisRunMetaResponse
    revision: str
    status: str = Field(..., examples=["Successful", "Running", "Failure", "Error"])


class RolloutInfoResponse(_CamelModel):
    """Serialised RolloutInfo returned by ``POST /api/v1/rollout-info``."""

    object_meta: ObjectMetaResponse
    strategy: str = Field(..., examples=["Canary", "BlueGreen"])
    containers: list[ContainerResponse] = Field(default_factory=list)
    current: int = 0
    updated: int = 0
    available: int = 0
    replica_sets: list[ReplicaSetResponse] = Field(default_factory=list)
    analysis_runs: list[AnalysisRunResponse] = Field(default_factory=list)
    steps: list[dict[str, object]] | None = None
    step: str | None = Field(default=None, description="``<currentStepIndex>/<steps>`` for canary rollouts.")
    set_weight: str | None = None
    actual_weight: str | None = None
