"""FastAPI route handlers for the rolloutscope REST API.

All routes are registered on a single APIRouter that ``app.py`` mounts
under the ``/api/v1`` prefix.

Error code conventions:
    400 INVALID_ROLLOUT  -- rollout or tree payload is missing or unusable
    500 INTERNAL_ERROR   -- unexpected server-side failure
"""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from rolloutscope.api.schemas import (
    ErrorResponse,
    HealthStatus,
    RolloutInfoRequest,
    RolloutInfoResponse,
)
from rolloutscope.assembler import assemble
from rolloutscope.models.info import RolloutInfo
from rolloutscope.models.rollout import InvalidRolloutError
from rolloutscope.observability.metrics import invalid_requests_total, record_rollout_info

_log = structlog.get_logger(component="api.routes")

router = APIRouter()


def _info_to_schema(info: RolloutInfo) -> RolloutInfoResponse:
    """Convert a RolloutInfo dataclass to its Pydantic schema."""
    return RolloutInfoResponse.model_validate(info.to_dict())


def invalid_rollout_response(detail: str) -> JSONResponse:
    invalid_requests_total.inc()
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="INVALID_ROLLOUT", detail=detail).model_dump(),
    )


@router.post(
    "/rollout-info",
    response_model=RolloutInfoResponse,
    summary="Summarise a rollout",
    description=(
        "Derives the strategy, step, traffic weights, owned ReplicaSets/Pods "
        "and AnalysisRuns of a Rollout from a resource tree snapshot."
    ),
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def post_rollout_info(
    request: Request,
    body: RolloutInfoRequest,
) -> RolloutInfoResponse:
    """``POST /api/v1/rollout-info``"""
    detector = request.app.state.canary_detector
    start = time.perf_counter()
    try:
        info = assemble(body.tree, body.rollout, canary_detector=detector)
    except InvalidRolloutError as exc:
        _log.info("invalid_rollout_request", detail=str(exc))
        return invalid_rollout_response(str(exc))  # type: ignore[return-value]
    except Exception as exc:
        _log.error("rollout_info_endpoint_error", error=str(exc))
        return JSONResponse(  # type: ignore[return-value]
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    if request.app.state.metrics_enabled:
        record_rollout_info(info, time.perf_counter() - start)
    return _info_to_schema(info)


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Health check",
    description="Lightweight liveness probe. Always returns 200 if the process is up.",
)
async def get_health() -> HealthStatus:
    """``GET /api/v1/health``"""
    from rolloutscope import __version__

    return HealthStatus(status="ok", version=__version__)
