"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from rolloutscope import __version__
from rolloutscope.api.routes import invalid_rollout_response, router
from rolloutscope.assembler import canary_detector_for
from rolloutscope.models.config import RolloutScopeConfig
from rolloutscope.resolvers.ownership import CanaryDetector


def create_app(
    config: RolloutScopeConfig | None = None,
    canary_detector: CanaryDetector | None = None,
) -> FastAPI:
    """Build the REST application.

    An explicit *canary_detector* wins over the one named in *config*.
    """
    config = config or RolloutScopeConfig()

    app = FastAPI(
        title="rolloutscope",
        version=__version__,
        description="Rollout status summaries derived from Argo CD resource trees.",
    )
    app.state.config = config
    app.state.canary_detector = canary_detector or canary_detector_for(config.canary.detector)
    app.state.metrics_enabled = config.metrics_enabled

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        detail = "; ".join(str(e.get("msg", "")) for e in errors) or "invalid request body"
        return invalid_rollout_response(detail)

    app.include_router(router, prefix="/api/v1")
    if config.metrics_enabled:
        app.mount("/metrics", make_asgi_app())
    return app
