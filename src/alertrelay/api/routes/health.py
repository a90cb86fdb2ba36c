"""
Alert Relay - Health Check Routes
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from alertrelay import __version__
from alertrelay.api.deps import get_template_store
from alertrelay.api.schemas.responses import HealthResponse, ReadinessResponse
from alertrelay.templating.store import TemplateStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    Reports whether the bot is connected to Telegram.
    """
    connected = request.app.state.bot is not None
    checks = {
        "api": "healthy",
        "telegram": "connected" if connected else "disconnected",
    }

    return HealthResponse(
        status="healthy" if connected else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        checks=checks,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    store: TemplateStore = Depends(get_template_store),
) -> ReadinessResponse:
    """
    Readiness check for Kubernetes.

    Lists the templates currently cached.
    """
    return ReadinessResponse(status="ready", templates=store.names())


@router.get("/live")
async def liveness_check() -> dict:
    """Liveness check for Kubernetes."""
    return {"status": "alive"}
