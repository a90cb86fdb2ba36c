"""API Schemas - Pydantic models for responses."""

from alertrelay.api.schemas.responses import (
    HealthResponse,
    ReadinessResponse,
    RenderErrorResponse,
    SendErrorResponse,
)

__all__ = [
    "HealthResponse",
    "ReadinessResponse",
    "RenderErrorResponse",
    "SendErrorResponse",
]
