"""
Alert Relay - API Response Schemas
"""

from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class SendErrorResponse(BaseModel):
    """Error returned when a chat id is invalid or a message could not be sent."""
    err: str = Field(..., description="Error text")
    message: Optional[str] = Field(None, description="Message that failed to send")
    srcmsg: Optional[str] = Field(None, description="Whole rendered alert")

    def to_response(self, status_code: int) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=self.model_dump(exclude_none=True),
        )


class RenderErrorResponse(BaseModel):
    """Error returned when the template fails on the payload."""
    err: str
    template: str

    def to_response(self, status_code: int = 500) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=self.model_dump())


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    version: str
    checks: Dict[str, Any]


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    templates: List[str] = Field(default_factory=list)
