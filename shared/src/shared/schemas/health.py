"""Health check response schema."""
from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response for /healthz and /readyz."""

    status: Literal["ok", "degraded", "unhealthy"]
    service: str = ""
    detail: str | None = None
