"""Common DTOs and schemas."""
from shared.schemas.health import HealthResponse

__all__ = ["HealthResponse"]
