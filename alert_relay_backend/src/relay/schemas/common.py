from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for health endpoints."""

    status: str = Field(..., description="High-level health status string (e.g., 'ok').")
    message: str = Field(..., description="Human-readable status message.")
    timestamp: datetime = Field(..., description="UTC timestamp at time of response.")


class ErrorResponse(BaseModel):
    """Standard error response envelope."""

    detail: str = Field(..., description="Human-readable error details.")


class RoutingConfigDiagnostics(BaseModel):
    """Describes the routing config currently served by the relay."""

    loaded: bool = Field(..., description="Whether a routing config has been loaded successfully.")
    path: str = Field(..., description="Routing config file read at startup and on /reload.")
    base_url: Optional[str] = Field(default=None, description="Forwarding base URL of the active config.")
    config_names: List[str] = Field(default_factory=list, description="Config names accepted by /alert, sorted.")
    timestamp: datetime = Field(..., description="UTC timestamp when the diagnostics were produced.")


# PUBLIC_INTERFACE
def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
