from __future__ import annotations

from fastapi import APIRouter, Request

from src.relay.errors import ConfigNotLoadedError
from src.relay.schemas.common import HealthResponse, RoutingConfigDiagnostics, utc_now
from src.relay.state import get_state

router = APIRouter(tags=["Health"])


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Health check",
    description="Basic service liveness check used by deployment probes.",
    operation_id="health_check",
)
def health_check() -> HealthResponse:
    """Return service liveness status."""
    return HealthResponse(status="ok", message="Healthy", timestamp=utc_now())


@router.get(
    "/api/health/config",
    response_model=RoutingConfigDiagnostics,
    summary="Routing config diagnostics",
    description="Reports the config file path, forwarding base URL and config names currently served.",
    operation_id="routing_config_diagnostics",
)
def routing_config_diagnostics(request: Request) -> RoutingConfigDiagnostics:
    store = get_state(request.app).store
    try:
        cfg = store.snapshot()
    except ConfigNotLoadedError:
        return RoutingConfigDiagnostics(loaded=False, path=store.path, timestamp=utc_now())

    return RoutingConfigDiagnostics(
        loaded=True,
        path=store.path,
        base_url=cfg.base_url,
        config_names=cfg.names(),
        timestamp=utc_now(),
    )
