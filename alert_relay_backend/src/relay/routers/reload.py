from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from src.relay.errors import ConfigLoadError
from src.relay.schemas.common import ErrorResponse
from src.relay.state import get_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Config"])


@router.api_route(
    "/reload",
    methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    response_class=PlainTextResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Reload routing config",
    description="Re-read the routing config file and swap it in. On failure the previous config stays active.",
    operation_id="reload_routing_config",
)
def reload_config(request: Request) -> PlainTextResponse:
    """Reload the routing config from its file."""
    logger.info("Manual reload triggered via /reload")
    store = get_state(request.app).store
    try:
        store.load()
    except ConfigLoadError as e:
        logger.error("Manual reload of %s failed: %s", e.path, e)
        raise HTTPException(status_code=500, detail="Failed to reload config")
    return PlainTextResponse("Config reloaded")
