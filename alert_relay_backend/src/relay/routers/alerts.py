from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from src.relay.errors import ConfigLookupError, ForwardError, SplitError
from src.relay.schemas.common import ErrorResponse
from src.relay.services.forwarder import forward_groups
from src.relay.services.splitter import split_alerts
from src.relay.state import AppState, get_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Alerts"])


def _http_client(state: AppState) -> httpx.AsyncClient:
    # Owned by the app lifespan (or injected by tests); never created per request.
    if state.http_client is None:
        raise RuntimeError("outbound HTTP client is not initialized; app lifespan has not run")
    return state.http_client


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _parse_payload(body: bytes) -> Dict[str, Any]:
    payload = json.loads(body, parse_constant=_reject_constant)
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


@router.post(
    "/alert",
    response_class=PlainTextResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="Relay an alert webhook",
    description=(
        "Split an Alertmanager webhook payload into firing/resolved groups and POST each group "
        "to the forwarding base URL with the named config's query parameters."
    ),
    operation_id="relay_alert",
)
async def relay_alert(
    request: Request,
    config: Optional[str] = Query(default=None, description="Name of the routing config entry to forward with."),
) -> PlainTextResponse:
    """Relay an alert payload to the downstream endpoint of the given config."""
    logger.info("Incoming alert request config=%s", config)
    if not config:
        logger.warning("Missing config param")
        raise HTTPException(status_code=400, detail="Missing config param")

    state = get_state(request.app)
    # One snapshot per request: a concurrent reload never mixes old entries with a new base URL.
    try:
        routing = state.store.snapshot()
        params = routing.entries[config]
    except (ConfigLookupError, KeyError):
        logger.warning("Config %s not found", config)
        raise HTTPException(status_code=400, detail="Config not found")

    try:
        body = await request.body()
    except Exception:
        logger.exception("Read body error")
        raise HTTPException(status_code=400, detail="Read error")

    try:
        payload = _parse_payload(body)
    except (ValueError, RecursionError) as e:
        logger.error("Alert body is not a JSON object: %s", e)
        raise HTTPException(status_code=500, detail="Split error")

    try:
        groups = split_alerts(payload)
    except SplitError as e:
        logger.error("Split alert error: %s", e)
        raise HTTPException(status_code=500, detail="Split error")

    try:
        sent = await forward_groups(_http_client(state), routing.base_url, params, groups)
    except ForwardError as e:
        logger.error("Forward error: %s", e)
        raise HTTPException(status_code=502, detail="Forward failed")

    logger.info("Successfully forwarded %d %s alert groups", sent, config)
    return PlainTextResponse("OK")
