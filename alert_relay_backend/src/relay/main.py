from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI

from src.relay.config import RelaySettings, load_settings
from src.relay.errors import ConfigLoadError
from src.relay.routers import alerts, health, reload
from src.relay.state import get_state, init_state
from src.relay.store.config_store import ConfigStore

openapi_tags = [
    {"name": "Health", "description": "Service health and routing config diagnostics."},
    {"name": "Alerts", "description": "Alert webhook intake, split by status and forwarded downstream."},
    {"name": "Config", "description": "Hot reload of the routing config file."},
]

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# PUBLIC_INTERFACE
def create_app(settings: Optional[RelaySettings] = None, store: Optional[ConfigStore] = None) -> FastAPI:
    """Build the relay FastAPI app; the routing config is loaded on startup if not already loaded."""
    settings = settings or load_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Load the routing config (fatal on failure) and own the outbound client for the app's lifetime."""
        state = get_state(app)
        if not state.store.loaded:
            # Raising here makes the ASGI server refuse to start.
            state.store.load()
        if state.http_client is None:
            state.http_client = httpx.AsyncClient()
        try:
            yield
        finally:
            if state.http_client is not None:
                await state.http_client.aclose()
                state.http_client = None

    app = FastAPI(
        title="Alert Relay API",
        description=(
            "Receives Alertmanager webhooks, splits them into firing and resolved groups and "
            "forwards each group to the configured downstream URL with per-config query parameters."
        ),
        version="1.0.0",
        openapi_tags=openapi_tags,
        lifespan=_lifespan,
    )
    init_state(app, settings, store)

    app.include_router(health.router)
    app.include_router(alerts.router)
    app.include_router(reload.router)
    return app


# ASGI target for `uvicorn src.relay.main:app`; settings come from env at import.
app = create_app()


# PUBLIC_INTERFACE
def run() -> None:
    """Console entrypoint: load the routing config (exit 1 on failure) and serve forever."""
    import uvicorn

    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logger.info("Starting alert relay on %s:%s", settings.host, settings.port)

    store = ConfigStore(settings.routing_config_path)
    try:
        store.load()
    except ConfigLoadError as e:
        logger.critical("Failed to load routing config %s: %s", e.path, e)
        sys.exit(1)

    uvicorn.run(create_app(settings, store), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
