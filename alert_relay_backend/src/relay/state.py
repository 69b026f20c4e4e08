from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import FastAPI

from src.relay.config import RelaySettings
from src.relay.store.config_store import ConfigStore


@dataclass
class AppState:
    """Typed app.state container for shared singletons."""

    settings: RelaySettings
    store: ConfigStore
    http_client: Optional[httpx.AsyncClient] = None  # created on startup unless injected (tests)


# PUBLIC_INTERFACE
def init_state(app: FastAPI, settings: RelaySettings, store: Optional[ConfigStore] = None) -> AppState:
    """Initialize app.state with settings and the routing config store."""
    state = AppState(settings=settings, store=store or ConfigStore(settings.routing_config_path))
    app.state.state = state
    return state


# PUBLIC_INTERFACE
def get_state(app: FastAPI) -> AppState:
    """Fetch typed AppState from a FastAPI app."""
    return app.state.state  # type: ignore[attr-defined]
