from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any, Dict, List

import httpx
import pytest
import yaml

from src.relay.config import RelaySettings
from src.relay.main import create_app
from src.relay.state import get_state
from src.relay.store.config_store import ConfigStore

BASE_URL = "http://alert-center.test/prometheusalert"

DEFAULT_ROUTING = {
    "prometheusAlertUrl": BASE_URL,
    "config": {
        "team-a": {"type": "fs", "tpl": "prometheus-fs", "fsurl": "https://hooks.example/abc"},
        "team-b": {"type": "dd", "tpl": "prometheus-dd"},
    },
}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def write_routing_config(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a routing config (dict -> YAML, str -> verbatim) to tmp_path/config.yml."""
    path = tmp_path / "config.yml"

    def _write(doc: Any) -> Path:
        text = doc if isinstance(doc, str) else yaml.safe_dump(doc, sort_keys=False)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def routing_config_path(write_routing_config) -> Path:
    return write_routing_config(DEFAULT_ROUTING)


class FakeDownstream:
    """Records forwarded requests; can be switched to fail at the transport level."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.fail_after: int | None = None
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.fail_after is not None and len(self.requests) >= self.fail_after:
            raise httpx.ConnectError("connection refused", request=request)
        self.requests.append(request)
        return httpx.Response(self.status_code, text="ok")

    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def downstream() -> FakeDownstream:
    return FakeDownstream()


@pytest.fixture
def settings(routing_config_path: Path) -> RelaySettings:
    return RelaySettings(routing_config_path=str(routing_config_path), host="127.0.0.1", port=8080, log_level="INFO")


@pytest.fixture
def app(settings: RelaySettings, downstream: FakeDownstream):
    """
    Relay app with the routing config preloaded and the outbound client bound to FakeDownstream.

    httpx.ASGITransport does not run lifespan events, so state is prepared here.
    """
    store = ConfigStore(settings.routing_config_path)
    store.load()
    fastapi_app = create_app(settings, store)
    get_state(fastapi_app).http_client = httpx.AsyncClient(transport=httpx.MockTransport(downstream.handler))
    return fastapi_app


@pytest.fixture
async def async_client(app) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client bound to the FastAPI ASGI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await get_state(app).http_client.aclose()
