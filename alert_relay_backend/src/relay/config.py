from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_ROUTING_CONFIG_PATH = "/opt/splitAlert/config/config.yml"


def _env_int(name: str, default: int) -> int:
    """Parse an int env var with a default."""
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return int(default)


def _env_str(name: str, default: str) -> str:
    """Read a string env var; blank values fall back to the default."""
    raw = (os.getenv(name) or "").strip()
    return raw or default


def _clamp_int(v: int, lo: int, hi: int) -> int:
    """Clamp integer to [lo, hi]."""
    return max(lo, min(hi, int(v)))


@dataclass(frozen=True)
class RelaySettings:
    """Runtime settings for the relay process, loaded from env."""

    # YAML file holding the forwarding base URL and the named query-param sets.
    routing_config_path: str

    host: str
    port: int
    log_level: str


# PUBLIC_INTERFACE
def load_settings() -> RelaySettings:
    """Load RelaySettings from env vars, applying defaults and sane bounds."""
    routing_config_path = _env_str("RELAY_CONFIG_PATH", DEFAULT_ROUTING_CONFIG_PATH)
    host = _env_str("RELAY_HOST", "0.0.0.0")
    port = _clamp_int(_env_int("RELAY_PORT", 8080), 1, 65535)

    log_level = _env_str("RELAY_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        log_level = "INFO"

    logger.debug("Resolved relay settings path=%s host=%s port=%s", routing_config_path, host, port)

    return RelaySettings(
        routing_config_path=routing_config_path,
        host=host,
        port=port,
        log_level=log_level,
    )
