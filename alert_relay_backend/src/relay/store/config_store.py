from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Condition, Lock
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional

import yaml

from src.relay.errors import (
    ConfigNotFoundError,
    ConfigNotLoadedError,
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
)

logger = logging.getLogger(__name__)

# Top-level keys of the routing config YAML document.
BASE_URL_KEY = "prometheusAlertUrl"
ENTRIES_KEY = "config"


class ReadWriteLock:
    """
    Reader/writer lock: many concurrent readers, one exclusive writer.

    Waiting writers block new readers so a reload is not starved by a steady
    stream of requests.
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


@dataclass(frozen=True)
class RoutingConfig:
    """Immutable routing config: forwarding base URL plus named query-param sets."""

    base_url: str
    entries: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def names(self) -> List[str]:
        return sorted(self.entries)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_routing_config(raw: str, path: str = "<string>") -> RoutingConfig:
    """
    Parse and validate routing config YAML text.

    Raises ConfigParseError for malformed YAML or a wrong document shape and
    ConfigValidationError when the base URL or the entries mapping is missing.
    """
    try:
        doc = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"failed to parse config file: {e}", path) from e

    if doc is None:
        doc = {}
    if not isinstance(doc, dict):
        raise ConfigParseError("failed to parse config file: top-level document must be a mapping", path)

    base_url = doc.get(BASE_URL_KEY)
    if base_url is not None and not isinstance(base_url, str):
        raise ConfigParseError(f"failed to parse config file: {BASE_URL_KEY} must be a string", path)

    raw_entries = doc.get(ENTRIES_KEY)
    if raw_entries is not None and not isinstance(raw_entries, dict):
        raise ConfigParseError(f"failed to parse config file: {ENTRIES_KEY} must be a mapping", path)

    if not (base_url or "").strip() or raw_entries is None:
        raise ConfigValidationError("missing required keys in config", path)

    entries: Dict[str, Mapping[str, str]] = {}
    for name, params in raw_entries.items():
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ConfigParseError(f"failed to parse config file: entry {name!r} must be a mapping", path)
        entries[str(name)] = MappingProxyType({str(k): _stringify(v) for k, v in params.items()})

    return RoutingConfig(base_url=base_url.strip(), entries=MappingProxyType(entries))


class ConfigStore:
    """
    Holder of the active routing config.

    - load() reads and validates the file outside the lock, then swaps the whole
      config under the exclusive lock; a failed load leaves the active config as is.
    - get()/get_base_url()/snapshot() run under the shared lock.
    """

    def __init__(self, path: str, lock: Optional[ReadWriteLock] = None):
        self._path = path
        self._lock = lock or ReadWriteLock()
        self._config: Optional[RoutingConfig] = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def loaded(self) -> bool:
        with self._lock.read_locked():
            return self._config is not None

    # PUBLIC_INTERFACE
    def load(self, path: Optional[str] = None) -> RoutingConfig:
        """Read, validate and atomically activate the routing config at path (defaults to the store path)."""
        target = path or self._path
        logger.info("Loading routing config from %s", target)
        try:
            with open(target, "r", encoding="utf-8") as fh:
                raw = fh.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigReadError(f"failed to read config file: {e}", target) from e

        candidate = parse_routing_config(raw, target)

        with self._lock.write_locked():
            self._config = candidate

        logger.info("Routing config reloaded with %d entries", len(candidate.entries))
        return candidate

    # PUBLIC_INTERFACE
    def snapshot(self) -> RoutingConfig:
        """Return the active config; raises ConfigNotLoadedError before the first load."""
        with self._lock.read_locked():
            if self._config is None:
                raise ConfigNotLoadedError()
            return self._config

    # PUBLIC_INTERFACE
    def get(self, name: str) -> Dict[str, str]:
        """Return a copy of the query params for config name; raises ConfigNotFoundError."""
        cfg = self.snapshot()
        params = cfg.entries.get(name)
        if params is None:
            raise ConfigNotFoundError(name)
        return dict(params)

    # PUBLIC_INTERFACE
    def get_base_url(self) -> str:
        """Return the forwarding base URL of the active config."""
        return self.snapshot().base_url
