"""Exception types raised by the relay core and mapped to HTTP statuses by the routers."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all relay errors."""


class ConfigLoadError(RelayError):
    """Routing config file could not be turned into a usable config."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class ConfigReadError(ConfigLoadError):
    """Routing config file could not be read."""


class ConfigParseError(ConfigLoadError):
    """Routing config file is not valid YAML or has the wrong shape."""


class ConfigValidationError(ConfigLoadError):
    """Routing config parsed but misses a required key."""


class ConfigLookupError(RelayError):
    """A config name could not be resolved against the active routing config."""


class ConfigNotFoundError(ConfigLookupError):
    def __init__(self, name: str):
        super().__init__(f"config {name!r} not found")
        self.name = name


class ConfigNotLoadedError(ConfigLookupError):
    def __init__(self) -> None:
        super().__init__("routing config has not been loaded")


class SplitError(RelayError):
    """Alert payload does not carry a usable alerts list."""


class ForwardError(RelayError):
    """Transport-level failure while posting an alert group downstream."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url
