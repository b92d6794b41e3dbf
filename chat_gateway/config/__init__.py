"""Configuration module exports (env names and defaults only)."""

from .secrets import ENV_BACKEND_API_KEY
from .websocket import DEFAULT_WS_ENDPOINT_PATH
from .limits import DEFAULT_MAX_CONCURRENT_CONNECTIONS

__all__ = [
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_WS_ENDPOINT_PATH",
    "ENV_BACKEND_API_KEY",
]
