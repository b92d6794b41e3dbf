"""Per-connection liveness state."""

from __future__ import annotations

from enum import Enum


class ConnectionState(str, Enum):
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


__all__ = ["ConnectionState"]
