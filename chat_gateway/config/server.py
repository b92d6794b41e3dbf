"""HTTP server bind configuration for `python -m chat_gateway`."""

from __future__ import annotations

import os

HOST: str = (os.getenv("HOST") or "").strip() or "0.0.0.0"

_PORT_RAW = (os.getenv("PORT") or os.getenv("WS_PORT") or "").strip()
try:
    PORT: int = int(_PORT_RAW) if _PORT_RAW else 3001
except Exception:
    PORT = 3001

__all__ = ["HOST", "PORT"]
