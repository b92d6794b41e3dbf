"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

SHOW_BACKEND_LOGS: bool = (os.getenv("SHOW_BACKEND_LOGS") or "").strip().lower() in {"1", "true", "yes"}

# Loggers that are chatty at INFO when the Gemini client is active.
NOISY_BACKEND_LOGGERS: tuple[str, ...] = ("google", "google_genai", "urllib3", "httpx", "httpcore")

__all__ = ["LOG_FORMAT", "LOG_LEVEL", "NOISY_BACKEND_LOGGERS", "SHOW_BACKEND_LOGS"]
