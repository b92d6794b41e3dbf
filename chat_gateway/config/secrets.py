"""Secrets configuration."""

from __future__ import annotations

import os

ENV_BACKEND_API_KEY = "GOOGLE_GENERATIVE_AI_API_KEY"


def get_backend_api_key() -> str:
    return (os.getenv(ENV_BACKEND_API_KEY) or "").strip()


__all__ = ["ENV_BACKEND_API_KEY", "get_backend_api_key"]
