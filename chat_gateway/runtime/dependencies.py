"""Runtime dependency construction (backend adapter + admission control)."""

from __future__ import annotations

import logging

from chat_gateway.state import RuntimeDeps
from chat_gateway.backend.factory import build_stream_adapter
from chat_gateway.handlers.connections import ConnectionRegistry

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps() -> RuntimeDeps:
    settings = load_settings()

    adapter = build_stream_adapter(settings.backend, settings.speech)
    if adapter.backend.requires_credential and not adapter.backend.is_configured():
        # Not fatal: each chat request reports the missing credential.
        logger.warning("backend %s has no credential; chat requests will fail", adapter.backend.name)
    else:
        logger.info("backend: %s model=%s", adapter.backend.name, settings.backend.model)

    connections = ConnectionRegistry(max_connections=settings.limits.max_concurrent_connections)

    return RuntimeDeps(
        connections=connections,
        backend=adapter,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
