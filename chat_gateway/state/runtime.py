"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from chat_gateway.state.settings import AppSettings
    from chat_gateway.backend.adapter import BackendStreamAdapter
    from chat_gateway.handlers.connections import ConnectionRegistry


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionRegistry
    backend: BackendStreamAdapter
    settings: AppSettings

    async def shutdown(self) -> None:
        try:
            await self.connections.close_all()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
