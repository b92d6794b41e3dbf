"""Gateway-wide connection registry and admission control."""

from __future__ import annotations

import uuid
import asyncio
import logging
import contextlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chat_gateway.handlers.websocket.connection import ChatConnection

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Tracks live connections by id; the only state shared across connections."""

    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: dict[str, ChatConnection | None] = {}

    async def reserve(self) -> str | None:
        """Admit a new connection (before accepting it); None when at capacity."""
        async with self._lock:
            if len(self._active) >= self._max:
                return None
            connection_id = uuid.uuid4().hex
            self._active[connection_id] = None
            return connection_id

    async def attach(self, connection_id: str, connection: ChatConnection) -> None:
        async with self._lock:
            self._active[connection_id] = connection

    async def release(self, connection_id: str) -> None:
        async with self._lock:
            self._active.pop(connection_id, None)

    def get_connection_count(self) -> int:
        return len(self._active)

    async def close_all(self) -> None:
        async with self._lock:
            connections = [c for c in self._active.values() if c is not None]
        for connection in connections:
            with contextlib.suppress(Exception):
                await connection.close(going_away=True)
        if connections:
            logger.info("closed %s connection(s) on shutdown", len(connections))


__all__ = ["ConnectionRegistry"]
