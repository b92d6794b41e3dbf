"""Serialized frame writer shared by everything that talks on one connection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from fastapi import WebSocket

from chat_gateway.protocol import Frame, encode

from .errors import safe_send_text

logger = logging.getLogger(__name__)


class FrameWriter:
    """Writes whole frames one at a time.

    Frames from concurrent request sessions, the heartbeat and the message
    loop never interleave. A failed write marks the writer broken and every
    later send becomes a no-op returning False.
    """

    def __init__(self, ws: WebSocket, *, is_open: Callable[[], bool] | None = None) -> None:
        self._ws = ws
        self._is_open = is_open or (lambda: True)
        self._lock = asyncio.Lock()
        self._broken = False

    @property
    def broken(self) -> bool:
        return self._broken

    async def send(self, frame: Frame, *, guard: Callable[[], bool] | None = None) -> bool:
        async with self._lock:
            if self._broken or not self._is_open():
                return False
            # Checked under the lock so a cancel that lands while this frame
            # was queued still suppresses it.
            if guard is not None and not guard():
                return False
            if not await safe_send_text(self._ws, encode(frame)):
                self._broken = True
                return False
            return True


__all__ = ["FrameWriter"]
