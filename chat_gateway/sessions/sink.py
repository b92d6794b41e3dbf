"""Outbound frame sink interface used by request sessions."""

from __future__ import annotations

from typing import Protocol
from collections.abc import Callable

from chat_gateway.protocol.frame import Frame


class FrameSink(Protocol):
    async def send(self, frame: Frame, *, guard: Callable[[], bool] | None = None) -> bool:
        """Write a frame; when `guard` is given it is checked right before the write."""
        ...


__all__ = ["FrameSink"]
