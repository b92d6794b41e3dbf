"""Offline backend that streams a deterministic reply."""

from __future__ import annotations

import re
import asyncio
from collections.abc import Sequence, AsyncIterator

from chat_gateway.protocol.history import ChatMessage

from .base import TextBackend

_WORD_RE = re.compile(r"\S+\s*")


def _last_user_message(history: Sequence[ChatMessage]) -> str:
    for msg in reversed(history):
        if msg.role == "user" and msg.content.strip():
            return msg.content.strip()
    return ""


class FakeBackend(TextBackend):
    """Echo-style backend for local development and tests.

    Replies word by word with `delay_s` between fragments. When `structured`
    is set the reply follows the tutor field layout.
    """

    name = "fake"
    requires_credential = False

    def __init__(self, *, delay_s: float = 0.05, structured: bool = False) -> None:
        self._delay_s = max(0.0, float(delay_s))
        self._structured = structured

    def is_configured(self) -> bool:
        return True

    def build_reply(self, history: Sequence[ChatMessage]) -> str:
        said = _last_user_message(history)
        reply = f"You said: {said}" if said else "Hello! What would you like to talk about?"
        if self._structured:
            return f"rating: 100; difficulty: 1; translations: []; text: {reply};"
        return reply

    async def stream(self, history: Sequence[ChatMessage]) -> AsyncIterator[str]:
        for fragment in _WORD_RE.findall(self.build_reply(history)):
            if self._delay_s:
                await asyncio.sleep(self._delay_s)
            else:
                await asyncio.sleep(0)
            yield fragment


__all__ = ["FakeBackend"]
