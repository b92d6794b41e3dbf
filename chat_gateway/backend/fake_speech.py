"""Offline speech backend that streams deterministic audio bytes."""

from __future__ import annotations

import base64
import asyncio
from collections.abc import AsyncIterator

from .base import SpeechBackend


class FakeSpeechBackend(SpeechBackend):
    """Streams one base64 chunk per word; the audio bytes are the UTF-8 text."""

    name = "fake-tts"
    requires_credential = False

    def __init__(self, *, delay_s: float = 0.05) -> None:
        self._delay_s = max(0.0, float(delay_s))

    def is_configured(self) -> bool:
        return True

    async def synthesize(self, text: str) -> AsyncIterator[str]:
        for word in text.split():
            await asyncio.sleep(self._delay_s)
            yield base64.b64encode(f"{word} ".encode("utf-8")).decode("ascii")


__all__ = ["FakeSpeechBackend"]
