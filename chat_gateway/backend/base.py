"""Backend interfaces: conversation history or text in, lazy fragments out."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence, AsyncIterator

from chat_gateway.protocol.history import ChatMessage


class TextBackend(ABC):
    name: str = "backend"
    requires_credential: bool = True

    @abstractmethod
    def is_configured(self) -> bool:
        """Return False when a required credential is missing."""

    @abstractmethod
    def stream(self, history: Sequence[ChatMessage]) -> AsyncIterator[str]:
        """Return an async iterator over generated text fragments."""


class SpeechBackend(ABC):
    name: str = "speech"
    requires_credential: bool = True

    @abstractmethod
    def is_configured(self) -> bool:
        """Return False when a required credential is missing."""

    @abstractmethod
    def synthesize(self, text: str) -> AsyncIterator[str]:
        """Return an async iterator over base64-encoded audio chunks."""


__all__ = ["SpeechBackend", "TextBackend"]
