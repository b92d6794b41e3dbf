"""Backend stream adapter: wraps text and speech backends as cancellable stream handles."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence, AsyncIterator

from chat_gateway.protocol.history import ChatMessage
from chat_gateway.errors import BackendError, BackendNotConfiguredError

from .handle import StreamHandle
from .base import TextBackend, SpeechBackend

logger = logging.getLogger(__name__)


class BackendStreamAdapter:
    def __init__(
        self,
        backend: TextBackend,
        *,
        speech: SpeechBackend | None = None,
        missing_credential_message: str,
        fragment_timeout_s: float = 0.0,
    ) -> None:
        self._backend = backend
        self._speech = speech
        self._missing_credential_message = missing_credential_message
        self._fragment_timeout_s = fragment_timeout_s

    @property
    def backend(self) -> TextBackend:
        return self._backend

    @property
    def speech(self) -> SpeechBackend | None:
        return self._speech

    def _ensure(self, backend: TextBackend | SpeechBackend) -> None:
        if backend.requires_credential and not backend.is_configured():
            raise BackendNotConfiguredError(self._missing_credential_message)

    def ensure_configured(self) -> None:
        self._ensure(self._backend)

    def _open(self, open_source: Callable[[], AsyncIterator[str]]) -> StreamHandle:
        try:
            source = open_source()
        except BackendError:
            raise
        except Exception as exc:
            raise BackendError(str(exc) or "Error generating response") from exc
        return StreamHandle(source, fragment_timeout_s=self._fragment_timeout_s)

    def start(self, history: Sequence[ChatMessage]) -> StreamHandle:
        """Begin generation; must be called from a running event loop."""
        self._ensure(self._backend)
        messages = list(history)
        return self._open(lambda: self._backend.stream(messages))

    def start_speech(self, text: str) -> StreamHandle:
        """Begin audio synthesis of `text`; fragments are base64 audio chunks."""
        speech = self._speech
        if speech is None:
            raise BackendError("Speech synthesis is not available")
        self._ensure(speech)
        return self._open(lambda: speech.synthesize(text))


__all__ = ["BackendStreamAdapter"]
