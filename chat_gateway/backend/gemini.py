"""Google Gemini text backend using the google-genai SDK."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Sequence, AsyncIterator

from google import genai
from google.genai import types
from google.genai import errors as genai_errors

from chat_gateway.errors import BackendError
from chat_gateway.protocol.history import ChatMessage

from .base import TextBackend

logger = logging.getLogger(__name__)

_AUTH_ERROR_CODES = frozenset({401, 403})
_RATE_LIMIT_CODE = 429


def build_client(api_key: str) -> genai.Client | None:
    """One SDK client per process; None when the credential is missing."""
    if not api_key:
        return None
    return genai.Client(api_key=api_key)


def to_gemini_contents(history: Sequence[ChatMessage]) -> list[types.Content]:
    return [
        types.Content(
            role="model" if msg.role == "assistant" else "user",
            parts=[types.Part(text=msg.content)],
        )
        for msg in history
    ]


def map_api_error(exc: genai_errors.APIError, *, service: str = "Gemini") -> BackendError:
    message = getattr(exc, "message", None) or str(exc)
    # An invalid key comes back as 400 INVALID_ARGUMENT with an "API key" message.
    if exc.code in _AUTH_ERROR_CODES or (exc.code == 400 and "API key" in message):
        logger.error("%s authentication failed: %s", service, message)
        return BackendError(f"Invalid {service} API key")
    if exc.code == _RATE_LIMIT_CODE:
        logger.warning("%s rate limit exceeded: %s", service, message)
        return BackendError(f"{service} rate limit exceeded")
    logger.error("%s api error code=%s: %s", service, exc.code, message)
    return BackendError(f"{service} API error: {message}")


class GeminiBackend(TextBackend):
    name = "gemini"
    requires_credential = True

    def __init__(
        self,
        *,
        client: Any,
        model: str,
        max_output_tokens: int,
        system_instruction: str = "",
    ) -> None:
        self._client = client
        self._model = model
        self._config = types.GenerateContentConfig(
            candidate_count=1,
            max_output_tokens=max_output_tokens,
            response_mime_type="text/plain",
            system_instruction=system_instruction or None,
        )
        logger.info("gemini backend: model=%s configured=%s", model, client is not None)

    def is_configured(self) -> bool:
        return self._client is not None

    async def stream(self, history: Sequence[ChatMessage]) -> AsyncIterator[str]:
        try:
            response = await self._client.aio.models.generate_content_stream(
                model=self._model,
                contents=to_gemini_contents(history),
                config=self._config,
            )
            produced = False
            async for chunk in response:
                # `.text` is None for chunks without text parts (e.g. a trailing usage chunk).
                text = chunk.text or ""
                if not text:
                    continue
                produced = True
                yield text
            if not produced:
                raise BackendError("No text chunk response")
        except genai_errors.APIError as exc:
            raise map_api_error(exc) from exc


__all__ = ["GeminiBackend", "build_client", "map_api_error", "to_gemini_contents"]
