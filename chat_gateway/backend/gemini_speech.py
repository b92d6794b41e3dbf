"""Google Gemini speech synthesis backend (streamed audio) using the google-genai SDK."""

from __future__ import annotations

import base64
import logging
from typing import Any
from collections.abc import AsyncIterator

from google.genai import types
from google.genai import errors as genai_errors

from chat_gateway.errors import BackendError
from chat_gateway.config.speech import TTS_AUDIO_MODALITY

from .base import SpeechBackend
from .gemini import map_api_error

logger = logging.getLogger(__name__)


def _audio_parts(chunk: Any) -> list[bytes]:
    candidates = getattr(chunk, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return []
    audio: list[bytes] = []
    for part in candidates[0].content.parts or []:
        inline = part.inline_data
        if inline is not None and inline.data:
            audio.append(inline.data)
    return audio


class GeminiSpeechBackend(SpeechBackend):
    name = "gemini-tts"
    requires_credential = True

    def __init__(self, *, client: Any, model: str, voice: str) -> None:
        self._client = client
        self._model = model
        self._config = types.GenerateContentConfig(
            candidate_count=1,
            response_modalities=[TTS_AUDIO_MODALITY],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                ),
            ),
        )
        logger.info("gemini speech backend: model=%s voice=%s", model, voice)

    def is_configured(self) -> bool:
        return self._client is not None

    async def synthesize(self, text: str) -> AsyncIterator[str]:
        try:
            response = await self._client.aio.models.generate_content_stream(
                model=self._model,
                contents=text,
                config=self._config,
            )
            produced = False
            async for chunk in response:
                for data in _audio_parts(chunk):
                    produced = True
                    yield base64.b64encode(data).decode("ascii")
            if not produced:
                raise BackendError("No audio chunk response")
        except genai_errors.APIError as exc:
            raise map_api_error(exc, service="Gemini TTS") from exc


__all__ = ["GeminiSpeechBackend"]
