"""Backend construction from settings."""

from __future__ import annotations

from typing import Any

from chat_gateway.config.secrets import ENV_BACKEND_API_KEY
from chat_gateway.state.settings import SpeechSettings, BackendSettings
from chat_gateway.config.models import BACKEND_FAKE, REPLY_FORMAT_TUTOR

from .fake import FakeBackend
from .base import TextBackend, SpeechBackend
from .fake_speech import FakeSpeechBackend
from .gemini import GeminiBackend, build_client
from .gemini_speech import GeminiSpeechBackend
from .adapter import BackendStreamAdapter


def build_backend(settings: BackendSettings, *, client: Any = None) -> TextBackend:
    if settings.kind == BACKEND_FAKE:
        return FakeBackend(
            delay_s=settings.fake_delay_s,
            structured=settings.reply_format == REPLY_FORMAT_TUTOR,
        )
    return GeminiBackend(
        client=client,
        model=settings.model,
        max_output_tokens=settings.max_output_tokens,
        system_instruction=settings.system_instruction,
    )


def build_speech_backend(
    settings: BackendSettings,
    speech: SpeechSettings,
    *,
    client: Any = None,
) -> SpeechBackend:
    if settings.kind == BACKEND_FAKE:
        return FakeSpeechBackend(delay_s=settings.fake_delay_s)
    return GeminiSpeechBackend(client=client, model=speech.model, voice=speech.voice)


def build_stream_adapter(settings: BackendSettings, speech: SpeechSettings) -> BackendStreamAdapter:
    # Chat and speech share one SDK client.
    client = build_client(settings.api_key) if settings.kind != BACKEND_FAKE else None
    return BackendStreamAdapter(
        build_backend(settings, client=client),
        speech=build_speech_backend(settings, speech, client=client),
        missing_credential_message=f"{ENV_BACKEND_API_KEY} not set",
        fragment_timeout_s=settings.fragment_timeout_s,
    )


__all__ = ["build_backend", "build_speech_backend", "build_stream_adapter"]
