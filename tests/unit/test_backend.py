from __future__ import annotations

import base64
import dataclasses
from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from chat_gateway.protocol import ChatMessage
from chat_gateway.backend.fake import FakeBackend
from chat_gateway.backend.fake_speech import FakeSpeechBackend
from chat_gateway.backend.gemini_speech import GeminiSpeechBackend
from chat_gateway.errors import BackendError, BackendNotConfiguredError
from chat_gateway.backend.gemini import GeminiBackend, build_client, to_gemini_contents
from chat_gateway.backend.factory import build_backend, build_stream_adapter, build_speech_backend
from tests.fakes import make_settings

HISTORY = [
    ChatMessage(role="user", content="hola"),
    ChatMessage(role="assistant", content="¡hola!"),
    ChatMessage(role="user", content="¿qué tal?"),
]


def _text_chunk(text: str | None) -> SimpleNamespace:
    return SimpleNamespace(text=text)


def _audio_chunk(*payloads: bytes) -> SimpleNamespace:
    parts = [SimpleNamespace(inline_data=SimpleNamespace(data=p, mime_type="audio/L16;rate=24000")) for p in payloads]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


def _api_error(code: int, message: str) -> genai_errors.APIError:
    body = {"error": {"code": code, "message": message, "status": "ERROR"}}
    if code >= 500:
        return genai_errors.ServerError(code, body)
    return genai_errors.ClientError(code, body)


class _Stream:
    def __init__(self, chunks: list[SimpleNamespace], error: Exception | None = None) -> None:
        self._chunks = chunks
        self._error = error

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error


class _Models:
    def __init__(self, stream: _Stream) -> None:
        self._stream = stream
        self.calls: list[dict] = []

    async def generate_content_stream(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        return self._stream


class _Client:
    def __init__(self, stream: _Stream) -> None:
        self.models = _Models(stream)
        self.aio = SimpleNamespace(models=self.models)


async def _drain(backend, history=HISTORY) -> list[str]:
    return [fragment async for fragment in backend.stream(history)]


async def _drain_speech(backend, text: str = "Hola amigo.") -> list[str]:
    return [chunk async for chunk in backend.synthesize(text)]


def test_to_gemini_contents_maps_roles() -> None:
    contents = to_gemini_contents(HISTORY)
    assert [(c.role, c.parts[0].text) for c in contents] == [
        ("user", "hola"),
        ("model", "¡hola!"),
        ("user", "¿qué tal?"),
    ]


def test_build_client_requires_a_key() -> None:
    assert build_client("") is None


@pytest.mark.asyncio
async def test_gemini_backend_streams_text_chunks() -> None:
    client = _Client(_Stream([_text_chunk("Hola"), _text_chunk(None), _text_chunk(" amigo")]))
    backend = GeminiBackend(client=client, model="gemini-test", max_output_tokens=10, system_instruction="Be kind.")

    assert backend.is_configured()
    assert await _drain(backend) == ["Hola", " amigo"]
    call = client.models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["config"].system_instruction == "Be kind."
    assert call["config"].max_output_tokens == 10
    assert call["contents"][1].role == "model"


@pytest.mark.asyncio
async def test_gemini_backend_without_text_is_an_error() -> None:
    backend = GeminiBackend(client=_Client(_Stream([_text_chunk(None)])), model="gemini-test", max_output_tokens=10)

    with pytest.raises(BackendError, match="No text chunk response"):
        await _drain(backend)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "message"),
    [
        (_api_error(401, "bad key"), "Invalid Gemini API key"),
        (_api_error(403, "denied"), "Invalid Gemini API key"),
        (_api_error(400, "API key not valid. Please pass a valid API key."), "Invalid Gemini API key"),
        (_api_error(429, "quota"), "Gemini rate limit exceeded"),
        (_api_error(500, "boom"), "Gemini API error"),
    ],
)
async def test_gemini_backend_maps_api_errors(error: Exception, message: str) -> None:
    client = _Client(_Stream([_text_chunk("partial")], error=error))
    backend = GeminiBackend(client=client, model="gemini-test", max_output_tokens=10)

    with pytest.raises(BackendError) as exc:
        await _drain(backend)
    assert str(exc.value).startswith(message)


@pytest.mark.asyncio
async def test_gemini_speech_streams_base64_audio() -> None:
    client = _Client(_Stream([_audio_chunk(b"\x00\x01", b"\x02"), _text_chunk(None), _audio_chunk(b"\x03")]))
    backend = GeminiSpeechBackend(client=client, model="tts-test", voice="Charon")

    chunks = await _drain_speech(backend)
    assert [base64.b64decode(c) for c in chunks] == [b"\x00\x01", b"\x02", b"\x03"]
    call = client.models.calls[0]
    assert call["model"] == "tts-test"
    assert call["contents"] == "Hola amigo."
    assert call["config"].response_modalities == ["AUDIO"]
    assert call["config"].speech_config.voice_config.prebuilt_voice_config.voice_name == "Charon"


@pytest.mark.asyncio
async def test_gemini_speech_without_audio_is_an_error() -> None:
    backend = GeminiSpeechBackend(client=_Client(_Stream([_text_chunk(None)])), model="tts-test", voice="Charon")

    with pytest.raises(BackendError, match="No audio chunk response"):
        await _drain_speech(backend)


@pytest.mark.asyncio
async def test_gemini_speech_maps_rate_limit() -> None:
    client = _Client(_Stream([], error=_api_error(429, "quota")))
    backend = GeminiSpeechBackend(client=client, model="tts-test", voice="Charon")

    with pytest.raises(BackendError, match="Gemini TTS rate limit exceeded"):
        await _drain_speech(backend)


@pytest.mark.asyncio
async def test_fake_backend_echoes_last_user_message() -> None:
    fragments = await _drain(FakeBackend(delay_s=0.0))
    assert "".join(fragments) == "You said: ¿qué tal?"
    assert len(fragments) > 1


@pytest.mark.asyncio
async def test_fake_backend_structured_reply() -> None:
    fragments = await _drain(FakeBackend(delay_s=0.0, structured=True), [])
    reply = "".join(fragments)
    assert reply.startswith("rating: 100; difficulty: 1; translations: []; text: ")
    assert reply.endswith(";")


@pytest.mark.asyncio
async def test_fake_speech_backend_streams_one_chunk_per_word() -> None:
    chunks = await _drain_speech(FakeSpeechBackend(delay_s=0.0), "Hola amigo.")
    assert b"".join(base64.b64decode(c) for c in chunks) == b"Hola amigo. "
    assert len(chunks) == 2


def test_factory_builds_fake_backends() -> None:
    settings = make_settings()
    backend = build_backend(settings.backend)
    speech = build_speech_backend(settings.backend, settings.speech)
    assert isinstance(backend, FakeBackend)
    assert isinstance(speech, FakeSpeechBackend)
    assert backend.is_configured()
    assert speech.is_configured()


def test_gemini_adapter_reports_missing_credential() -> None:
    settings = make_settings()
    adapter = build_stream_adapter(dataclasses.replace(settings.backend, kind="gemini"), settings.speech)

    assert isinstance(adapter.backend, GeminiBackend)
    assert isinstance(adapter.speech, GeminiSpeechBackend)
    with pytest.raises(BackendNotConfiguredError, match="GOOGLE_GENERATIVE_AI_API_KEY not set"):
        adapter.ensure_configured()
    with pytest.raises(BackendNotConfiguredError, match="GOOGLE_GENERATIVE_AI_API_KEY not set"):
        adapter.start_speech("hola")
