from __future__ import annotations

import base64
import asyncio

import pytest

from chat_gateway.errors import BackendError
from chat_gateway.sessions import SpeechSession
from chat_gateway.state.request import RequestState
from tests.fakes import (
    MISSING_KEY_MESSAGE,
    RecordingSink,
    ScriptedBackend,
    ScriptedSpeechBackend,
    wait_until,
    make_adapter,
)


def _session(speech: ScriptedSpeechBackend, sink: RecordingSink, *, parent: object = "chat-1") -> SpeechSession:
    return SpeechSession(
        "t1",
        "Hola amigo.",
        adapter=make_adapter(ScriptedBackend(), speech),
        sink=sink,
        parent_request_id=parent,
    )


@pytest.mark.asyncio
async def test_speech_streams_audio_then_completes() -> None:
    sink = RecordingSink()
    speech = ScriptedSpeechBackend([b"pcm-0", b"pcm-1"])
    session = _session(speech, sink)
    await session.start()

    assert sink.kinds() == ["tts_stream_start", "tts_stream_chunk", "tts_stream_chunk", "tts_stream_complete"]
    chunks = [f for f in sink.frames if f.kind.value == "tts_stream_chunk"]
    assert [c.get("chunkIndex") for c in chunks] == [0, 1]
    assert [base64.b64decode(c.get("content")) for c in chunks] == [b"pcm-0", b"pcm-1"]
    complete = sink.frames[-1]
    assert base64.b64decode(complete.get("content")) == b"pcm-0pcm-1"
    assert complete.get("totalChunks") == 2
    assert complete.get("finish_reason") == "stop"
    assert all(f.request_id == "t1" for f in sink.frames)
    assert all(f.get("parentRequestId") == "chat-1" for f in sink.frames)
    assert speech.texts == ["Hola amigo."]
    assert session.audio == b"pcm-0pcm-1"
    assert session.state is RequestState.COMPLETED


@pytest.mark.asyncio
async def test_speech_without_parent_omits_the_field() -> None:
    sink = RecordingSink()
    await _session(ScriptedSpeechBackend([b"x"]), sink, parent=None).start()

    assert all("parentRequestId" not in f.fields for f in sink.frames)


@pytest.mark.asyncio
async def test_speech_backend_error_is_a_tts_error() -> None:
    sink = RecordingSink()
    speech = ScriptedSpeechBackend([b"pcm-0"], error=BackendError("Gemini TTS rate limit exceeded"))
    session = _session(speech, sink)
    await session.start()

    assert sink.kinds() == ["tts_stream_start", "tts_stream_chunk", "tts_error"]
    err = sink.frames[-1]
    assert err.get("error") == "Gemini TTS rate limit exceeded"
    assert err.get("code") == "backend_error"
    assert err.get("parentRequestId") == "chat-1"
    assert session.state is RequestState.FAILED


@pytest.mark.asyncio
async def test_speech_missing_credential_never_calls_backend() -> None:
    sink = RecordingSink()
    speech = ScriptedSpeechBackend(configured=False, requires_credential=True)
    await _session(speech, sink).start()

    assert sink.kinds() == ["tts_error"]
    assert sink.frames[0].get("error") == MISSING_KEY_MESSAGE
    assert sink.frames[0].get("code") == "backend_not_configured"
    assert speech.texts == []


@pytest.mark.asyncio
async def test_speech_cancel_stops_chunks_and_closes_source() -> None:
    sink = RecordingSink()
    gate = asyncio.Event()
    speech = ScriptedSpeechBackend([b"pcm-0", b"pcm-1"], gate=gate)
    session = _session(speech, sink)
    task = session.start()

    await wait_until(lambda: "tts_stream_chunk" in sink.kinds())
    assert await session.cancel() is True
    gate.set()
    await task

    assert sink.kinds() == ["tts_stream_start", "tts_stream_chunk", "request_cancelled"]
    assert session.state is RequestState.CANCELLED
    # The session task finishes only after the backend source is closed.
    assert speech.closed == 1
