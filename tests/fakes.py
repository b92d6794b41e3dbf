"""In-memory fakes shared by the unit tests."""

from __future__ import annotations

import base64
import asyncio
from typing import Any
from collections.abc import Callable, Sequence, AsyncIterator

import orjson

from chat_gateway.protocol import Frame, ChatMessage
from chat_gateway.state.runtime import RuntimeDeps
from chat_gateway.backend.adapter import BackendStreamAdapter
from chat_gateway.backend.fake_speech import FakeSpeechBackend
from chat_gateway.backend.base import TextBackend, SpeechBackend
from chat_gateway.handlers.connections import ConnectionRegistry
from chat_gateway.state.settings import (
    AppSettings,
    SpeechSettings,
    LimitsSettings,
    BackendSettings,
    WebSocketSettings,
)

RFC_SAMPLE_KEY = "dGhlIHNhbXBsZSBub25jZQ=="
MISSING_KEY_MESSAGE = "GOOGLE_GENERATIVE_AI_API_KEY not set"


def make_settings(
    *,
    reply_format: str = "plain",
    max_connections: int = 10,
    max_requests: int = 16,
    max_messages: int = 600,
    max_cancels: int = 100,
    heartbeat_interval_s: float = 0.0,
    idle_timeout_s: float = 0.0,
    watchdog_tick_s: float = 5.0,
    full_length_speech: bool = False,
) -> AppSettings:
    return AppSettings(
        backend=BackendSettings(
            kind="fake",
            api_key="",
            model="test-model",
            max_output_tokens=350,
            system_instruction="",
            reply_format=reply_format,
            fragment_timeout_s=0.0,
            fake_delay_s=0.0,
        ),
        speech=SpeechSettings(model="test-tts", voice="Charon", full_length=full_length_speech),
        limits=LimitsSettings(
            max_concurrent_connections=max_connections,
            max_requests_per_connection=max_requests,
            ws_message_window_seconds=60.0,
            ws_max_messages_per_window=max_messages,
            ws_cancel_window_seconds=60.0,
            ws_max_cancels_per_window=max_cancels,
        ),
        websocket=WebSocketSettings(
            endpoint_path="/api/chat/websocket",
            heartbeat_interval_s=heartbeat_interval_s,
            idle_timeout_s=idle_timeout_s,
            watchdog_tick_s=watchdog_tick_s,
            max_connection_duration_s=0.0,
        ),
    )


def make_adapter(backend: TextBackend, speech: SpeechBackend | None = None) -> BackendStreamAdapter:
    return BackendStreamAdapter(
        backend,
        speech=speech if speech is not None else FakeSpeechBackend(delay_s=0.0),
        missing_credential_message=MISSING_KEY_MESSAGE,
    )


def make_deps(
    backend: TextBackend,
    settings: AppSettings | None = None,
    *,
    speech: SpeechBackend | None = None,
) -> RuntimeDeps:
    settings = settings or make_settings()
    return RuntimeDeps(
        connections=ConnectionRegistry(max_connections=settings.limits.max_concurrent_connections),
        backend=make_adapter(backend, speech),
        settings=settings,
    )


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout=timeout)


class ScriptedBackend(TextBackend):
    """Yields a fixed list of fragments.

    With `gate`, the stream parks after its first fragment until the gate is
    set. With `error`, the exception is raised once the fragments run out.
    """

    name = "scripted"

    def __init__(
        self,
        fragments: Sequence[str] = (),
        *,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
        delay_s: float = 0.0,
        configured: bool = True,
        requires_credential: bool = False,
    ) -> None:
        self.fragments = list(fragments)
        self.error = error
        self.gate = gate
        self.delay_s = delay_s
        self.configured = configured
        self.requires_credential = requires_credential
        self.calls = 0
        self.closed = 0
        self.histories: list[list[ChatMessage]] = []

    def is_configured(self) -> bool:
        return self.configured

    async def stream(self, history: Sequence[ChatMessage]) -> AsyncIterator[str]:
        self.calls += 1
        self.histories.append(list(history))
        try:
            for idx, fragment in enumerate(self.fragments):
                await asyncio.sleep(self.delay_s)
                yield fragment
                if self.gate is not None and idx == 0:
                    await self.gate.wait()
            if self.error is not None:
                raise self.error
        finally:
            self.closed += 1


class ScriptedSpeechBackend(SpeechBackend):
    """Yields each audio payload base64-encoded; `gate` parks after the first chunk."""

    name = "scripted-tts"

    def __init__(
        self,
        audio: Sequence[bytes] = (b"pcm-0", b"pcm-1"),
        *,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
        configured: bool = True,
        requires_credential: bool = False,
    ) -> None:
        self.audio = list(audio)
        self.error = error
        self.gate = gate
        self.configured = configured
        self.requires_credential = requires_credential
        self.texts: list[str] = []
        self.closed = 0

    def is_configured(self) -> bool:
        return self.configured

    async def synthesize(self, text: str) -> AsyncIterator[str]:
        self.texts.append(text)
        try:
            for idx, payload in enumerate(self.audio):
                await asyncio.sleep(0)
                yield base64.b64encode(payload).decode("ascii")
                if self.gate is not None and idx == 0:
                    await self.gate.wait()
            if self.error is not None:
                raise self.error
        finally:
            self.closed += 1


class RecordingSink:
    def __init__(self) -> None:
        self.frames: list[Frame] = []

    async def send(self, frame: Frame, *, guard: Callable[[], bool] | None = None) -> bool:
        if guard is not None and not guard():
            return False
        self.frames.append(frame)
        return True

    def kinds(self) -> list[str]:
        return [f.kind.value for f in self.frames]


class FakeWebSocket:
    """Starlette-shaped WebSocket driven by an in-memory inbox."""

    def __init__(self, headers: dict[str, str] | None = None) -> None:
        self.headers = (
            headers
            if headers is not None
            else {"sec-websocket-key": RFC_SAMPLE_KEY, "sec-websocket-version": "13"}
        )
        self.sent: list[dict[str, Any]] = []
        self.accepted = False
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self.closed = asyncio.Event()
        self.fail_sends = False
        self._inbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, text: str) -> None:
        if self.fail_sends:
            raise RuntimeError("socket is gone")
        self.sent.append(orjson.loads(text))

    async def receive(self) -> dict[str, Any]:
        return await self._inbox.get()

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.close_code = code
        self.close_reason = reason or ""
        self.closed.set()
        self._inbox.put_nowait({"type": "websocket.disconnect", "code": code})

    def push(self, payload: Any) -> None:
        text = payload if isinstance(payload, str) else orjson.dumps(payload).decode("utf-8")
        self._inbox.put_nowait({"type": "websocket.receive", "text": text})

    def disconnect(self, code: int = 1000) -> None:
        self._inbox.put_nowait({"type": "websocket.disconnect", "code": code})

    def frames(self, msg_type: str | None = None, request_id: Any = None) -> list[dict[str, Any]]:
        return [
            f
            for f in self.sent
            if (msg_type is None or f.get("type") == msg_type)
            and (request_id is None or f.get("requestId") == request_id)
        ]

    async def wait_for_frame(
        self,
        msg_type: str,
        request_id: Any = None,
        *,
        timeout: float = 2.0,
    ) -> dict[str, Any]:
        await wait_until(lambda: bool(self.frames(msg_type, request_id)), timeout=timeout)
        return self.frames(msg_type, request_id)[0]


__all__ = [
    "FakeWebSocket",
    "MISSING_KEY_MESSAGE",
    "RFC_SAMPLE_KEY",
    "RecordingSink",
    "ScriptedBackend",
    "ScriptedSpeechBackend",
    "make_adapter",
    "make_deps",
    "make_settings",
    "wait_until",
]
