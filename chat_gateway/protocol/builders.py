"""Constructors for outbound frames."""

from __future__ import annotations

import time
from typing import Any

from chat_gateway.config.websocket import (
    WS_KEY_CODE,
    WS_KEY_ERROR,
    WS_KEY_CONTENT,
    WS_KEY_TIMESTAMP,
    WS_KEY_FINISH_REASON,
    WS_FINISH_REASON_STOP,
    WS_KEY_PARENT_REQUEST_ID,
)

from .kinds import FrameKind
from .frame import Frame, RequestId


def now_ms() -> int:
    """Wall-clock timestamp in epoch milliseconds."""
    return int(time.time() * 1000)


def connection_established(connection_id: str, *, timestamp: int | None = None) -> Frame:
    return Frame(
        kind=FrameKind.CONNECTION_ESTABLISHED,
        fields={
            "message": "WebSocket connection established successfully",
            "connectionId": connection_id,
            WS_KEY_TIMESTAMP: now_ms() if timestamp is None else timestamp,
        },
    )


def stream_start(request_id: RequestId) -> Frame:
    return Frame(
        kind=FrameKind.STREAM_START,
        request_id=request_id,
        fields={"message": "Starting to generate response"},
    )


def stream_chunk(request_id: RequestId, content: str, *, chunk_index: int) -> Frame:
    return Frame(
        kind=FrameKind.STREAM_CHUNK,
        request_id=request_id,
        fields={
            WS_KEY_CONTENT: content,
            WS_KEY_FINISH_REASON: None,
            "chunkIndex": chunk_index,
        },
    )


def stream_complete(
    request_id: RequestId,
    content: str,
    *,
    total_chunks: int,
    parsed: dict[str, Any] | None = None,
) -> Frame:
    fields: dict[str, Any] = {
        WS_KEY_CONTENT: content,
        WS_KEY_FINISH_REASON: WS_FINISH_REASON_STOP,
        "totalChunks": total_chunks,
    }
    if parsed is not None:
        fields["parsed"] = parsed
    return Frame(kind=FrameKind.STREAM_COMPLETE, request_id=request_id, fields=fields)


def _with_parent(fields: dict[str, Any], parent_request_id: RequestId | None) -> dict[str, Any]:
    if parent_request_id is not None:
        fields[WS_KEY_PARENT_REQUEST_ID] = parent_request_id
    return fields


def tts_stream_start(request_id: RequestId, *, parent_request_id: RequestId | None = None) -> Frame:
    return Frame(
        kind=FrameKind.TTS_STREAM_START,
        request_id=request_id,
        fields=_with_parent({"message": "Starting TTS generation"}, parent_request_id),
    )


def tts_stream_chunk(
    request_id: RequestId,
    audio_b64: str,
    *,
    chunk_index: int,
    parent_request_id: RequestId | None = None,
) -> Frame:
    fields: dict[str, Any] = {
        WS_KEY_CONTENT: audio_b64,
        WS_KEY_FINISH_REASON: None,
        "chunkIndex": chunk_index,
    }
    return Frame(
        kind=FrameKind.TTS_STREAM_CHUNK,
        request_id=request_id,
        fields=_with_parent(fields, parent_request_id),
    )


def tts_stream_complete(
    request_id: RequestId,
    audio_b64: str,
    *,
    total_chunks: int,
    parent_request_id: RequestId | None = None,
) -> Frame:
    fields: dict[str, Any] = {
        WS_KEY_CONTENT: audio_b64,
        WS_KEY_FINISH_REASON: WS_FINISH_REASON_STOP,
        "totalChunks": total_chunks,
    }
    return Frame(
        kind=FrameKind.TTS_STREAM_COMPLETE,
        request_id=request_id,
        fields=_with_parent(fields, parent_request_id),
    )


def tts_error(
    message: str,
    *,
    code: str,
    request_id: RequestId,
    parent_request_id: RequestId | None = None,
) -> Frame:
    return Frame(
        kind=FrameKind.TTS_ERROR,
        request_id=request_id,
        fields=_with_parent({WS_KEY_ERROR: message, WS_KEY_CODE: code}, parent_request_id),
    )


def request_cancelled(request_id: RequestId) -> Frame:
    return Frame(kind=FrameKind.REQUEST_CANCELLED, request_id=request_id)


def error(message: str, *, code: str, request_id: RequestId | None = None) -> Frame:
    return Frame(
        kind=FrameKind.ERROR,
        request_id=request_id,
        fields={WS_KEY_ERROR: message, WS_KEY_CODE: code},
    )


def pong(request_id: RequestId | None = None) -> Frame:
    return Frame(kind=FrameKind.PONG, request_id=request_id, fields={WS_KEY_TIMESTAMP: now_ms()})


def heartbeat() -> Frame:
    return Frame(kind=FrameKind.HEARTBEAT, fields={WS_KEY_TIMESTAMP: now_ms()})


__all__ = [
    "connection_established",
    "error",
    "heartbeat",
    "now_ms",
    "pong",
    "request_cancelled",
    "stream_chunk",
    "stream_complete",
    "stream_start",
    "tts_error",
    "tts_stream_chunk",
    "tts_stream_complete",
    "tts_stream_start",
]
