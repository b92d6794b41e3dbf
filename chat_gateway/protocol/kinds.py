"""Frame kinds exchanged over the chat WebSocket."""

from __future__ import annotations

from enum import Enum


class FrameKind(str, Enum):
    # inbound
    CHAT_REQUEST = "chat_request"
    TTS_REQUEST = "tts_request"
    CANCEL_REQUEST = "cancel_request"
    PING = "ping"
    # outbound
    CONNECTION_ESTABLISHED = "connection_established"
    STREAM_START = "stream_start"
    STREAM_CHUNK = "stream_chunk"
    STREAM_COMPLETE = "stream_complete"
    TTS_STREAM_START = "tts_stream_start"
    TTS_STREAM_CHUNK = "tts_stream_chunk"
    TTS_STREAM_COMPLETE = "tts_stream_complete"
    TTS_ERROR = "tts_error"
    REQUEST_CANCELLED = "request_cancelled"
    ERROR = "error"
    PONG = "pong"
    HEARTBEAT = "heartbeat"
    # decoded payload with a kind the gateway does not recognize
    UNKNOWN = "unknown"


INBOUND_KINDS = frozenset(
    {FrameKind.CHAT_REQUEST, FrameKind.TTS_REQUEST, FrameKind.CANCEL_REQUEST, FrameKind.PING}
)

__all__ = ["FrameKind", "INBOUND_KINDS"]
