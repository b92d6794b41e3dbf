"""Dispatch handlers for inbound chat WebSocket frames."""

from __future__ import annotations

import logging
from collections.abc import Callable, Awaitable

from chat_gateway.errors import HistoryValidationError
from chat_gateway.sessions import prepare_speech_text
from chat_gateway.protocol import Frame, FrameKind, RequestId, builders, parse_history, coerce_request_id
from chat_gateway.config.websocket import (
    WS_KEY_TEXT,
    WS_KEY_MESSAGES,
    WS_ERROR_INVALID_PAYLOAD,
    WS_KEY_PARENT_REQUEST_ID,
    WS_ERROR_DUPLICATE_REQUEST,
    WS_ERROR_TOO_MANY_REQUESTS,
)

from .connection import ChatConnection

logger = logging.getLogger(__name__)

HandlerFn = Callable[[ChatConnection, Frame], Awaitable[None]]


async def _handle_ping(conn: ChatConnection, frame: Frame) -> None:
    await conn.writer.send(builders.pong(frame.request_id))


async def _handle_cancel(conn: ChatConnection, frame: Frame) -> None:
    if frame.request_id is None:
        return
    session = conn.get_session(frame.request_id)
    if session is None:
        logger.debug("connection %s: cancel for unknown request %r", conn.connection_id, frame.request_id)
        return
    await session.cancel()


async def _reject_payload(conn: ChatConnection, message: str, request_id: RequestId | None = None) -> None:
    await conn.writer.send(builders.error(message, code=WS_ERROR_INVALID_PAYLOAD, request_id=request_id))


async def _can_start(conn: ChatConnection, request_id: RequestId) -> bool:
    """Check the request id is free and the connection has room for one more session."""
    existing = conn.get_session(request_id)
    if existing is not None and existing.is_live():
        await conn.writer.send(
            builders.error(
                f"Request {request_id} is already in progress",
                code=WS_ERROR_DUPLICATE_REQUEST,
                request_id=request_id,
            )
        )
        return False

    if conn.live_session_count() >= conn.max_requests:
        await conn.writer.send(
            builders.error(
                f"At most {conn.max_requests} concurrent requests per connection",
                code=WS_ERROR_TOO_MANY_REQUESTS,
                request_id=request_id,
            )
        )
        return False
    return True


async def _handle_chat_request(conn: ChatConnection, frame: Frame) -> None:
    request_id = frame.request_id
    if request_id is None:
        await _reject_payload(conn, "Missing requestId")
        return

    try:
        history = parse_history(frame.get(WS_KEY_MESSAGES))
    except HistoryValidationError as exc:
        await _reject_payload(conn, str(exc), request_id)
        return

    if not await _can_start(conn, request_id):
        return

    conn.spawn(request_id, history)
    logger.info(
        "connection %s: request %s started messages=%s live=%s",
        conn.connection_id,
        request_id,
        len(history),
        conn.live_session_count(),
    )


async def _handle_tts_request(conn: ChatConnection, frame: Frame) -> None:
    request_id = frame.request_id
    if request_id is None:
        await _reject_payload(conn, "Missing requestId")
        return

    raw_text = frame.get(WS_KEY_TEXT)
    text = prepare_speech_text(raw_text, full_length=conn.full_length_speech) if isinstance(raw_text, str) else ""
    if not text:
        await _reject_payload(conn, "Missing or invalid text", request_id)
        return

    if not await _can_start(conn, request_id):
        return

    parent_request_id = coerce_request_id(frame.get(WS_KEY_PARENT_REQUEST_ID))
    conn.spawn_speech(request_id, text, parent_request_id=parent_request_id)
    logger.info(
        "connection %s: tts request %s started parent=%s chars=%s/%s live=%s",
        conn.connection_id,
        request_id,
        parent_request_id,
        len(text),
        len(raw_text),
        conn.live_session_count(),
    )


HANDLERS: dict[FrameKind, HandlerFn] = {
    FrameKind.PING: _handle_ping,
    FrameKind.CANCEL_REQUEST: _handle_cancel,
    FrameKind.CHAT_REQUEST: _handle_chat_request,
    FrameKind.TTS_REQUEST: _handle_tts_request,
}


__all__ = ["HANDLERS", "HandlerFn"]
