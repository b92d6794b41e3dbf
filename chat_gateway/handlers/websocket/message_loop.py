"""WebSocket message loop for the chat gateway."""

from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocketDisconnect

from chat_gateway.errors import DecodeError
from chat_gateway.protocol import Frame, FrameKind, decode, builders
from chat_gateway.config.websocket import (
    WS_ERROR_INTERNAL,
    WS_ERROR_INVALID_MESSAGE,
    WS_ERROR_UNKNOWN_MESSAGE_TYPE,
)

from .dispatch import HANDLERS
from .connection import ChatConnection
from .limits import consume_limiter, select_rate_limiter

logger = logging.getLogger(__name__)


async def _recv_with_watchdog(conn: ChatConnection) -> tuple[str | bytes | None, bool]:
    """Wait for the next payload; returns (payload, should_exit)."""
    try:
        message = await asyncio.wait_for(
            conn.ws.receive(),
            timeout=conn.lifecycle.watchdog_tick_s * 2,
        )
    except TimeoutError:
        return None, conn.lifecycle.should_close()

    if message.get("type") == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code") or 1000)
    text = message.get("text")
    if text is not None:
        return text, False
    return message.get("bytes"), False


async def _decode_or_send_error(conn: ChatConnection, raw: str | bytes) -> Frame | None:
    try:
        return decode(raw)
    except DecodeError as exc:
        logger.debug("connection %s: malformed frame: %s", conn.connection_id, exc)
        await conn.writer.send(builders.error(f"Invalid message format: {exc}", code=WS_ERROR_INVALID_MESSAGE))
        return None


async def _report_unknown(conn: ChatConnection, frame: Frame) -> None:
    if frame.raw_kind:
        message = f"Unknown message type: {frame.raw_kind}"
    else:
        message = "message missing 'type'"
    await conn.writer.send(builders.error(message, code=WS_ERROR_UNKNOWN_MESSAGE_TYPE, request_id=frame.request_id))


async def _dispatch(conn: ChatConnection, frame: Frame) -> None:
    handler = HANDLERS.get(frame.kind)
    if handler is None:
        await _report_unknown(conn, frame)
        return
    try:
        await handler(conn, frame)
    except Exception:
        logger.exception("connection %s: %s handler failed", conn.connection_id, frame.kind.value)
        await conn.writer.send(
            builders.error("Internal server error", code=WS_ERROR_INTERNAL, request_id=frame.request_id)
        )


async def run_message_loop(conn: ChatConnection) -> None:
    try:
        while conn.is_open():
            raw, should_exit = await _recv_with_watchdog(conn)
            if should_exit:
                return
            if raw is None:
                continue

            conn.lifecycle.touch()

            frame = await _decode_or_send_error(conn, raw)
            if frame is None:
                continue

            if frame.kind is not FrameKind.UNKNOWN:
                limiter, label = select_rate_limiter(frame.kind, conn.message_limiter, conn.cancel_limiter)
                if limiter is not None:
                    ok = await consume_limiter(conn.writer, limiter, label, request_id=frame.request_id)
                    if not ok:
                        continue

            await _dispatch(conn, frame)
    except WebSocketDisconnect:
        return


__all__ = ["run_message_loop"]
