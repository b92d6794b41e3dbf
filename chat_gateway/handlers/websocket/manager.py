"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from chat_gateway.errors import HandshakeError
from chat_gateway.protocol import builders
from chat_gateway.state.runtime import RuntimeDeps
from chat_gateway.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_CLOSE_PROTOCOL_ERROR_CODE,
    WS_ERROR_SERVER_AT_CAPACITY,
)

from .errors import reject_connection
from .connection import ChatConnection
from .handshake import validate_handshake
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


async def _admit(ws: WebSocket, runtime_deps: RuntimeDeps) -> str | None:
    try:
        accept_key = validate_handshake(ws.headers)
    except HandshakeError as exc:
        logger.info("WebSocket upgrade rejected: %s", exc)
        with contextlib.suppress(Exception):
            await ws.close(code=WS_CLOSE_PROTOCOL_ERROR_CODE)
        return None
    logger.debug("WebSocket upgrade ok: Sec-WebSocket-Accept=%s", accept_key)

    connection_id = await runtime_deps.connections.reserve()
    if connection_id is None:
        await reject_connection(
            ws,
            error_code=WS_ERROR_SERVER_AT_CAPACITY,
            message="Server cannot accept new connections. Please try again later.",
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return None

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.release(connection_id)
        raise
    return connection_id


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    connection_id = await _admit(ws, runtime_deps)
    if connection_id is None:
        return

    conn = ChatConnection(
        ws,
        connection_id=connection_id,
        adapter=runtime_deps.backend,
        settings=runtime_deps.settings,
    )
    try:
        await runtime_deps.connections.attach(connection_id, conn)
        await conn.writer.send(builders.connection_established(connection_id))
        conn.lifecycle.start()
        logger.info(
            "WebSocket connection %s accepted. Active: %s",
            connection_id,
            runtime_deps.connections.get_connection_count(),
        )
        await run_message_loop(conn)
    finally:
        with contextlib.suppress(Exception):
            await conn.close()
        with contextlib.suppress(Exception):
            await runtime_deps.connections.release(connection_id)
        logger.info(
            "WebSocket connection %s closed. Active: %s",
            connection_id,
            runtime_deps.connections.get_connection_count(),
        )


__all__ = ["handle_websocket_connection"]
