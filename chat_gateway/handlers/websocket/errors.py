"""Send helpers and connection rejection for the chat WebSocket."""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

from chat_gateway.protocol import builders, encode

logger = logging.getLogger(__name__)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def reject_connection(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    close_code: int,
) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        return
    await safe_send_text(ws, encode(builders.error(message, code=error_code)))
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = ["safe_send_text", "reject_connection"]
