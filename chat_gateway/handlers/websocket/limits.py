"""Rate limiting utilities for WebSocket message handling."""

from __future__ import annotations

import math

from chat_gateway.errors import RateLimitError
from chat_gateway.protocol import FrameKind, RequestId, builders
from chat_gateway.config.websocket import WS_ERROR_RATE_LIMITED
from chat_gateway.handlers.limits import SlidingWindowRateLimiter

from .writer import FrameWriter


def select_rate_limiter(
    kind: FrameKind,
    message_limiter: SlidingWindowRateLimiter,
    cancel_limiter: SlidingWindowRateLimiter,
) -> tuple[SlidingWindowRateLimiter | None, str]:
    if kind is FrameKind.CANCEL_REQUEST:
        return cancel_limiter, "cancel"
    if kind is FrameKind.PING:
        return None, ""
    return message_limiter, "message"


async def consume_limiter(
    writer: FrameWriter,
    limiter: SlidingWindowRateLimiter,
    label: str,
    *,
    request_id: RequestId | None,
) -> bool:
    try:
        limiter.consume()
    except RateLimitError as exc:
        retry_in_s = int(max(1, math.ceil(float(exc.retry_in)))) if exc.retry_in else 1
        await writer.send(
            builders.error(
                f"{label} rate limit: at most {limiter.limit} per {int(limiter.window_seconds)} seconds; "
                f"retry in {retry_in_s} seconds",
                code=WS_ERROR_RATE_LIMITED,
                request_id=request_id,
            )
        )
        return False
    return True


__all__ = ["select_rate_limiter", "consume_limiter"]
