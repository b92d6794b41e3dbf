"""Per-connection WebSocket lifecycle helpers (heartbeat, idle enforcement)."""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

from chat_gateway.protocol import builders
from chat_gateway.config.websocket import (
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
    WS_CLOSE_MAX_DURATION_CODE,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    WS_CLOSE_MAX_DURATION_REASON,
    DEFAULT_WS_HEARTBEAT_INTERVAL_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)

from .writer import FrameWriter

logger = logging.getLogger(__name__)


class WebSocketLifecycle:
    def __init__(
        self,
        websocket: Any,
        *,
        writer: FrameWriter,
        is_busy_fn: Callable[[], bool] | None = None,
        heartbeat_interval_s: float | None = None,
        idle_timeout_s: float | None = None,
        watchdog_tick_s: float | None = None,
        max_connection_duration_s: float | None = None,
    ) -> None:
        self._ws = websocket
        self._writer = writer
        self._is_busy_fn = is_busy_fn or (lambda: False)
        self._heartbeat_interval_s = float(
            DEFAULT_WS_HEARTBEAT_INTERVAL_S if heartbeat_interval_s is None else heartbeat_interval_s
        )
        self._idle_timeout_s = float(DEFAULT_WS_IDLE_TIMEOUT_S if idle_timeout_s is None else idle_timeout_s)
        self._watchdog_tick_s = float(DEFAULT_WS_WATCHDOG_TICK_S if watchdog_tick_s is None else watchdog_tick_s)
        self._max_connection_duration_s = float(
            DEFAULT_WS_MAX_CONNECTION_DURATION_S if max_connection_duration_s is None else max_connection_duration_s
        )
        self._connection_start = time.monotonic()
        self._last_activity = time.monotonic()
        self._stop_event = asyncio.Event()
        self._tasks: list[asyncio.Task] = []

    @property
    def watchdog_tick_s(self) -> float:
        return self._watchdog_tick_s

    @property
    def watchdog_enabled(self) -> bool:
        return self._idle_timeout_s > 0 or self._max_connection_duration_s > 0

    def touch(self) -> None:
        self._last_activity = time.monotonic()

    def should_close(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> None:
        if self._tasks:
            return
        if self._heartbeat_interval_s > 0:
            self._tasks.append(asyncio.create_task(self._heartbeat_loop()))
        if self.watchdog_enabled:
            self._tasks.append(asyncio.create_task(self._watchdog_loop()))

    async def stop(self) -> None:
        self._stop_event.set()
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task

    async def _heartbeat_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._heartbeat_interval_s)
                if self._stop_event.is_set():
                    break
                if not await self._writer.send(builders.heartbeat()):
                    break
        except asyncio.CancelledError:
            return
        except Exception:
            logger.debug("heartbeat exiting due to unexpected error", exc_info=True)

    async def _close(self, code: int, reason: str) -> None:
        self._stop_event.set()
        with contextlib.suppress(Exception):
            await self._ws.close(code=code, reason=reason)

    async def _watchdog_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._watchdog_tick_s)
                if self._stop_event.is_set():
                    break
                if (
                    self._max_connection_duration_s > 0
                    and (time.monotonic() - self._connection_start) >= self._max_connection_duration_s
                ):
                    logger.info("WebSocket max duration reached; closing connection")
                    await self._close(WS_CLOSE_MAX_DURATION_CODE, WS_CLOSE_MAX_DURATION_REASON)
                    break
                if self._is_busy_fn():
                    continue
                if self._idle_timeout_s > 0 and (time.monotonic() - self._last_activity) >= self._idle_timeout_s:
                    logger.info("WebSocket idle timeout reached; closing connection")
                    await self._close(WS_CLOSE_IDLE_CODE, WS_CLOSE_IDLE_REASON)
                    break
        except asyncio.CancelledError:
            return
        except Exception:
            logger.debug("idle watchdog exiting due to unexpected error", exc_info=True)


__all__ = ["WebSocketLifecycle"]
