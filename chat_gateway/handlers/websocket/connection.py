"""Per-connection state: the request session table, writer, lifecycle and limiters."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import TypeVar
from collections.abc import Sequence

from fastapi import WebSocket

from chat_gateway.state.settings import AppSettings
from chat_gateway.state.connection import ConnectionState
from chat_gateway.config.models import REPLY_FORMAT_TUTOR
from chat_gateway.protocol import RequestId, ChatMessage
from chat_gateway.backend.adapter import BackendStreamAdapter
from chat_gateway.handlers.limits import SlidingWindowRateLimiter
from chat_gateway.config.websocket import WS_CLOSE_GOING_AWAY_CODE
from chat_gateway.sessions import StreamSession, SpeechSession, RequestSession

from .writer import FrameWriter
from .lifecycle import WebSocketLifecycle

logger = logging.getLogger(__name__)

SessionT = TypeVar("SessionT", bound=StreamSession)


class ChatConnection:
    """One accepted client connection.

    Owns every request session started on it. Sessions are keyed by request
    id and removed from the table when their task finishes.
    """

    def __init__(
        self,
        ws: WebSocket,
        *,
        connection_id: str,
        adapter: BackendStreamAdapter,
        settings: AppSettings,
    ) -> None:
        self.ws = ws
        self.connection_id = connection_id
        self.adapter = adapter
        self.state = ConnectionState.OPEN
        self.sessions: dict[RequestId, StreamSession] = {}
        self.structured = settings.backend.reply_format == REPLY_FORMAT_TUTOR
        self.full_length_speech = settings.speech.full_length
        self.max_requests = max(1, settings.limits.max_requests_per_connection)
        self.writer = FrameWriter(ws, is_open=self.is_open)
        self.lifecycle = WebSocketLifecycle(
            ws,
            writer=self.writer,
            is_busy_fn=self.has_live_sessions,
            heartbeat_interval_s=settings.websocket.heartbeat_interval_s,
            idle_timeout_s=settings.websocket.idle_timeout_s,
            watchdog_tick_s=settings.websocket.watchdog_tick_s,
            max_connection_duration_s=settings.websocket.max_connection_duration_s,
        )
        self.message_limiter = SlidingWindowRateLimiter(
            limit=settings.limits.ws_max_messages_per_window,
            window_seconds=settings.limits.ws_message_window_seconds,
        )
        self.cancel_limiter = SlidingWindowRateLimiter(
            limit=settings.limits.ws_max_cancels_per_window,
            window_seconds=settings.limits.ws_cancel_window_seconds,
        )

    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    def live_session_count(self) -> int:
        return sum(1 for session in self.sessions.values() if session.is_live())

    def has_live_sessions(self) -> bool:
        return self.live_session_count() > 0

    def get_session(self, request_id: RequestId) -> StreamSession | None:
        return self.sessions.get(request_id)

    def spawn(self, request_id: RequestId, history: Sequence[ChatMessage]) -> RequestSession:
        session = RequestSession(
            request_id,
            history,
            adapter=self.adapter,
            sink=self.writer,
            structured=self.structured,
        )
        return self._track(session)

    def spawn_speech(
        self,
        request_id: RequestId,
        text: str,
        *,
        parent_request_id: RequestId | None = None,
    ) -> SpeechSession:
        session = SpeechSession(
            request_id,
            text,
            adapter=self.adapter,
            sink=self.writer,
            parent_request_id=parent_request_id,
        )
        return self._track(session)

    def _track(self, session: SessionT) -> SessionT:
        self.sessions[session.request_id] = session
        task = session.start()
        task.add_done_callback(lambda _task: self._forget(session))
        return session

    def _forget(self, session: StreamSession) -> None:
        # A newer session may already reuse the id.
        if self.sessions.get(session.request_id) is session:
            del self.sessions[session.request_id]

    async def close(self, *, going_away: bool = False) -> None:
        if self.state is not ConnectionState.OPEN:
            return
        self.state = ConnectionState.CLOSING
        await self.lifecycle.stop()

        sessions = list(self.sessions.values())
        for session in sessions:
            session.abort()
        tasks = [s.task for s in sessions if s.task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("connection %s: aborted %s request(s)", self.connection_id, len(tasks))

        if going_away and not self.writer.broken:
            with contextlib.suppress(Exception):
                await self.ws.close(code=WS_CLOSE_GOING_AWAY_CODE)
        self.state = ConnectionState.CLOSED


__all__ = ["ChatConnection"]
