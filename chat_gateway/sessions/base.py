"""Shared state machine for sessions driven by one backend stream."""

from __future__ import annotations

import asyncio
import logging

from chat_gateway.errors import BackendError
from chat_gateway.protocol import builders
from chat_gateway.state.request import RequestState
from chat_gateway.protocol.frame import Frame, RequestId
from chat_gateway.config.websocket import WS_ERROR_INTERNAL
from chat_gateway.backend.adapter import BackendStreamAdapter
from chat_gateway.backend.handle import StreamHandle, StreamStatus

from .sink import FrameSink

logger = logging.getLogger(__name__)


class StreamSession:
    """State machine: PENDING -> STREAMING -> COMPLETED | CANCELLED | FAILED.

    The first terminal transition wins; later ones are ignored, so exactly one
    terminal frame is sent per session (none when aborted on disconnect).
    Subclasses open the backend stream and shape the frames around it.
    """

    task_prefix = "request"

    def __init__(self, request_id: RequestId, *, adapter: BackendStreamAdapter, sink: FrameSink) -> None:
        self.request_id = request_id
        self._adapter = adapter
        self._sink = sink
        self._state = RequestState.PENDING
        self._handle: StreamHandle | None = None
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def is_live(self) -> bool:
        return not self._state.is_terminal

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name=f"{self.task_prefix}:{self.request_id}")
        return self._task

    def _transition(self, new_state: RequestState) -> bool:
        if self._state.is_terminal:
            return False
        self._state = new_state
        return True

    async def _emit(self, frame: Frame) -> bool:
        return await self._sink.send(frame, guard=self.is_live)

    def _open(self) -> StreamHandle:
        raise NotImplementedError

    def _start_frame(self) -> Frame:
        raise NotImplementedError

    def _error_frame(self, message: str, code: str) -> Frame:
        return builders.error(message, code=code, request_id=self.request_id)

    async def _on_fragment(self, fragment: str) -> None:
        raise NotImplementedError

    async def _complete(self) -> None:
        raise NotImplementedError

    async def _fail(self, message: str, *, code: str) -> None:
        if not self._transition(RequestState.FAILED):
            return
        logger.warning("%s %s failed code=%s: %s", self.task_prefix, self.request_id, code, message)
        await self._sink.send(self._error_frame(message, code))

    async def _stream(self) -> None:
        try:
            self._handle = self._open()
        except BackendError as exc:
            await self._fail(str(exc) or "Error generating response", code=exc.code)
            return

        if not self._transition(RequestState.STREAMING):
            # Cancelled while pending.
            self._handle.cancel()
            return
        await self._emit(self._start_frame())

        async for fragment in self._handle:
            await self._on_fragment(fragment)

        outcome = self._handle.outcome
        if outcome is None or outcome.status is StreamStatus.CANCELLED:
            return
        if outcome.ok:
            await self._complete()
            return
        code = outcome.error.code if isinstance(outcome.error, BackendError) else BackendError.code
        await self._fail(outcome.error_message or "Error generating response", code=code)

    async def _run(self) -> None:
        if self._state.is_terminal:
            return
        try:
            await self._stream()
        except asyncio.CancelledError:
            if self._handle is not None:
                self._handle.cancel()
            raise
        except Exception:
            logger.exception("%s %s: unexpected error", self.task_prefix, self.request_id)
            await self._fail("Internal server error", code=WS_ERROR_INTERNAL)
        finally:
            if self._handle is not None:
                if self._handle.outcome is None:
                    self._handle.cancel()
                # The session ends only once the backend source is closed.
                await self._handle.wait_closed()

    async def cancel(self) -> bool:
        """Handle a client cancel; returns False if the session was already terminal."""
        if not self._transition(RequestState.CANCELLED):
            return False
        if self._handle is not None:
            self._handle.cancel()
        logger.info("%s %s cancelled", self.task_prefix, self.request_id)
        await self._sink.send(builders.request_cancelled(self.request_id))
        return True

    def abort(self) -> None:
        """Silently stop the session (the connection is gone)."""
        self._transition(RequestState.CANCELLED)
        if self._handle is not None:
            self._handle.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()


__all__ = ["StreamSession"]
