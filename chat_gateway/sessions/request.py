"""Request session: one chat request driven from backend start to a terminal state."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Sequence

from chat_gateway.protocol import builders
from chat_gateway.protocol.frame import Frame, RequestId
from chat_gateway.protocol.history import ChatMessage
from chat_gateway.state.request import RequestState
from chat_gateway.backend.handle import StreamHandle
from chat_gateway.backend.adapter import BackendStreamAdapter

from .sink import FrameSink
from .base import StreamSession
from .tutor import TUTOR_LAYOUT, shape_tutor_fields
from .reply_parser import ReplyFieldParser

logger = logging.getLogger(__name__)


class RequestSession(StreamSession):
    """Streams one chat reply as stream_chunk frames, then stream_complete."""

    task_prefix = "chat-request"

    def __init__(
        self,
        request_id: RequestId,
        history: Sequence[ChatMessage],
        *,
        adapter: BackendStreamAdapter,
        sink: FrameSink,
        structured: bool = False,
    ) -> None:
        super().__init__(request_id, adapter=adapter, sink=sink)
        self._history = list(history)
        self._parts: list[str] = []
        self._raw_parts: list[str] = []
        self._parser = ReplyFieldParser(TUTOR_LAYOUT) if structured else None

    @property
    def text(self) -> str:
        """Output accumulated so far (the concatenation of emitted chunks)."""
        return "".join(self._parts)

    def _open(self) -> StreamHandle:
        return self._adapter.start(self._history)

    def _start_frame(self) -> Frame:
        return builders.stream_start(self.request_id)

    async def _emit_chunk(self, content: str) -> None:
        if not content:
            return
        index = len(self._parts)
        self._parts.append(content)
        await self._emit(builders.stream_chunk(self.request_id, content, chunk_index=index))

    async def _on_fragment(self, fragment: str) -> None:
        if self._parser is None:
            await self._emit_chunk(fragment)
            return
        self._raw_parts.append(fragment)
        for update in self._parser.feed(fragment.rstrip("\r\n")):
            if update.kind == "stream":
                await self._emit_chunk(update.delta)
            elif update.kind == "skip":
                logger.debug("request %s: reply field %s absent", self.request_id, update.key)

    def _parsed_fields(self) -> dict[str, Any] | None:
        if self._parser is None:
            return None
        return shape_tutor_fields(self._parser.fields)

    async def _complete(self) -> None:
        if self._parser is not None and not self._parser.streamed_any:
            # The model ignored the field layout; relay its raw output as one chunk.
            await self._emit_chunk("".join(self._raw_parts))
        if not self._transition(RequestState.COMPLETED):
            return
        logger.info("request %s completed chunks=%s", self.request_id, len(self._parts))
        await self._sink.send(
            builders.stream_complete(
                self.request_id,
                self.text,
                total_chunks=len(self._parts),
                parsed=self._parsed_fields(),
            )
        )


__all__ = ["RequestSession"]
