"""Speech session: one tts_request streamed as base64 audio chunks."""

from __future__ import annotations

import base64
import logging

from chat_gateway.protocol import builders
from chat_gateway.protocol.frame import Frame, RequestId
from chat_gateway.state.request import RequestState
from chat_gateway.backend.handle import StreamHandle
from chat_gateway.backend.adapter import BackendStreamAdapter

from .sink import FrameSink
from .base import StreamSession

logger = logging.getLogger(__name__)


class SpeechSession(StreamSession):
    """Streams audio for `text` as tts_stream_chunk frames, then tts_stream_complete.

    Every frame echoes `parent_request_id`, the chat request the audio belongs
    to. `tts_stream_complete` carries the whole clip re-encoded as one base64
    string; failures are reported as tts_error.
    """

    task_prefix = "tts-request"

    def __init__(
        self,
        request_id: RequestId,
        text: str,
        *,
        adapter: BackendStreamAdapter,
        sink: FrameSink,
        parent_request_id: RequestId | None = None,
    ) -> None:
        super().__init__(request_id, adapter=adapter, sink=sink)
        self.text = text
        self.parent_request_id = parent_request_id
        self._audio = bytearray()
        self._chunks = 0

    @property
    def audio(self) -> bytes:
        return bytes(self._audio)

    def _open(self) -> StreamHandle:
        return self._adapter.start_speech(self.text)

    def _start_frame(self) -> Frame:
        return builders.tts_stream_start(self.request_id, parent_request_id=self.parent_request_id)

    def _error_frame(self, message: str, code: str) -> Frame:
        return builders.tts_error(
            message,
            code=code,
            request_id=self.request_id,
            parent_request_id=self.parent_request_id,
        )

    async def _on_fragment(self, fragment: str) -> None:
        # Chunk payloads concatenate only as raw bytes; base64 padding breaks string joins.
        self._audio += base64.b64decode(fragment)
        index = self._chunks
        self._chunks += 1
        await self._emit(
            builders.tts_stream_chunk(
                self.request_id,
                fragment,
                chunk_index=index,
                parent_request_id=self.parent_request_id,
            )
        )

    async def _complete(self) -> None:
        if not self._transition(RequestState.COMPLETED):
            return
        logger.info(
            "tts request %s completed chunks=%s bytes=%s parent=%s",
            self.request_id,
            self._chunks,
            len(self._audio),
            self.parent_request_id,
        )
        await self._sink.send(
            builders.tts_stream_complete(
                self.request_id,
                base64.b64encode(self._audio).decode("ascii"),
                total_chunks=self._chunks,
                parent_request_id=self.parent_request_id,
            )
        )


__all__ = ["SpeechSession"]
