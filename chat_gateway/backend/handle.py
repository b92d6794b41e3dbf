"""Cancellable handle over one in-flight backend stream."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from enum import Enum
from dataclasses import dataclass
from collections.abc import AsyncIterator

from chat_gateway.errors import BackendTimeoutError

logger = logging.getLogger(__name__)

_END = object()


class StreamStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class StreamOutcome:
    status: StreamStatus
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.status is StreamStatus.COMPLETED

    @property
    def error_message(self) -> str:
        if self.error is None:
            return ""
        return str(self.error) or type(self.error).__name__


class StreamHandle:
    """Producer task pushing fragments into a queue, consumed via `async for`.

    The fragment sequence is finite and can be iterated once. `cancel()` is
    idempotent; after it returns no further fragment is yielded, including
    fragments that were already queued.
    """

    def __init__(self, source: AsyncIterator[str], *, fragment_timeout_s: float = 0.0) -> None:
        self._source = source
        self._fragment_timeout_s = max(0.0, float(fragment_timeout_s))
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._cancelled = False
        self._iterated = False
        self._outcome: StreamOutcome | None = None
        self._producer = asyncio.create_task(self._produce())

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def outcome(self) -> StreamOutcome | None:
        """Completion signal; None while the stream is still running."""
        return self._outcome

    def _finish(self, outcome: StreamOutcome) -> None:
        if self._outcome is None:
            self._outcome = outcome

    async def _produce(self) -> None:
        try:
            async for fragment in self._source:
                if self._cancelled:
                    break
                if fragment:
                    self._queue.put_nowait(fragment)
        except asyncio.CancelledError:
            self._finish(StreamOutcome(StreamStatus.CANCELLED))
            raise
        except Exception as exc:
            logger.debug("backend stream failed", exc_info=True)
            self._finish(StreamOutcome(StreamStatus.FAILED, exc))
        else:
            self._finish(StreamOutcome(StreamStatus.CANCELLED if self._cancelled else StreamStatus.COMPLETED))
        finally:
            self._queue.put_nowait(_END)
            aclose = getattr(self._source, "aclose", None)
            if aclose is not None:
                with contextlib.suppress(Exception):
                    await aclose()

    async def _next_item(self) -> object:
        if self._fragment_timeout_s <= 0:
            return await self._queue.get()
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=self._fragment_timeout_s)
        except TimeoutError:
            self._finish(
                StreamOutcome(
                    StreamStatus.FAILED,
                    BackendTimeoutError(f"no output from backend for {self._fragment_timeout_s:g} seconds"),
                )
            )
            self._producer.cancel()
            return _END

    async def _iterate(self) -> AsyncIterator[str]:
        while not self._cancelled:
            item = await self._next_item()
            if item is _END or self._cancelled:
                return
            yield item  # type: ignore[misc]

    def __aiter__(self) -> AsyncIterator[str]:
        if self._iterated:
            raise RuntimeError("stream handle can only be iterated once")
        self._iterated = True
        return self._iterate()

    def cancel(self) -> bool:
        """Request the stream stop; returns False if already cancelled."""
        if self._cancelled:
            return False
        self._cancelled = True
        # A producer that already drained its source still counts as cancelled:
        # the consumer will not see the fragments left in the queue.
        if self._outcome is None or self._outcome.ok:
            self._outcome = StreamOutcome(StreamStatus.CANCELLED)
        self._producer.cancel()
        # Wake a consumer parked on an empty queue.
        self._queue.put_nowait(_END)
        return True

    async def wait_closed(self) -> None:
        """Wait until the producer has stopped and the source is closed."""
        await asyncio.wait((self._producer,))


__all__ = ["StreamHandle", "StreamOutcome", "StreamStatus"]
