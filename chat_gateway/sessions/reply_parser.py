"""Incremental parser for key/value structured replies.

A structured reply is a sequence of `key<delimiter> value<terminator>` fields
in a fixed order, e.g. ``rating: 90; difficulty: 2; text: Hola;``. Static
fields are parsed once their value is complete; stream fields are surfaced as
deltas as soon as their text arrives. Optional fields may be absent from the
reply altogether.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Literal
from dataclasses import field, dataclass

import orjson

UpdateKind = Literal["meta", "stream", "skip", "complete"]


@dataclass(frozen=True, slots=True)
class ReplyLayout:
    keys: tuple[str, ...]
    stream_keys: frozenset[str]
    optional_keys: frozenset[str] = frozenset()
    json_keys: frozenset[str] = frozenset()
    delimiter: str = ":"
    terminator: str = ";"


@dataclass(frozen=True, slots=True)
class ReplyUpdate:
    kind: UpdateKind
    key: str | None = None
    delta: str = ""
    data: dict[str, Any] = field(default_factory=dict)


class _Mode(Enum):
    SEEK = "seek"
    STATIC = "static"
    STREAM = "stream"


def coerce_scalar(raw: str) -> Any:
    value = raw.strip()
    if value.lower() in {"null", "none"}:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return value
    return number if math.isfinite(number) else value


class ReplyFieldParser:
    def __init__(self, layout: ReplyLayout) -> None:
        self._layout = layout
        self._buffer = ""
        self._index = 0
        self._mode = _Mode.SEEK
        self._skipped: set[str] = set()
        self._meta_sent = False
        self._complete_sent = False
        self.fields: dict[str, Any] = {}

    @property
    def complete(self) -> bool:
        return self._index >= len(self._layout.keys)

    @property
    def streamed_any(self) -> bool:
        return any(self.fields.get(k) for k in self._layout.stream_keys)

    def _pattern(self, key: str) -> str:
        return key + self._layout.delimiter

    def _ends_with_partial(self, pattern: str) -> bool:
        longest = min(len(pattern) - 1, len(self._buffer))
        return any(pattern.startswith(self._buffer[-n:]) for n in range(1, longest + 1))

    def _next_key_pos(self) -> int:
        positions = [
            pos
            for key in self._layout.keys[self._index + 1 :]
            if (pos := self._buffer.find(self._pattern(key))) != -1
        ]
        return min(positions) if positions else -1

    def _value_end(self) -> tuple[int, bool]:
        """Return (end index, ends at next key) for the current value, or (-1, False)."""
        term_pos = self._buffer.find(self._layout.terminator)
        key_pos = self._next_key_pos()
        if key_pos != -1 and (term_pos == -1 or key_pos < term_pos):
            return key_pos, True
        return term_pos, False

    def _skip_absent_optionals(self, updates: list[ReplyUpdate]) -> None:
        keys = self._layout.keys
        while self._mode is _Mode.SEEK and self._index < len(keys):
            key = keys[self._index]
            if key not in self._layout.optional_keys:
                return
            pattern = self._pattern(key)
            if pattern in self._buffer or self._ends_with_partial(pattern):
                return
            # Only skip once a later key proves the reply moved past this one.
            if self._next_key_pos() == -1:
                return
            self._skipped.add(key)
            self.fields[key] = None
            updates.append(ReplyUpdate(kind="skip", key=key))
            self._index += 1

    def _parse_static(self, key: str, raw: str) -> Any:
        value = raw.strip()
        if value.endswith(self._layout.terminator):
            value = value[: -len(self._layout.terminator)].rstrip()
        if key in self._layout.json_keys:
            try:
                return orjson.loads(value)
            except orjson.JSONDecodeError:
                pass
        return coerce_scalar(value)

    def _maybe_emit_meta(self, updates: list[ReplyUpdate]) -> None:
        if self._meta_sent:
            return
        static_keys = [k for k in self._layout.keys if k not in self._layout.stream_keys]
        if any(k not in self.fields for k in static_keys):
            return
        self._meta_sent = True
        if static_keys:
            updates.append(ReplyUpdate(kind="meta", data={k: self.fields[k] for k in static_keys}))

    def feed(self, text: str) -> list[ReplyUpdate]:
        self._buffer += text
        updates: list[ReplyUpdate] = []
        keys = self._layout.keys
        term_len = len(self._layout.terminator)

        while self._index < len(keys):
            self._skip_absent_optionals(updates)
            if self._index >= len(keys):
                break
            key = keys[self._index]

            if self._mode is _Mode.SEEK:
                pattern = self._pattern(key)
                pos = self._buffer.find(pattern)
                if pos == -1:
                    break
                self._buffer = self._buffer[pos + len(pattern) :].lstrip()
                if key in self._layout.stream_keys:
                    self._mode = _Mode.STREAM
                    self.fields.setdefault(key, "")
                else:
                    self._mode = _Mode.STATIC

            end, at_key = self._value_end()
            if self._mode is _Mode.STATIC:
                if end == -1:
                    break
                self.fields[key] = self._parse_static(key, self._buffer[:end])
            else:
                if not self.fields[key]:
                    self._buffer = self._buffer.lstrip()
                    end, at_key = self._value_end()
                if end == -1:
                    if self._buffer:
                        updates.append(ReplyUpdate(kind="stream", key=key, delta=self._buffer))
                        self.fields[key] += self._buffer
                        self._buffer = ""
                    break
                delta = self._buffer[:end].rstrip()
                if delta:
                    updates.append(ReplyUpdate(kind="stream", key=key, delta=delta))
                    self.fields[key] += delta

            self._buffer = self._buffer[end:] if at_key else self._buffer[end + term_len :]
            self._index += 1
            self._mode = _Mode.SEEK

        self._maybe_emit_meta(updates)
        if self.complete and not self._complete_sent:
            self._complete_sent = True
            updates.append(ReplyUpdate(kind="complete", data=dict(self.fields)))
        return updates


__all__ = ["ReplyFieldParser", "ReplyLayout", "ReplyUpdate", "coerce_scalar"]
