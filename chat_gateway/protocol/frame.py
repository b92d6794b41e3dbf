"""The wire unit: one typed, optionally request-correlated frame."""

from __future__ import annotations

from typing import Any, Union
from dataclasses import field, dataclass

from .kinds import FrameKind

RequestId = Union[str, int]


@dataclass(frozen=True, slots=True)
class Frame:
    kind: FrameKind
    request_id: RequestId | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    # Original `type` string for UNKNOWN frames (None when the field was absent).
    raw_kind: str | None = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


__all__ = ["Frame", "RequestId"]
