"""Frame codec: JSON text <-> `Frame`."""

from __future__ import annotations

from typing import Any

import orjson

from chat_gateway.errors import DecodeError
from chat_gateway.config.websocket import WS_KEY_TYPE, WS_KEY_REQUEST_ID

from .frame import Frame, RequestId
from .kinds import INBOUND_KINDS, FrameKind


def coerce_request_id(value: Any) -> RequestId | None:
    # bool is an int subclass; a JSON true/false is never a usable correlator.
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, int):
        return value
    return None


def decode(raw: str | bytes) -> Frame:
    """Decode one inbound payload.

    Raises `DecodeError` only for payloads that are not a JSON object. A JSON
    object whose `type` is missing or not an inbound kind decodes to an
    UNKNOWN frame so the caller can report it back to the sender.
    """
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise DecodeError("message must be a JSON object")

    request_id = coerce_request_id(msg.get(WS_KEY_REQUEST_ID))
    fields = {k: v for k, v in msg.items() if k not in (WS_KEY_TYPE, WS_KEY_REQUEST_ID)}

    msg_type = msg.get(WS_KEY_TYPE)
    kind: FrameKind | None = None
    if isinstance(msg_type, str):
        msg_type = msg_type.strip()
        try:
            kind = FrameKind(msg_type)
        except ValueError:
            kind = None

    if kind is None or kind not in INBOUND_KINDS:
        return Frame(
            kind=FrameKind.UNKNOWN,
            request_id=request_id,
            fields=fields,
            raw_kind=msg_type if isinstance(msg_type, str) else None,
        )
    return Frame(kind=kind, request_id=request_id, fields=fields)


def encode(frame: Frame) -> str:
    data: dict[str, Any] = {WS_KEY_TYPE: frame.kind.value}
    data.update(frame.fields)
    if frame.request_id is not None:
        data[WS_KEY_REQUEST_ID] = frame.request_id
    return orjson.dumps(data).decode("utf-8")


__all__ = ["coerce_request_id", "decode", "encode"]
