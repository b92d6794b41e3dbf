from . import builders
from .frame import Frame, RequestId
from .kinds import FrameKind
from .codec import decode, encode, coerce_request_id
from .history import ChatMessage, parse_history

__all__ = [
    "ChatMessage",
    "Frame",
    "FrameKind",
    "RequestId",
    "builders",
    "coerce_request_id",
    "decode",
    "encode",
    "parse_history",
]
