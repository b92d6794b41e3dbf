from .sink import FrameSink
from .base import StreamSession
from .speech import SpeechSession
from .request import RequestSession
from .speech_text import prepare_speech_text
from .reply_parser import ReplyUpdate, ReplyLayout, ReplyFieldParser

__all__ = [
    "FrameSink",
    "ReplyFieldParser",
    "ReplyLayout",
    "ReplyUpdate",
    "RequestSession",
    "SpeechSession",
    "StreamSession",
    "prepare_speech_text",
]
