from .fake import FakeBackend
from .base import TextBackend, SpeechBackend
from .adapter import BackendStreamAdapter
from .fake_speech import FakeSpeechBackend
from .handle import StreamHandle, StreamStatus, StreamOutcome

__all__ = [
    "BackendStreamAdapter",
    "FakeBackend",
    "FakeSpeechBackend",
    "SpeechBackend",
    "StreamHandle",
    "StreamOutcome",
    "StreamStatus",
    "TextBackend",
]
