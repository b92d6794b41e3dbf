"""Speech synthesis (tts_request) configuration."""

from __future__ import annotations

ENV_TTS_MODEL = "TTS_MODEL"
ENV_TTS_VOICE = "TTS_VOICE"
ENV_FULL_LENGTH_AUDIO_PLAYBACK = "FULL_LENGTH_AUDIO_PLAYBACK"

DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_TTS_VOICE = "Charon"
DEFAULT_FULL_LENGTH_AUDIO_PLAYBACK = False

# Text trimming when full-length playback is off: texts up to TTS_SHORT_TEXT_CHARS
# are spoken whole, longer ones up to the first sentence end (at most TTS_MAX_TEXT_CHARS).
TTS_SHORT_TEXT_CHARS = 30
TTS_MAX_TEXT_CHARS = 200

TTS_AUDIO_MODALITY = "AUDIO"

__all__ = [
    "ENV_TTS_MODEL",
    "ENV_TTS_VOICE",
    "ENV_FULL_LENGTH_AUDIO_PLAYBACK",
    "DEFAULT_TTS_MODEL",
    "DEFAULT_TTS_VOICE",
    "DEFAULT_FULL_LENGTH_AUDIO_PLAYBACK",
    "TTS_SHORT_TEXT_CHARS",
    "TTS_MAX_TEXT_CHARS",
    "TTS_AUDIO_MODALITY",
]
