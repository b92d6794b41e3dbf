"""Text generation backend configuration."""

from __future__ import annotations

ENV_CHAT_BACKEND = "CHAT_BACKEND"
ENV_CHAT_MODEL = "CHAT_MODEL"
ENV_CHAT_MAX_OUTPUT_TOKENS = "CHAT_MAX_OUTPUT_TOKENS"
ENV_CHAT_SYSTEM_INSTRUCTION = "CHAT_SYSTEM_INSTRUCTION"
ENV_CHAT_REPLY_FORMAT = "CHAT_REPLY_FORMAT"
ENV_BACKEND_FRAGMENT_TIMEOUT_S = "BACKEND_FRAGMENT_TIMEOUT_S"
ENV_FAKE_BACKEND_DELAY_S = "FAKE_BACKEND_DELAY_S"

BACKEND_GEMINI = "gemini"
BACKEND_FAKE = "fake"
SUPPORTED_BACKENDS = frozenset({BACKEND_GEMINI, BACKEND_FAKE})

REPLY_FORMAT_PLAIN = "plain"
REPLY_FORMAT_TUTOR = "tutor"
SUPPORTED_REPLY_FORMATS = frozenset({REPLY_FORMAT_PLAIN, REPLY_FORMAT_TUTOR})

DEFAULT_CHAT_BACKEND = BACKEND_GEMINI
DEFAULT_CHAT_MODEL = "gemini-2.0-flash"
DEFAULT_CHAT_MAX_OUTPUT_TOKENS = 350
DEFAULT_CHAT_REPLY_FORMAT = REPLY_FORMAT_PLAIN
# 0 disables the per-fragment timeout; a stalled backend then streams forever.
DEFAULT_BACKEND_FRAGMENT_TIMEOUT_S = 0.0
DEFAULT_FAKE_BACKEND_DELAY_S = 0.05

__all__ = [
    "ENV_CHAT_BACKEND",
    "ENV_CHAT_MODEL",
    "ENV_CHAT_MAX_OUTPUT_TOKENS",
    "ENV_CHAT_SYSTEM_INSTRUCTION",
    "ENV_CHAT_REPLY_FORMAT",
    "ENV_BACKEND_FRAGMENT_TIMEOUT_S",
    "ENV_FAKE_BACKEND_DELAY_S",
    "BACKEND_GEMINI",
    "BACKEND_FAKE",
    "SUPPORTED_BACKENDS",
    "REPLY_FORMAT_PLAIN",
    "REPLY_FORMAT_TUTOR",
    "SUPPORTED_REPLY_FORMATS",
    "DEFAULT_CHAT_BACKEND",
    "DEFAULT_CHAT_MODEL",
    "DEFAULT_CHAT_MAX_OUTPUT_TOKENS",
    "DEFAULT_CHAT_REPLY_FORMAT",
    "DEFAULT_BACKEND_FRAGMENT_TIMEOUT_S",
    "DEFAULT_FAKE_BACKEND_DELAY_S",
]
