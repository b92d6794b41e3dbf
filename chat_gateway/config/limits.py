"""Admission control and rate limit configuration."""

from __future__ import annotations

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"
ENV_MAX_REQUESTS_PER_CONNECTION = "MAX_REQUESTS_PER_CONNECTION"
ENV_WS_MESSAGE_WINDOW_SECONDS = "WS_MESSAGE_WINDOW_SECONDS"
ENV_WS_MAX_MESSAGES_PER_WINDOW = "WS_MAX_MESSAGES_PER_WINDOW"
ENV_WS_CANCEL_WINDOW_SECONDS = "WS_CANCEL_WINDOW_SECONDS"
ENV_WS_MAX_CANCELS_PER_WINDOW = "WS_MAX_CANCELS_PER_WINDOW"

DEFAULT_MAX_CONCURRENT_CONNECTIONS = 100
DEFAULT_MAX_REQUESTS_PER_CONNECTION = 16
DEFAULT_WS_MESSAGE_WINDOW_SECONDS = 60.0
# Chat traffic is light compared to audio streaming: a few requests per turn.
DEFAULT_WS_MAX_MESSAGES_PER_WINDOW = 600
# 0 means "same window as messages".
DEFAULT_WS_CANCEL_WINDOW_SECONDS = 0.0
DEFAULT_WS_MAX_CANCELS_PER_WINDOW = 100

__all__ = [
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "ENV_MAX_REQUESTS_PER_CONNECTION",
    "ENV_WS_MESSAGE_WINDOW_SECONDS",
    "ENV_WS_MAX_MESSAGES_PER_WINDOW",
    "ENV_WS_CANCEL_WINDOW_SECONDS",
    "ENV_WS_MAX_CANCELS_PER_WINDOW",
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_MAX_REQUESTS_PER_CONNECTION",
    "DEFAULT_WS_MESSAGE_WINDOW_SECONDS",
    "DEFAULT_WS_MAX_MESSAGES_PER_WINDOW",
    "DEFAULT_WS_CANCEL_WINDOW_SECONDS",
    "DEFAULT_WS_MAX_CANCELS_PER_WINDOW",
]
