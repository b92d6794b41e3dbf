"""Shared error types for the chat gateway."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


class HandshakeError(ValueError):
    """Raised when a WebSocket upgrade request is malformed."""


class DecodeError(ValueError):
    """Raised when an inbound payload is not a well-formed frame."""


class HistoryValidationError(ValueError):
    """Raised when a chat request carries a missing or malformed history."""


class BackendError(Exception):
    """Raised when the text generation backend fails mid-request."""

    code = "backend_error"


class BackendNotConfiguredError(BackendError):
    """Raised when the backend credential is missing."""

    code = "backend_not_configured"


class BackendTimeoutError(BackendError):
    """Raised when the backend stops producing fragments for too long."""

    code = "backend_timeout"


__all__ = [
    "BackendError",
    "BackendNotConfiguredError",
    "BackendTimeoutError",
    "DecodeError",
    "HandshakeError",
    "HistoryValidationError",
    "RateLimitError",
]
