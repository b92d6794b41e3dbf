"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BackendSettings:
    kind: str
    api_key: str
    model: str
    max_output_tokens: int
    system_instruction: str
    reply_format: str
    fragment_timeout_s: float
    fake_delay_s: float


@dataclass(frozen=True, slots=True)
class SpeechSettings:
    model: str
    voice: str
    full_length: bool


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    max_requests_per_connection: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int
    ws_cancel_window_seconds: float
    ws_max_cancels_per_window: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    endpoint_path: str
    heartbeat_interval_s: float
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    backend: BackendSettings
    speech: SpeechSettings
    limits: LimitsSettings
    websocket: WebSocketSettings


__all__ = [
    "AppSettings",
    "BackendSettings",
    "LimitsSettings",
    "SpeechSettings",
    "WebSocketSettings",
]
