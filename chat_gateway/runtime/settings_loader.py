"""Environment parsing for runtime settings."""

from __future__ import annotations

import os
import logging

from chat_gateway.config.secrets import get_backend_api_key
from chat_gateway.config.prompts import TUTOR_SYSTEM_INSTRUCTION
from chat_gateway.state.settings import (
    AppSettings,
    LimitsSettings,
    BackendSettings,
    SpeechSettings,
    WebSocketSettings,
)
from chat_gateway.config.websocket import (
    ENV_WS_ENDPOINT_PATH,
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_ENDPOINT_PATH,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    ENV_WS_HEARTBEAT_INTERVAL_S,
    DEFAULT_WS_HEARTBEAT_INTERVAL_S,
    ENV_WS_MAX_CONNECTION_DURATION_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)
from chat_gateway.config.models import (
    ENV_CHAT_MODEL,
    ENV_CHAT_BACKEND,
    REPLY_FORMAT_TUTOR,
    SUPPORTED_BACKENDS,
    DEFAULT_CHAT_MODEL,
    ENV_CHAT_REPLY_FORMAT,
    DEFAULT_CHAT_BACKEND,
    SUPPORTED_REPLY_FORMATS,
    ENV_FAKE_BACKEND_DELAY_S,
    DEFAULT_CHAT_REPLY_FORMAT,
    ENV_CHAT_MAX_OUTPUT_TOKENS,
    ENV_CHAT_SYSTEM_INSTRUCTION,
    DEFAULT_FAKE_BACKEND_DELAY_S,
    ENV_BACKEND_FRAGMENT_TIMEOUT_S,
    DEFAULT_CHAT_MAX_OUTPUT_TOKENS,
    DEFAULT_BACKEND_FRAGMENT_TIMEOUT_S,
)
from chat_gateway.config.speech import (
    ENV_TTS_MODEL,
    ENV_TTS_VOICE,
    DEFAULT_TTS_MODEL,
    DEFAULT_TTS_VOICE,
    ENV_FULL_LENGTH_AUDIO_PLAYBACK,
    DEFAULT_FULL_LENGTH_AUDIO_PLAYBACK,
)
from chat_gateway.config.limits import (
    ENV_WS_CANCEL_WINDOW_SECONDS,
    ENV_WS_MAX_CANCELS_PER_WINDOW,
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    ENV_MAX_REQUESTS_PER_CONNECTION,
    DEFAULT_WS_CANCEL_WINDOW_SECONDS,
    DEFAULT_WS_MAX_CANCELS_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_MAX_REQUESTS_PER_CONNECTION,
)

logger = logging.getLogger(__name__)

MIN_WATCHDOG_TICK_S = 0.05


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _choice_env(name: str, default: str, allowed: frozenset[str]) -> str:
    value = _str_env(name, default).lower()
    if value not in allowed:
        logger.warning("%s=%r is not one of %s; using %r", name, value, sorted(allowed), default)
        return default
    return value


def _normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def _load_backend_settings() -> BackendSettings:
    reply_format = _choice_env(ENV_CHAT_REPLY_FORMAT, DEFAULT_CHAT_REPLY_FORMAT, SUPPORTED_REPLY_FORMATS)
    default_instruction = TUTOR_SYSTEM_INSTRUCTION if reply_format == REPLY_FORMAT_TUTOR else ""
    return BackendSettings(
        kind=_choice_env(ENV_CHAT_BACKEND, DEFAULT_CHAT_BACKEND, SUPPORTED_BACKENDS),
        api_key=get_backend_api_key(),
        model=_str_env(ENV_CHAT_MODEL, DEFAULT_CHAT_MODEL),
        max_output_tokens=max(1, _int_env(ENV_CHAT_MAX_OUTPUT_TOKENS, DEFAULT_CHAT_MAX_OUTPUT_TOKENS)),
        system_instruction=_str_env(ENV_CHAT_SYSTEM_INSTRUCTION, default_instruction),
        reply_format=reply_format,
        fragment_timeout_s=max(0.0, _float_env(ENV_BACKEND_FRAGMENT_TIMEOUT_S, DEFAULT_BACKEND_FRAGMENT_TIMEOUT_S)),
        fake_delay_s=max(0.0, _float_env(ENV_FAKE_BACKEND_DELAY_S, DEFAULT_FAKE_BACKEND_DELAY_S)),
    )


def _load_speech_settings() -> SpeechSettings:
    return SpeechSettings(
        model=_str_env(ENV_TTS_MODEL, DEFAULT_TTS_MODEL),
        voice=_str_env(ENV_TTS_VOICE, DEFAULT_TTS_VOICE),
        full_length=_bool_env(ENV_FULL_LENGTH_AUDIO_PLAYBACK, DEFAULT_FULL_LENGTH_AUDIO_PLAYBACK),
    )


def _load_limits_settings() -> LimitsSettings:
    max_connections = _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)
    max_requests = _int_env(ENV_MAX_REQUESTS_PER_CONNECTION, DEFAULT_MAX_REQUESTS_PER_CONNECTION)
    msg_window = _float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS)
    msg_limit = _int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW)
    cancel_window = _float_env(ENV_WS_CANCEL_WINDOW_SECONDS, DEFAULT_WS_CANCEL_WINDOW_SECONDS)
    if cancel_window <= 0:
        cancel_window = msg_window
    cancel_limit = _int_env(ENV_WS_MAX_CANCELS_PER_WINDOW, DEFAULT_WS_MAX_CANCELS_PER_WINDOW)

    return LimitsSettings(
        max_concurrent_connections=max(1, max_connections),
        max_requests_per_connection=max(1, max_requests),
        ws_message_window_seconds=msg_window,
        ws_max_messages_per_window=msg_limit,
        ws_cancel_window_seconds=cancel_window,
        ws_max_cancels_per_window=cancel_limit,
    )


def _load_websocket_settings() -> WebSocketSettings:
    endpoint_path = _normalize_path(_str_env(ENV_WS_ENDPOINT_PATH, DEFAULT_WS_ENDPOINT_PATH))
    heartbeat_interval = _float_env(ENV_WS_HEARTBEAT_INTERVAL_S, DEFAULT_WS_HEARTBEAT_INTERVAL_S)
    idle_timeout = _float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S)
    watchdog_tick = _float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S)
    max_duration = _float_env(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S)

    return WebSocketSettings(
        endpoint_path=endpoint_path,
        heartbeat_interval_s=heartbeat_interval,
        idle_timeout_s=idle_timeout,
        watchdog_tick_s=max(MIN_WATCHDOG_TICK_S, watchdog_tick),
        max_connection_duration_s=max_duration,
    )


def load_settings() -> AppSettings:
    return AppSettings(
        backend=_load_backend_settings(),
        speech=_load_speech_settings(),
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
    )


def load_endpoint_path() -> str:
    """Route path for the chat WebSocket (resolved once, at app construction)."""
    return _normalize_path(_str_env(ENV_WS_ENDPOINT_PATH, DEFAULT_WS_ENDPOINT_PATH))


__all__ = ["load_endpoint_path", "load_settings"]
