"""WebSocket protocol configuration and constants."""

from __future__ import annotations

# Frame keys
WS_KEY_TYPE = "type"
WS_KEY_REQUEST_ID = "requestId"
WS_KEY_MESSAGES = "messages"
WS_KEY_TEXT = "text"
WS_KEY_PARENT_REQUEST_ID = "parentRequestId"
WS_KEY_CONTENT = "content"
WS_KEY_FINISH_REASON = "finish_reason"
WS_KEY_TIMESTAMP = "timestamp"
WS_KEY_ERROR = "error"
WS_KEY_CODE = "code"

WS_FINISH_REASON_STOP = "stop"

# Handshake (RFC 6455)
WS_HANDSHAKE_GUID = "258EAFA5-E914-47DA-95CA-C5AB0DC85B11"
WS_SUPPORTED_VERSION = "13"

# Close codes
WS_CLOSE_GOING_AWAY_CODE = 1001
WS_CLOSE_PROTOCOL_ERROR_CODE = 1002
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_MAX_DURATION_CODE = 4003

WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"

# Errors (error frame `code` values)
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_INVALID_MESSAGE = "invalid_message"
WS_ERROR_INVALID_PAYLOAD = "invalid_payload"
WS_ERROR_UNKNOWN_MESSAGE_TYPE = "unknown_message_type"
WS_ERROR_DUPLICATE_REQUEST = "duplicate_request"
WS_ERROR_TOO_MANY_REQUESTS = "too_many_requests"
WS_ERROR_RATE_LIMITED = "rate_limited"
WS_ERROR_INTERNAL = "internal_error"

# Env-tunable settings (parsed by runtime.settings_loader)
ENV_WS_ENDPOINT_PATH = "WS_ENDPOINT_PATH"
ENV_WS_HEARTBEAT_INTERVAL_S = "WS_HEARTBEAT_INTERVAL_S"
ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
ENV_WS_MAX_CONNECTION_DURATION_S = "WS_MAX_CONNECTION_DURATION_S"

DEFAULT_WS_ENDPOINT_PATH = "/api/chat/websocket"
DEFAULT_WS_HEARTBEAT_INTERVAL_S = 30.0
DEFAULT_WS_IDLE_TIMEOUT_S = 0.0
DEFAULT_WS_WATCHDOG_TICK_S = 5.0
DEFAULT_WS_MAX_CONNECTION_DURATION_S = 0.0

__all__ = [
    "WS_KEY_TYPE",
    "WS_KEY_REQUEST_ID",
    "WS_KEY_MESSAGES",
    "WS_KEY_TEXT",
    "WS_KEY_PARENT_REQUEST_ID",
    "WS_KEY_CONTENT",
    "WS_KEY_FINISH_REASON",
    "WS_KEY_TIMESTAMP",
    "WS_KEY_ERROR",
    "WS_KEY_CODE",
    "WS_FINISH_REASON_STOP",
    "WS_HANDSHAKE_GUID",
    "WS_SUPPORTED_VERSION",
    "WS_CLOSE_GOING_AWAY_CODE",
    "WS_CLOSE_PROTOCOL_ERROR_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_MAX_DURATION_REASON",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_INVALID_PAYLOAD",
    "WS_ERROR_UNKNOWN_MESSAGE_TYPE",
    "WS_ERROR_DUPLICATE_REQUEST",
    "WS_ERROR_TOO_MANY_REQUESTS",
    "WS_ERROR_RATE_LIMITED",
    "WS_ERROR_INTERNAL",
    "ENV_WS_ENDPOINT_PATH",
    "ENV_WS_HEARTBEAT_INTERVAL_S",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_WATCHDOG_TICK_S",
    "ENV_WS_MAX_CONNECTION_DURATION_S",
    "DEFAULT_WS_ENDPOINT_PATH",
    "DEFAULT_WS_HEARTBEAT_INTERVAL_S",
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "DEFAULT_WS_MAX_CONNECTION_DURATION_S",
]
