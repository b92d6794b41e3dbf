"""WebSocket upgrade validation (RFC 6455 section 4.2)."""

from __future__ import annotations

import base64
import hashlib
import binascii
from collections.abc import Mapping

from chat_gateway.errors import HandshakeError
from chat_gateway.config.websocket import WS_HANDSHAKE_GUID, WS_SUPPORTED_VERSION


def derive_accept_key(client_key: str) -> str:
    """Sec-WebSocket-Accept value for a client's Sec-WebSocket-Key."""
    digest = hashlib.sha1((client_key + WS_HANDSHAKE_GUID).encode("ascii")).digest()
    return base64.b64encode(digest).decode("ascii")


def validate_handshake(headers: Mapping[str, str]) -> str:
    """Check the upgrade headers and return the accept key.

    Header lookup must be case-insensitive (Starlette's `Headers` is).
    """
    client_key = (headers.get("sec-websocket-key") or "").strip()
    if not client_key:
        raise HandshakeError("missing Sec-WebSocket-Key")
    try:
        base64.b64decode(client_key, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HandshakeError("Sec-WebSocket-Key is not valid base64") from exc

    version = (headers.get("sec-websocket-version") or "").strip()
    if version != WS_SUPPORTED_VERSION:
        raise HandshakeError(f"unsupported Sec-WebSocket-Version {version!r}")

    return derive_accept_key(client_key)


__all__ = ["derive_accept_key", "validate_handshake"]
