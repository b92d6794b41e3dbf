"""Chat history validation for inbound `chat_request` frames."""

from __future__ import annotations

from typing import Any, Literal
from dataclasses import dataclass

from chat_gateway.errors import HistoryValidationError

Role = Literal["user", "assistant"]


@dataclass(frozen=True, slots=True)
class ChatMessage:
    role: Role
    content: str


def parse_history(raw: Any) -> list[ChatMessage]:
    """Validate the `messages` field of a chat request.

    Any role other than "assistant" is treated as "user".
    """
    if not isinstance(raw, list):
        raise HistoryValidationError("Missing or invalid messages")

    history: list[ChatMessage] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise HistoryValidationError(f"messages[{idx}] must be an object")
        content = item.get("content")
        if not isinstance(content, str):
            raise HistoryValidationError(f"messages[{idx}].content must be a string")
        role: Role = "assistant" if item.get("role") == "assistant" else "user"
        history.append(ChatMessage(role=role, content=content))
    return history


__all__ = ["ChatMessage", "Role", "parse_history"]
