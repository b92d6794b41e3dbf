"""Tutor reply layout and post-processing of its parsed fields."""

from __future__ import annotations

from typing import Any

from chat_gateway.config.prompts import (
    TUTOR_JSON_KEYS,
    TUTOR_REPLY_KEYS,
    TUTOR_STREAM_KEYS,
    TUTOR_OPTIONAL_KEYS,
    TUTOR_REPLY_DELIMITER,
    TUTOR_REPLY_TERMINATOR,
)

from .reply_parser import ReplyLayout

TUTOR_LAYOUT = ReplyLayout(
    keys=TUTOR_REPLY_KEYS,
    stream_keys=TUTOR_STREAM_KEYS,
    optional_keys=TUTOR_OPTIONAL_KEYS,
    json_keys=TUTOR_JSON_KEYS,
    delimiter=TUTOR_REPLY_DELIMITER,
    terminator=TUTOR_REPLY_TERMINATOR,
)


def normalize_translations(raw: Any) -> Any:
    """Key a list of translation items by lowercased word.

    Anything that is not a list is returned unchanged.
    """
    if not isinstance(raw, list):
        return raw
    out: dict[str, dict[str, Any]] = {}
    for item in raw:
        if not isinstance(item, dict):
            continue
        word = str(item.get("word") or "")
        if not word:
            continue
        out[word.lower()] = {
            "word": item.get("word"),
            "english": item.get("translation"),
            "phonetic": item.get("phonetic"),
            "audioUrl": item.get("audio") or "",
        }
    return out


def shape_tutor_fields(fields: dict[str, Any]) -> dict[str, Any]:
    shaped = dict(fields)
    if "translations" in shaped:
        shaped["translations"] = normalize_translations(shaped["translations"])
    return shaped


__all__ = ["TUTOR_LAYOUT", "normalize_translations", "shape_tutor_fields"]
