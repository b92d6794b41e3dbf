"""Text preparation for speech synthesis requests."""

from __future__ import annotations

import re

from chat_gateway.config.speech import TTS_MAX_TEXT_CHARS, TTS_SHORT_TEXT_CHARS

_SENTENCE_END_RE = re.compile(r"[.!?]")


def clean_speech_text(text: str) -> str:
    """Drop markdown emphasis and control characters; collapse whitespace."""
    kept = "".join(ch for ch in text if ch != "*" and (ch.isprintable() or ch.isspace()))
    return " ".join(kept.split())


def limit_speech_text(text: str) -> str:
    """Trim to roughly the first sentence.

    Short texts are kept whole. Otherwise the text ends at the first sentence
    end past the short-text mark, falling back to the first sentence end
    anywhere, and finally to a hard character cap.
    """
    if len(text) <= TTS_SHORT_TEXT_CHARS:
        return text
    match = _SENTENCE_END_RE.search(text, TTS_SHORT_TEXT_CHARS)
    if match is not None:
        return text[: match.end()]
    match = _SENTENCE_END_RE.search(text)
    if match is not None and match.end() <= TTS_MAX_TEXT_CHARS:
        return text[: match.end()]
    return text[:TTS_MAX_TEXT_CHARS]


def prepare_speech_text(text: str, *, full_length: bool) -> str:
    cleaned = clean_speech_text(text)
    return cleaned if full_length else limit_speech_text(cleaned)


__all__ = ["clean_speech_text", "limit_speech_text", "prepare_speech_text"]
