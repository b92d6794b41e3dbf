"""Logging initialization."""

from __future__ import annotations

import logging

from chat_gateway.config.logging import (
    LOG_LEVEL,
    LOG_FORMAT,
    SHOW_BACKEND_LOGS,
    NOISY_BACKEND_LOGGERS,
)


def configure_logging() -> None:
    # The Google client stack is chatty at INFO. Keep it tame unless explicitly enabled.
    if not SHOW_BACKEND_LOGS:
        for name in NOISY_BACKEND_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
