"""Run the gateway with uvicorn: `python -m chat_gateway`."""

from __future__ import annotations

import uvicorn

from chat_gateway.config.server import HOST, PORT
from chat_gateway.config.logging import LOG_LEVEL


def main() -> None:
    uvicorn.run("chat_gateway.server:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
