"""Main FastAPI server for the chat streaming gateway."""

from __future__ import annotations

import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from chat_gateway import __version__
from chat_gateway.protocol.builders import now_ms
from chat_gateway.runtime.logging import configure_logging
from chat_gateway.runtime.dependencies import build_runtime_deps
from chat_gateway.runtime.settings_loader import load_endpoint_path
from chat_gateway.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

configure_logging()

WS_ENDPOINT_PATH = load_endpoint_path()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    runtime_deps = await build_runtime_deps()
    app.state.runtime_deps = runtime_deps
    app.state.started_at = time.monotonic()
    logger.info("runtime: ready (websocket at %s)", WS_ENDPOINT_PATH)
    try:
        yield
    finally:
        deps = getattr(app.state, "runtime_deps", None)
        if deps is not None:
            await deps.shutdown()


app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)


@app.get("/")
async def root() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health")
async def health() -> dict[str, object]:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    started_at = getattr(app.state, "started_at", None)
    return {
        "status": "healthy",
        "timestamp": now_ms(),
        "uptime": round(time.monotonic() - started_at, 3) if started_at is not None else 0.0,
        "version": __version__,
        "activeConnections": runtime_deps.connections.get_connection_count() if runtime_deps is not None else 0,
    }


@app.get(WS_ENDPOINT_PATH)
async def websocket_plain_http() -> ORJSONResponse:
    return ORJSONResponse({"error": "Wrong protocol detected."}, status_code=400)


@app.websocket(WS_ENDPOINT_PATH)
async def websocket_endpoint(websocket: WebSocket) -> None:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    await handle_websocket_connection(websocket, runtime_deps)
