"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from idle_guard.state import RuntimeDeps
from idle_guard.handlers.limits import MessageRateLimiter
from idle_guard.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_ERROR_AUTH_FAILED,
    WS_UNLIMITED_MESSAGE_TYPES,
    WS_CLOSE_UNAUTHORIZED_CODE,
    WS_ERROR_SERVER_AT_CAPACITY,
)

from .outbound import reject_connection
from .auth import authenticate_websocket
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


def _create_rate_limiter(runtime_deps: RuntimeDeps) -> MessageRateLimiter:
    return MessageRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_messages_per_window,
        window_seconds=runtime_deps.settings.limits.ws_message_window_seconds,
        exempt_types=WS_UNLIMITED_MESSAGE_TYPES,
    )


async def _prepare_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> bool:
    if not await authenticate_websocket(ws, expected_api_key=runtime_deps.settings.auth.api_key):
        await reject_connection(
            ws,
            code=WS_ERROR_AUTH_FAILED,
            message=(
                "Authentication required. Provide valid API key via 'api_key' query parameter or 'X-API-Key' header."
            ),
            close_code=WS_CLOSE_UNAUTHORIZED_CODE,
        )
        return False

    if not await runtime_deps.connections.admit(ws):
        await reject_connection(
            ws,
            code=WS_ERROR_SERVER_AT_CAPACITY,
            message="Server cannot accept new connections. Please try again later.",
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.release(ws)
        raise
    return True


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    admitted = False
    session_id: str | None = None
    try:
        if not await _prepare_connection(ws, runtime_deps):
            return
        admitted = True

        logger.info("WebSocket connection accepted. Active: %s", len(runtime_deps.connections))
        session_id = await run_message_loop(ws, _create_rate_limiter(runtime_deps), runtime_deps)
    finally:
        if admitted:
            with contextlib.suppress(Exception):
                await runtime_deps.connections.release(ws)
            logger.info(
                "WebSocket connection closed session_id=%s. Active: %s",
                session_id,
                len(runtime_deps.connections),
            )


__all__ = ["handle_websocket_connection"]
