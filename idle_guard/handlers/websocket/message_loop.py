"""WebSocket message loop for the idle session endpoint (/ws)."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any, Literal

from fastapi import WebSocket, WebSocketDisconnect

from idle_guard.state import EnvelopeState, RuntimeDeps
from idle_guard.handlers.limits import MessageRateLimiter
from idle_guard.config.websocket import (
    WS_RECEIVE_POLL_S,
    WS_ERROR_INVALID_MESSAGE,
    WS_CLOSE_IDLE_LOGOUT_CODE,
    WS_CLOSE_IDLE_LOGOUT_REASON,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)

from .tab import WebSocketTab
from .dispatch import HANDLERS
from .parser import parse_client_message
from .limits import consume_limiter
from .outbound import send_error, send_envelope

logger = logging.getLogger(__name__)


async def _recv_text_or_logout(ws: WebSocket, tab: WebSocketTab | None) -> tuple[str | None, bool]:
    if tab is not None and tab.logged_out:
        return None, True
    try:
        message = await asyncio.wait_for(ws.receive_text(), timeout=WS_RECEIVE_POLL_S)
        return message, False
    except TimeoutError:
        return None, tab is not None and tab.logged_out


async def _close_logged_out(ws: WebSocket, tab: WebSocketTab) -> None:
    with contextlib.suppress(Exception):
        await asyncio.wait_for(tab.drain(), timeout=WS_RECEIVE_POLL_S)
    logger.info("closing tab after idle logout scope=%s", tab.scope_key)
    with contextlib.suppress(Exception):
        await ws.close(code=WS_CLOSE_IDLE_LOGOUT_CODE, reason=WS_CLOSE_IDLE_LOGOUT_REASON)


async def _handle_control_message(
    ws: WebSocket,
    msg_type: str,
    *,
    session_id: str,
    request_id: str,
) -> Literal["none", "continue", "close"]:
    if msg_type == "ping":
        await send_envelope(ws, msg_type="pong", session_id=session_id, request_id=request_id, payload={})
        return "continue"
    if msg_type == "pong":
        return "continue"
    if msg_type == "end":
        await send_envelope(ws, msg_type="session_end", session_id=session_id, request_id=request_id, payload={})
        with contextlib.suppress(Exception):
            await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)
        return "close"
    return "none"


async def _parse_or_send_error(ws: WebSocket, raw: str, state: EnvelopeState) -> dict[str, Any] | None:
    try:
        return parse_client_message(raw)
    except ValueError as exc:
        await send_error(
            ws,
            session_id=state.session_id,
            request_id=state.request_id,
            code=WS_ERROR_INVALID_MESSAGE,
            message=str(exc),
            reason_code="invalid_message",
        )
        return None


async def run_message_loop(
    ws: WebSocket,
    message_limiter: MessageRateLimiter,
    runtime_deps: RuntimeDeps,
) -> str | None:
    state = EnvelopeState()
    tab: WebSocketTab | None = None

    try:
        while True:
            raw, logged_out = await _recv_text_or_logout(ws, tab)
            if logged_out and tab is not None:
                await _close_logged_out(ws, tab)
                return state.bound_session_id
            if raw is None:
                continue

            msg = await _parse_or_send_error(ws, raw, state)
            if msg is None:
                continue

            msg_type = msg["type"]
            session_id = msg["session_id"]
            request_id = msg["request_id"]
            payload = msg["payload"] or {}

            state.session_id = session_id
            state.request_id = request_id

            if not await consume_limiter(ws, message_limiter, msg_type, session_id=session_id, request_id=request_id):
                continue

            control = await _handle_control_message(ws, msg_type, session_id=session_id, request_id=request_id)
            if control == "close":
                return state.bound_session_id
            if control == "continue":
                continue

            handler = HANDLERS.get(msg_type)
            if handler is not None:
                tab = await handler(ws, runtime_deps, state, tab, session_id, request_id, payload)
                continue

            await send_error(
                ws,
                session_id=session_id,
                request_id=request_id,
                code=WS_ERROR_INVALID_MESSAGE,
                message=f"message type '{msg_type}' is not supported",
                reason_code="unknown_message_type",
            )
    except WebSocketDisconnect:
        return state.bound_session_id
    finally:
        if tab is not None:
            with contextlib.suppress(Exception):
                await tab.close()


__all__ = ["run_message_loop"]
