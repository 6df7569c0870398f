"""Dispatch handlers for WebSocket JSON envelope messages."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocket

from idle_guard.state import EnvelopeState, RuntimeDeps
from idle_guard.config.websocket import WS_ERROR_INVALID_PAYLOAD

from .tab import WebSocketTab
from .outbound import send_error

logger = logging.getLogger(__name__)

HandlerFn = Callable[
    [WebSocket, RuntimeDeps, EnvelopeState, WebSocketTab | None, str, str, dict[str, Any]],
    Awaitable[WebSocketTab | None],
]

_UNSET = object()


async def _require_tab(
    ws: WebSocket,
    tab: WebSocketTab | None,
    *,
    session_id: str,
    request_id: str,
) -> bool:
    if tab is not None:
        return True
    await send_error(
        ws,
        session_id=session_id,
        request_id=request_id,
        code=WS_ERROR_INVALID_PAYLOAD,
        message="no session; send session.update first",
        reason_code="no_session",
    )
    return False


async def _handle_session_update(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: EnvelopeState,
    tab: WebSocketTab | None,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
) -> WebSocketTab | None:
    if state.bound_session_id is not None and state.bound_session_id != session_id:
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            code=WS_ERROR_INVALID_PAYLOAD,
            message="session_id does not match the session this connection joined",
            reason_code="session_id_mismatch",
            details={"bound_session_id": state.bound_session_id},
        )
        return tab

    user = payload.get("user", _UNSET)
    if user is not _UNSET and user is not None and (not isinstance(user, str) or not user.strip()):
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            code=WS_ERROR_INVALID_PAYLOAD,
            message="payload.user must be a non-empty string or null",
            reason_code="invalid_user",
        )
        return tab

    route = payload.get("route", _UNSET)
    if route is not _UNSET and not isinstance(route, str):
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            code=WS_ERROR_INVALID_PAYLOAD,
            message="payload.route must be a string",
            reason_code="invalid_route",
        )
        return tab

    if tab is None:
        tab = WebSocketTab(ws, scope_key=session_id, runtime_deps=runtime_deps, state=state)
        tab.start()
        state.bound_session_id = session_id
        tabs = runtime_deps.connections.bind(ws, session_id)
        logger.info("tab joined scope=%s tabs=%s", session_id, tabs)

    if route is not _UNSET:
        tab.gate.set_route(route.strip() or "/")
    if user is not _UNSET:
        tab.gate.set_user(user.strip() if isinstance(user, str) else None)

    tab.push_state()
    return tab


async def _handle_activity(
    ws: WebSocket,
    _runtime_deps: RuntimeDeps,
    _state: EnvelopeState,
    tab: WebSocketTab | None,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
) -> WebSocketTab | None:
    if not await _require_tab(ws, tab, session_id=session_id, request_id=request_id):
        return tab

    event = payload.get("event")
    if not isinstance(event, str) or not event.strip():
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            code=WS_ERROR_INVALID_PAYLOAD,
            message="payload.event is required",
            reason_code="missing_event",
        )
        return tab

    tab.gate.record_interaction(event.strip(), hidden=bool(payload.get("hidden", False)))
    return tab


async def _handle_extend(
    ws: WebSocket,
    _runtime_deps: RuntimeDeps,
    _state: EnvelopeState,
    tab: WebSocketTab | None,
    session_id: str,
    request_id: str,
    _payload: dict[str, Any],
) -> WebSocketTab | None:
    if not await _require_tab(ws, tab, session_id=session_id, request_id=request_id):
        return tab

    before = tab.coordinator.snapshot()
    tab.gate.extend_session()
    # A phase change was already queued by the snapshot listener.
    if tab.coordinator.snapshot() == before:
        tab.push_state()
    return tab


HANDLERS: dict[str, HandlerFn] = {
    "session.update": _handle_session_update,
    "activity": _handle_activity,
    "extend": _handle_extend,
}

__all__ = ["HANDLERS", "HandlerFn"]
