"""Outbound frames: envelope encoding, error replies and connection rejection."""

from __future__ import annotations

import logging
import contextlib
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from idle_guard.config.websocket import (
    WS_KEY_TYPE,
    WS_MSG_ERROR,
    WS_KEY_PAYLOAD,
    WS_KEY_REQUEST_ID,
    WS_KEY_SESSION_ID,
    WS_ERROR_AUTH_FAILED,
    WS_ERROR_RATE_LIMITED,
    WS_UNKNOWN_REQUEST_ID,
    WS_UNKNOWN_SESSION_ID,
    WS_ERROR_INVALID_MESSAGE,
    WS_ERROR_INVALID_PAYLOAD,
    WS_ERROR_SERVER_AT_CAPACITY,
)

logger = logging.getLogger(__name__)

ERROR_CODES = frozenset(
    {
        WS_ERROR_AUTH_FAILED,
        WS_ERROR_SERVER_AT_CAPACITY,
        WS_ERROR_INVALID_MESSAGE,
        WS_ERROR_INVALID_PAYLOAD,
        WS_ERROR_RATE_LIMITED,
    }
)


def encode_envelope(
    msg_type: str,
    *,
    session_id: str | None,
    request_id: str | None,
    payload: dict[str, Any] | None = None,
) -> str:
    return orjson.dumps(
        {
            WS_KEY_TYPE: msg_type,
            WS_KEY_SESSION_ID: session_id or WS_UNKNOWN_SESSION_ID,
            WS_KEY_REQUEST_ID: request_id or WS_UNKNOWN_REQUEST_ID,
            WS_KEY_PAYLOAD: payload or {},
        }
    ).decode("utf-8")


async def send_envelope(
    ws: WebSocket,
    msg_type: str,
    *,
    session_id: str | None,
    request_id: str | None,
    payload: dict[str, Any] | None = None,
) -> bool:
    """Send one frame. Returns False once the client is gone."""
    text = encode_envelope(msg_type, session_id=session_id, request_id=request_id, payload=payload)
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("dropping %s frame: send failed", msg_type, exc_info=True)
        return False
    return True


async def send_error(
    ws: WebSocket,
    code: str,
    message: str,
    *,
    session_id: str | None = None,
    request_id: str | None = None,
    reason_code: str | None = None,
    details: dict[str, Any] | None = None,
) -> bool:
    if code not in ERROR_CODES:
        raise ValueError(f"unknown error code {code!r}")
    body = dict(details or {})
    body.setdefault("reason_code", reason_code or code)
    return await send_envelope(
        ws,
        WS_MSG_ERROR,
        session_id=session_id,
        request_id=request_id,
        payload={"code": code, "message": message, "details": body},
    )


async def reject_connection(ws: WebSocket, code: str, message: str, *, close_code: int) -> None:
    """Accept just long enough to explain the refusal, then close with `close_code`."""
    try:
        await ws.accept()
    except Exception:
        logger.debug("could not accept rejected connection", exc_info=True)
        return
    await send_error(ws, code, message)
    with contextlib.suppress(Exception):
        await ws.close(code=close_code, reason=message)


__all__ = ["ERROR_CODES", "encode_envelope", "reject_connection", "send_envelope", "send_error"]
