"""Rate-limit replies for the WebSocket message loop."""

from __future__ import annotations

import math

from fastapi import WebSocket

from idle_guard.errors import RateLimitError
from idle_guard.config.websocket import WS_ERROR_RATE_LIMITED
from idle_guard.handlers.limits import MessageRateLimiter

from .outbound import send_error


async def consume_limiter(
    ws: WebSocket,
    limiter: MessageRateLimiter,
    msg_type: str,
    *,
    session_id: str,
    request_id: str,
) -> bool:
    """Count `msg_type` against the budget; on refusal tell the client when to retry."""
    try:
        limiter.consume(msg_type)
    except RateLimitError as exc:
        retry_in_s = max(1, math.ceil(exc.retry_in))
        window_s = int(exc.window_seconds)
        await send_error(
            ws,
            WS_ERROR_RATE_LIMITED,
            f"message rate limit: at most {exc.limit} per {window_s} seconds; retry in {retry_in_s} seconds",
            session_id=session_id,
            request_id=request_id,
            reason_code="message_rate_limited",
            details={"retry_in": retry_in_s, "limit": exc.limit, "window_seconds": window_s},
        )
        return False
    return True


__all__ = ["consume_limiter"]
