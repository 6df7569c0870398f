"""Admission control and rate limit configuration (env-resolved constants only)."""

from __future__ import annotations

import os

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"
ENV_WS_MESSAGE_WINDOW_SECONDS = "WS_MESSAGE_WINDOW_SECONDS"
ENV_WS_MAX_MESSAGES_PER_WINDOW = "WS_MAX_MESSAGES_PER_WINDOW"

DEFAULT_MAX_CONCURRENT_CONNECTIONS: int = 100
DEFAULT_WS_MESSAGE_WINDOW_SECONDS: float = 60.0
# Clients forward pointer movement, so allow ~10 messages/s sustained.
DEFAULT_WS_MAX_MESSAGES_PER_WINDOW: int = 600

_MAX_CONCURRENT_CONNECTIONS_RAW = (os.getenv(ENV_MAX_CONCURRENT_CONNECTIONS) or "").strip()
try:
    MAX_CONCURRENT_CONNECTIONS: int = (
        int(_MAX_CONCURRENT_CONNECTIONS_RAW) if _MAX_CONCURRENT_CONNECTIONS_RAW else DEFAULT_MAX_CONCURRENT_CONNECTIONS
    )
except Exception:
    MAX_CONCURRENT_CONNECTIONS = DEFAULT_MAX_CONCURRENT_CONNECTIONS
MAX_CONCURRENT_CONNECTIONS = max(1, int(MAX_CONCURRENT_CONNECTIONS))

_WS_MESSAGE_WINDOW_SECONDS_RAW = (os.getenv(ENV_WS_MESSAGE_WINDOW_SECONDS) or "").strip()
try:
    WS_MESSAGE_WINDOW_SECONDS: float = (
        float(_WS_MESSAGE_WINDOW_SECONDS_RAW) if _WS_MESSAGE_WINDOW_SECONDS_RAW else DEFAULT_WS_MESSAGE_WINDOW_SECONDS
    )
except Exception:
    WS_MESSAGE_WINDOW_SECONDS = DEFAULT_WS_MESSAGE_WINDOW_SECONDS
if WS_MESSAGE_WINDOW_SECONDS <= 0:
    WS_MESSAGE_WINDOW_SECONDS = DEFAULT_WS_MESSAGE_WINDOW_SECONDS

_WS_MAX_MESSAGES_PER_WINDOW_RAW = (os.getenv(ENV_WS_MAX_MESSAGES_PER_WINDOW) or "").strip()
try:
    WS_MAX_MESSAGES_PER_WINDOW: int = (
        int(_WS_MAX_MESSAGES_PER_WINDOW_RAW) if _WS_MAX_MESSAGES_PER_WINDOW_RAW else DEFAULT_WS_MAX_MESSAGES_PER_WINDOW
    )
except Exception:
    WS_MAX_MESSAGES_PER_WINDOW = DEFAULT_WS_MAX_MESSAGES_PER_WINDOW
WS_MAX_MESSAGES_PER_WINDOW = max(1, int(WS_MAX_MESSAGES_PER_WINDOW))

__all__ = [
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_WS_MAX_MESSAGES_PER_WINDOW",
    "DEFAULT_WS_MESSAGE_WINDOW_SECONDS",
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "ENV_WS_MAX_MESSAGES_PER_WINDOW",
    "ENV_WS_MESSAGE_WINDOW_SECONDS",
    "MAX_CONCURRENT_CONNECTIONS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "WS_MESSAGE_WINDOW_SECONDS",
]
