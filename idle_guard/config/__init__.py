"""Configuration module exports (env-resolved constants only)."""

from .limits import MAX_CONCURRENT_CONNECTIONS
from .idle import IDLE_MAX_MS, IDLE_WARNING_MS, IDLE_LOGIN_ROUTE, IDLE_CHANNEL_NAME

__all__ = [
    "IDLE_CHANNEL_NAME",
    "IDLE_LOGIN_ROUTE",
    "IDLE_MAX_MS",
    "IDLE_WARNING_MS",
    "MAX_CONCURRENT_CONNECTIONS",
]
