"""Idle session configuration (env-resolved constants only)."""

from __future__ import annotations

import os

ENV_IDLE_MAX_MS = "IDLE_MAX_MS"
ENV_IDLE_WARNING_MS = "IDLE_WARNING_MS"
ENV_IDLE_LOGIN_ROUTE = "IDLE_LOGIN_ROUTE"
ENV_IDLE_CHANNEL_NAME = "IDLE_CHANNEL_NAME"

# 15 min of inactivity, the last 60s of which show a countdown.
DEFAULT_IDLE_MAX_MS: int = 15 * 60 * 1000
DEFAULT_IDLE_WARNING_MS: int = 60 * 1000
DEFAULT_IDLE_LOGIN_ROUTE = "/login"
DEFAULT_IDLE_CHANNEL_NAME = "idle"

# Shared storage keys
STORAGE_KEY_LAST_ACTIVE = "idle:lastActiveAt"
STORAGE_KEY_FORCE_LOGOUT = "idle:forceLogout"
STORAGE_KEY_RESET = "idle:reset"

# Broadcast payload types
SIGNAL_RESET = "RESET"
SIGNAL_FORCE_LOGOUT = "FORCE_LOGOUT"

COUNTDOWN_TICK_MS: int = 1000

INTERACTION_EVENTS: frozenset[str] = frozenset(
    {"mousemove", "keydown", "click", "scroll", "touchstart", "visibilitychange"}
)


def _get_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return int(default)
    try:
        return int(float(raw))
    except Exception:
        return int(default)


def _get_str(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip()
    return raw if raw else default


IDLE_MAX_MS: int = _get_int(ENV_IDLE_MAX_MS, DEFAULT_IDLE_MAX_MS)
IDLE_WARNING_MS: int = _get_int(ENV_IDLE_WARNING_MS, DEFAULT_IDLE_WARNING_MS)
IDLE_LOGIN_ROUTE: str = _get_str(ENV_IDLE_LOGIN_ROUTE, DEFAULT_IDLE_LOGIN_ROUTE)
IDLE_CHANNEL_NAME: str = _get_str(ENV_IDLE_CHANNEL_NAME, DEFAULT_IDLE_CHANNEL_NAME)

__all__ = [
    "COUNTDOWN_TICK_MS",
    "DEFAULT_IDLE_CHANNEL_NAME",
    "DEFAULT_IDLE_LOGIN_ROUTE",
    "DEFAULT_IDLE_MAX_MS",
    "DEFAULT_IDLE_WARNING_MS",
    "ENV_IDLE_CHANNEL_NAME",
    "ENV_IDLE_LOGIN_ROUTE",
    "ENV_IDLE_MAX_MS",
    "ENV_IDLE_WARNING_MS",
    "IDLE_CHANNEL_NAME",
    "IDLE_LOGIN_ROUTE",
    "IDLE_MAX_MS",
    "IDLE_WARNING_MS",
    "INTERACTION_EVENTS",
    "SIGNAL_FORCE_LOGOUT",
    "SIGNAL_RESET",
    "STORAGE_KEY_FORCE_LOGOUT",
    "STORAGE_KEY_LAST_ACTIVE",
    "STORAGE_KEY_RESET",
]
