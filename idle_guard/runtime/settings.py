"""Environment parsing for runtime settings."""

from __future__ import annotations

import os

from idle_guard.config.secrets import ENV_IDLE_GUARD_API_KEY
from idle_guard.state.settings import AppSettings, AuthSettings, IdleSettings, LimitsSettings
from idle_guard.config.idle import (
    ENV_IDLE_MAX_MS,
    ENV_IDLE_WARNING_MS,
    DEFAULT_IDLE_MAX_MS,
    ENV_IDLE_LOGIN_ROUTE,
    ENV_IDLE_CHANNEL_NAME,
    DEFAULT_IDLE_WARNING_MS,
    DEFAULT_IDLE_LOGIN_ROUTE,
    DEFAULT_IDLE_CHANNEL_NAME,
)
from idle_guard.config.limits import (
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _validate_idle_budget(idle_max_ms: int, warning_ms: int) -> None:
    if idle_max_ms <= 0 or warning_ms <= 0:
        raise ValueError(f"{ENV_IDLE_MAX_MS} and {ENV_IDLE_WARNING_MS} must be positive")
    if warning_ms >= idle_max_ms:
        raise ValueError(
            f"{ENV_IDLE_WARNING_MS} ({warning_ms}) must be smaller than {ENV_IDLE_MAX_MS} ({idle_max_ms})"
        )


def _load_idle_settings() -> IdleSettings:
    idle_max_ms = _int_env(ENV_IDLE_MAX_MS, DEFAULT_IDLE_MAX_MS)
    warning_ms = _int_env(ENV_IDLE_WARNING_MS, DEFAULT_IDLE_WARNING_MS)
    _validate_idle_budget(idle_max_ms, warning_ms)

    login_route = _str_env(ENV_IDLE_LOGIN_ROUTE, DEFAULT_IDLE_LOGIN_ROUTE)
    if not login_route.startswith("/"):
        login_route = f"/{login_route}"

    return IdleSettings(
        idle_max_ms=idle_max_ms,
        warning_ms=warning_ms,
        login_route=login_route,
        channel_name=_str_env(ENV_IDLE_CHANNEL_NAME, DEFAULT_IDLE_CHANNEL_NAME),
    )


def _load_auth_settings() -> AuthSettings:
    api_key = (os.getenv(ENV_IDLE_GUARD_API_KEY) or "").strip()
    return AuthSettings(api_key=api_key)


def _load_limits_settings() -> LimitsSettings:
    max_connections = max(1, _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS))
    msg_window = _float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS)
    if msg_window <= 0:
        msg_window = DEFAULT_WS_MESSAGE_WINDOW_SECONDS
    msg_limit = max(1, _int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW))

    return LimitsSettings(
        max_concurrent_connections=max_connections,
        ws_message_window_seconds=msg_window,
        ws_max_messages_per_window=msg_limit,
    )


def load_settings() -> AppSettings:
    return AppSettings(
        idle=_load_idle_settings(),
        auth=_load_auth_settings(),
        limits=_load_limits_settings(),
    )


__all__ = ["load_settings"]
