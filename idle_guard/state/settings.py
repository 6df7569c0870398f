"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IdleSettings:
    idle_max_ms: int
    warning_ms: int
    login_route: str
    channel_name: str


@dataclass(frozen=True, slots=True)
class AuthSettings:
    api_key: str


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    idle: IdleSettings
    auth: AuthSettings
    limits: LimitsSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "IdleSettings",
    "LimitsSettings",
]
