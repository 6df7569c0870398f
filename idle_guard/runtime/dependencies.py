"""Runtime dependency construction (scope registry + admission control)."""

from __future__ import annotations

import logging

from idle_guard.state import RuntimeDeps
from idle_guard.state.settings import AppSettings
from idle_guard.session.registry import SessionScopeRegistry
from idle_guard.handlers.connections import ConnectionManager

from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    logger.info(
        "idle budget %sms (warning %sms), login route %s",
        settings.idle.idle_max_ms,
        settings.idle.warning_ms,
        settings.idle.login_route,
    )

    return RuntimeDeps(
        connections=ConnectionManager(max_connections=settings.limits.max_concurrent_connections),
        scopes=SessionScopeRegistry(idle_max_ms=settings.idle.idle_max_ms),
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
