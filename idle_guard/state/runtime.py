"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from idle_guard.state.settings import AppSettings
    from idle_guard.handlers.connections import ConnectionManager
    from idle_guard.session.registry import SessionScopeRegistry


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    scopes: SessionScopeRegistry
    settings: AppSettings

    async def shutdown(self) -> None:
        logger.info("runtime: shutting down with %s scope(s)", len(self.scopes))


__all__ = ["RuntimeDeps"]
