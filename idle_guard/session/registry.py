"""Storage areas and broadcast hubs keyed by scope (one per signed-in session)."""

from __future__ import annotations

import time
import logging
from collections.abc import Callable
from dataclasses import field, dataclass

from idle_guard.config.idle import STORAGE_KEY_LAST_ACTIVE

from .channel import BroadcastChannel
from .channel_hub import BroadcastHub
from .storage_area import SharedStorageArea
from .storage_view import SharedStorageView

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> float:
    return time.time() * 1000.0


@dataclass(slots=True)
class SessionScope:
    storage: SharedStorageArea = field(default_factory=SharedStorageArea)
    hub: BroadcastHub = field(default_factory=BroadcastHub)

    @property
    def in_use(self) -> bool:
        return self.storage.view_count > 0 or not self.hub.is_empty


class SessionScopeRegistry:
    """Scopes outlive individual connections while their shared clock still runs.

    A scope nobody is attached to is dropped once it holds no `lastActiveAt`
    or that timestamp is older than the idle budget: a tab joining later would
    be logged out (or start fresh) either way.
    """

    def __init__(self, *, idle_max_ms: int, now_fn: Callable[[], float] | None = None) -> None:
        self._idle_max_ms = int(idle_max_ms)
        self._now_ms = now_fn or _wall_clock_ms
        self._scopes: dict[str, SessionScope] = {}

    def scope(self, key: str) -> SessionScope:
        scope = self._scopes.get(key)
        if scope is None:
            scope = SessionScope()
            self._scopes[key] = scope
        return scope

    def attach_storage(self, key: str) -> SharedStorageView:
        return self.scope(key).storage.attach()

    def open_channel(self, key: str, name: str) -> BroadcastChannel:
        return self.scope(key).hub.open(name)

    def release(self, key: str) -> bool:
        """Called after a tab detached from `key`; evicts it and any other expired scope."""
        evicted = self._evict_if_expired(key)
        self.prune()
        return evicted

    def prune(self) -> int:
        return sum(1 for key in list(self._scopes) if self._evict_if_expired(key))

    def _evict_if_expired(self, key: str) -> bool:
        scope = self._scopes.get(key)
        if scope is None or scope.in_use:
            return False
        last_active = self._last_active(scope)
        if last_active is not None and self._now_ms() - last_active < self._idle_max_ms:
            return False
        del self._scopes[key]
        logger.debug("evicted session scope=%s", key)
        return True

    @staticmethod
    def _last_active(scope: SessionScope) -> float | None:
        raw = scope.storage.read(STORAGE_KEY_LAST_ACTIVE)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            return None

    def __contains__(self, key: object) -> bool:
        return key in self._scopes

    def __len__(self) -> int:
        return len(self._scopes)


__all__ = ["SessionScope", "SessionScopeRegistry"]
