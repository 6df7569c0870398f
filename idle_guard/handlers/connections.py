"""Admission control for WebSocket tabs, tracked per session scope."""

from __future__ import annotations

import asyncio
from typing import Any


class ConnectionManager:
    """Caps concurrent tabs and remembers which scope each tab joined."""

    def __init__(self, *, max_connections: int) -> None:
        self.max_connections = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        # id(ws) -> scope key, None until the tab sends session.update
        self._tabs: dict[int, str | None] = {}

    async def admit(self, ws: Any) -> bool:
        """Reserve a slot for `ws` before the handshake is accepted."""
        async with self._lock:
            if len(self._tabs) >= self.max_connections:
                return False
            self._tabs[id(ws)] = None
            return True

    def bind(self, ws: Any, scope_key: str) -> int:
        """Record the scope `ws` joined and return how many tabs share it."""
        if id(ws) in self._tabs:
            self._tabs[id(ws)] = scope_key
        return self.tabs_in_scope(scope_key)

    async def release(self, ws: Any) -> str | None:
        async with self._lock:
            return self._tabs.pop(id(ws), None)

    def tabs_in_scope(self, scope_key: str) -> int:
        return sum(1 for key in self._tabs.values() if key == scope_key)

    def __len__(self) -> int:
        return len(self._tabs)


__all__ = ["ConnectionManager"]
