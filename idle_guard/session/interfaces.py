"""Collaborator contracts consumed by the idle coordinator."""

from __future__ import annotations

from typing import Any, Protocol
from collections.abc import Callable

from idle_guard.state.storage import StorageChange

Unsubscribe = Callable[[], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def now_ms(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class SharedStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def on_change(self, handler: Callable[[StorageChange], None]) -> Unsubscribe: ...


class BroadcastEndpoint(Protocol):
    """Best-effort: messages may be missed and carry no ordering guarantee."""

    def post_message(self, payload: dict[str, Any]) -> None: ...

    def on_message(self, handler: Callable[[dict[str, Any]], None]) -> Unsubscribe: ...

    def close(self) -> None: ...


__all__ = ["BroadcastEndpoint", "Scheduler", "SharedStorage", "TimerHandle", "Unsubscribe"]
