"""asyncio-backed scheduler for idle timers."""

from __future__ import annotations

import time
import asyncio
from collections.abc import Callable


class AsyncioScheduler:
    """Wall-clock timestamps plus loop timers.

    `now_ms` uses epoch time so values written to shared storage mean the same
    thing to every tab; timers run on the running loop's monotonic clock.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def now_ms(self) -> float:
        return time.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay_ms) / 1000.0, callback)


__all__ = ["AsyncioScheduler"]
