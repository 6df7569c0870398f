from __future__ import annotations

import time
import asyncio

import pytest

from idle_guard.session import AsyncioScheduler


def test_now_ms_is_wall_clock() -> None:
    before = time.time() * 1000.0
    now = AsyncioScheduler().now_ms()
    assert before <= now <= time.time() * 1000.0


@pytest.mark.asyncio
async def test_call_later_fires_and_cancels() -> None:
    scheduler = AsyncioScheduler()
    fired = asyncio.Event()
    cancelled: list[str] = []

    scheduler.call_later(10, fired.set)
    handle = scheduler.call_later(10, lambda: cancelled.append("fired"))
    handle.cancel()

    await asyncio.wait_for(fired.wait(), timeout=1.0)
    await asyncio.sleep(0.03)
    assert cancelled == []
