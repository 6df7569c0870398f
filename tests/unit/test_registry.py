from __future__ import annotations

from idle_guard.session import SessionScopeRegistry
from idle_guard.config.idle import STORAGE_KEY_LAST_ACTIVE


def _registry(clock: dict[str, float]) -> SessionScopeRegistry:
    return SessionScopeRegistry(idle_max_ms=15000, now_fn=lambda: clock["t"])


def test_scope_without_clock_is_evicted_when_last_tab_leaves() -> None:
    registry = _registry({"t": 0.0})
    view = registry.attach_storage("s1")
    channel = registry.open_channel("s1", "idle")

    view.close()
    assert registry.release("s1") is False
    assert "s1" in registry

    channel.close()
    assert registry.release("s1") is True
    assert len(registry) == 0


def test_running_clock_keeps_scope_until_budget_expires() -> None:
    clock = {"t": 1000.0}
    registry = _registry(clock)
    view = registry.attach_storage("s1")
    view.set(STORAGE_KEY_LAST_ACTIVE, "1000")
    view.close()

    clock["t"] = 15999.0
    assert registry.release("s1") is False
    assert "s1" in registry

    clock["t"] = 16000.0
    assert registry.release("s1") is True
    assert "s1" not in registry


def test_release_prunes_other_expired_scopes() -> None:
    clock = {"t": 0.0}
    registry = _registry(clock)
    stale = registry.attach_storage("stale")
    stale.set(STORAGE_KEY_LAST_ACTIVE, "0")
    stale.close()
    live = registry.attach_storage("live")

    clock["t"] = 20000.0
    registry.open_channel("other", "idle").close()
    registry.release("other")

    assert "stale" not in registry
    assert "other" not in registry
    assert "live" in registry
    live.close()
