"""Coordinator fixtures that record sign-out/navigation side effects."""

from __future__ import annotations

from dataclasses import field, dataclass

from idle_guard.state import IdleSnapshot
from idle_guard.session import BroadcastHub, SharedStorageArea, IdleSessionCoordinator

from .scheduler import ManualScheduler


@dataclass
class TabRecorder:
    sign_outs: int = 0
    routes: list[str] = field(default_factory=list)
    snapshots: list[IdleSnapshot] = field(default_factory=list)
    fail_sign_out: bool = False

    def sign_out(self) -> None:
        self.sign_outs += 1
        if self.fail_sign_out:
            raise RuntimeError("identity provider unreachable")

    def navigate(self, route: str) -> None:
        self.routes.append(route)


def make_tab(
    scheduler: ManualScheduler,
    *,
    area: SharedStorageArea | None = None,
    hub: BroadcastHub | None = None,
    storage=None,
    channel=None,
    idle_max_ms: int = 15000,
    warning_ms: int = 5000,
    recorder: TabRecorder | None = None,
) -> tuple[IdleSessionCoordinator, TabRecorder]:
    recorder = recorder or TabRecorder()
    if storage is None and area is not None:
        storage = area.attach()
    if channel is None and hub is not None:
        channel = hub.open("idle")
    coordinator = IdleSessionCoordinator(
        scheduler=scheduler,
        sign_out=recorder.sign_out,
        navigate=recorder.navigate,
        storage=storage,
        channel=channel,
        idle_max_ms=idle_max_ms,
        warning_ms=warning_ms,
    )
    coordinator.subscribe(recorder.snapshots.append)
    return coordinator, recorder


__all__ = ["TabRecorder", "make_tab"]
