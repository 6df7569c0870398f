"""Per-tab idle session coordinator.

Each tab runs one coordinator. Tabs of the same scope agree on when to warn and
when to sign out through a shared `lastActiveAt` timestamp; broadcast signals only
make siblings react sooner. Every wake-up (local interaction, storage change,
broadcast) goes through `rearm()`, which cancels all pending timers and derives
new ones from the shared timestamp.
"""

from __future__ import annotations

import math
import logging
from typing import Any
from collections.abc import Callable

from idle_guard.state.phase import IdlePhase
from idle_guard.state.snapshot import IdleSnapshot
from idle_guard.state.storage import StorageChange
from idle_guard.errors import ChannelUnsupportedError, StorageUnavailableError
from idle_guard.config.idle import (
    IDLE_MAX_MS,
    SIGNAL_RESET,
    IDLE_WARNING_MS,
    IDLE_LOGIN_ROUTE,
    COUNTDOWN_TICK_MS,
    STORAGE_KEY_RESET,
    SIGNAL_FORCE_LOGOUT,
    STORAGE_KEY_LAST_ACTIVE,
    STORAGE_KEY_FORCE_LOGOUT,
)

from .interfaces import Scheduler, TimerHandle, Unsubscribe, SharedStorage, BroadcastEndpoint

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[IdleSnapshot], None]


class IdleSessionCoordinator:
    def __init__(
        self,
        *,
        scheduler: Scheduler,
        sign_out: Callable[[], None],
        navigate: Callable[[str], None],
        storage: SharedStorage | None = None,
        channel: BroadcastEndpoint | None = None,
        idle_max_ms: int | None = None,
        warning_ms: int | None = None,
        login_route: str | None = None,
    ) -> None:
        self._idle_max_ms = int(IDLE_MAX_MS if idle_max_ms is None else idle_max_ms)
        self._warning_ms = int(IDLE_WARNING_MS if warning_ms is None else warning_ms)
        if self._idle_max_ms <= 0 or self._warning_ms <= 0:
            raise ValueError("idle_max_ms and warning_ms must be positive")
        if self._warning_ms >= self._idle_max_ms:
            raise ValueError(f"warning_ms ({self._warning_ms}) must be smaller than idle_max_ms ({self._idle_max_ms})")
        self._login_route = login_route or IDLE_LOGIN_ROUTE

        self._scheduler = scheduler
        self._sign_out = sign_out
        self._navigate = navigate
        self._storage = storage
        self._channel = channel

        self._active = False
        self._phase = IdlePhase.ACTIVE
        self._seconds_left = 0
        self._logout_at_ms: float | None = None
        # Fallback clock when shared storage is unavailable.
        self._local_last_active: float | None = None

        self._warning_timer: TimerHandle | None = None
        self._logout_timer: TimerHandle | None = None
        self._countdown_timer: TimerHandle | None = None

        self._detachers: list[Unsubscribe] = []
        self._listeners: list[SnapshotListener] = []
        self._degraded: set[str] = set()

    @property
    def phase(self) -> IdlePhase:
        return self._phase

    @property
    def seconds_left(self) -> int:
        return self._seconds_left if self._phase is IdlePhase.WARNING else 0

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def idle_max_ms(self) -> int:
        return self._idle_max_ms

    @property
    def warning_ms(self) -> int:
        return self._warning_ms

    @property
    def login_route(self) -> str:
        return self._login_route

    def snapshot(self) -> IdleSnapshot:
        return IdleSnapshot(phase=self._phase, seconds_left=self.seconds_left, idle_max_ms=self._idle_max_ms)

    def time_until_logout_ms(self) -> float | None:
        if not self._active or self._logout_at_ms is None:
            return None
        return max(0.0, self._logout_at_ms - self._scheduler.now_ms())

    def subscribe(self, listener: SnapshotListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def activate(self) -> None:
        if self._active:
            return
        self._active = True
        self._attach()
        if self._read_last_active() is None:
            self._write_last_active(self._scheduler.now_ms())
        self.rearm()

    def deactivate(self, *, clear_clock: bool = False) -> None:
        """Cancel every pending timer. The shared clock is kept unless `clear_clock`."""
        self._active = False
        self._detach()
        self._clear_timers()
        self._logout_at_ms = None
        if clear_clock:
            self._local_last_active = None
            self._storage_remove(STORAGE_KEY_LAST_ACTIVE)
        self._set_state(IdlePhase.ACTIVE, 0)

    def touch(self) -> None:
        if not self._active:
            return
        now = self._scheduler.now_ms()
        self._write_last_active(now)
        self._storage_set(STORAGE_KEY_RESET, str(int(now)))
        self._post(SIGNAL_RESET)
        self.rearm()

    def extend_session(self) -> None:
        if self._phase is IdlePhase.WARNING:
            self._set_state(IdlePhase.ACTIVE, 0)
        self.touch()

    def rearm(self) -> None:
        if not self._active:
            return
        self._clear_timers()
        self._set_state(IdlePhase.ACTIVE, 0)

        now = self._scheduler.now_ms()
        last_active = self._read_last_active()
        if last_active is None:
            last_active = now
        elapsed = max(0.0, now - last_active)

        time_until_logout = max(0.0, self._idle_max_ms - elapsed)
        time_until_warning = max(0.0, time_until_logout - self._warning_ms)
        self._logout_at_ms = now + time_until_logout

        self._warning_timer = self._scheduler.call_later(time_until_warning, self._enter_warning)
        self._logout_timer = self._scheduler.call_later(time_until_logout, self._on_logout_due)

    def force_logout(self) -> None:
        """Decide the logout for every tab of the scope. No-op while suspended."""
        if not self._active or self._phase is IdlePhase.LOGGED_OUT:
            return
        logger.info("idle budget exhausted; forcing logout")
        self._local_last_active = None
        self._storage_remove(STORAGE_KEY_LAST_ACTIVE)
        self._storage_set(STORAGE_KEY_FORCE_LOGOUT, str(int(self._scheduler.now_ms())))
        self._post(SIGNAL_FORCE_LOGOUT)
        self._complete_logout()

    def _enter_warning(self) -> None:
        self._warning_timer = None
        if not self._active:
            return
        remaining = self._warning_ms
        if self._logout_at_ms is not None:
            remaining = min(remaining, max(0.0, self._logout_at_ms - self._scheduler.now_ms()))
        seconds = max(0, math.ceil(remaining / 1000))
        logger.info("idle warning: logout in %ss", seconds)
        self._set_state(IdlePhase.WARNING, seconds)
        self._countdown_timer = self._scheduler.call_later(COUNTDOWN_TICK_MS, self._tick)

    def _tick(self) -> None:
        self._countdown_timer = None
        if not self._active or self._phase is not IdlePhase.WARNING:
            return
        seconds = max(0, self._seconds_left - 1)
        self._set_state(IdlePhase.WARNING, seconds)
        if seconds > 0:
            self._countdown_timer = self._scheduler.call_later(COUNTDOWN_TICK_MS, self._tick)

    def _on_logout_due(self) -> None:
        self._logout_timer = None
        if not self._active:
            return
        self.force_logout()

    def _clear_timers(self) -> None:
        for timer in (self._warning_timer, self._logout_timer, self._countdown_timer):
            if timer is not None:
                timer.cancel()
        self._warning_timer = None
        self._logout_timer = None
        self._countdown_timer = None

    def _follow_logout(self, source: str) -> None:
        if not self._active or self._phase is IdlePhase.LOGGED_OUT:
            return
        logger.info("following sibling logout via %s", source)
        self._complete_logout()

    def _complete_logout(self) -> None:
        self._active = False
        self._detach()
        self._clear_timers()
        self._logout_at_ms = None
        self._set_state(IdlePhase.LOGGED_OUT, 0)
        try:
            self._sign_out()
        except Exception:
            logger.warning("sign-out failed; continuing to %s", self._login_route, exc_info=True)
        self._navigate(self._login_route)

    def _attach(self) -> None:
        if self._storage is not None:
            try:
                self._detachers.append(self._storage.on_change(self._on_storage_change))
            except StorageUnavailableError as exc:
                self._mark_degraded("storage", exc)
        if self._channel is None:
            self._mark_degraded("channel", None)
            return
        try:
            self._detachers.append(self._channel.on_message(self._on_channel_message))
        except ChannelUnsupportedError as exc:
            self._mark_degraded("channel", exc)

    def _detach(self) -> None:
        detachers, self._detachers = self._detachers, []
        for detach in detachers:
            detach()

    def _on_storage_change(self, change: StorageChange) -> None:
        if not self._active or not change.new_value:
            return
        if change.key == STORAGE_KEY_FORCE_LOGOUT:
            self._follow_logout("storage")
        elif change.key in (STORAGE_KEY_RESET, STORAGE_KEY_LAST_ACTIVE):
            self.rearm()

    def _on_channel_message(self, payload: dict[str, Any]) -> None:
        if not self._active:
            return
        msg_type = payload.get("type")
        if msg_type == SIGNAL_FORCE_LOGOUT:
            self._follow_logout("broadcast")
        elif msg_type == SIGNAL_RESET:
            self.rearm()

    def _set_state(self, phase: IdlePhase, seconds_left: int) -> None:
        if phase is self._phase and seconds_left == self._seconds_left:
            return
        self._phase = phase
        self._seconds_left = seconds_left
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("idle state listener failed")

    def _read_last_active(self) -> float | None:
        if self._storage is None:
            return self._local_last_active
        try:
            raw = self._storage.get(STORAGE_KEY_LAST_ACTIVE)
        except StorageUnavailableError as exc:
            self._mark_degraded("storage", exc)
            return self._local_last_active
        if raw is None:
            return None
        try:
            value = float(raw)
        except ValueError:
            logger.debug("ignoring malformed %s=%r", STORAGE_KEY_LAST_ACTIVE, raw)
            return None
        self._local_last_active = value
        return value

    def _write_last_active(self, now_ms: float) -> None:
        self._local_last_active = now_ms
        self._storage_set(STORAGE_KEY_LAST_ACTIVE, str(int(now_ms)))

    def _storage_set(self, key: str, value: str) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set(key, value)
        except StorageUnavailableError as exc:
            self._mark_degraded("storage", exc)

    def _storage_remove(self, key: str) -> None:
        if self._storage is None:
            return
        try:
            self._storage.remove(key)
        except StorageUnavailableError as exc:
            self._mark_degraded("storage", exc)

    def _post(self, signal: str) -> None:
        if self._channel is None:
            return
        try:
            self._channel.post_message({"type": signal})
        except ChannelUnsupportedError as exc:
            self._mark_degraded("channel", exc)

    def _mark_degraded(self, what: str, exc: Exception | None) -> None:
        if what in self._degraded:
            return
        self._degraded.add(what)
        reason = exc or "not configured"
        if what == "storage":
            logger.debug("shared storage unavailable (%s); tracking idle time per tab only", reason)
        else:
            logger.debug("broadcast channel unavailable (%s); syncing through storage events only", reason)


__all__ = ["IdleSessionCoordinator"]
