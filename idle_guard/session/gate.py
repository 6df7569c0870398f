"""Runs a coordinator only while a user is signed in and off the login route."""

from __future__ import annotations

import logging
from typing import Any

from idle_guard.state.phase import IdlePhase
from idle_guard.config.idle import INTERACTION_EVENTS

from .coordinator import IdleSessionCoordinator

logger = logging.getLogger(__name__)


class IdleSessionGate:
    def __init__(self, coordinator: IdleSessionCoordinator) -> None:
        self._coordinator = coordinator
        self._user: Any = None
        self._route: str | None = None

    @property
    def coordinator(self) -> IdleSessionCoordinator:
        return self._coordinator

    @property
    def user(self) -> Any:
        return self._user

    @property
    def route(self) -> str | None:
        return self._route

    @property
    def monitoring(self) -> bool:
        return self._user is not None and self._route != self._coordinator.login_route

    def set_user(self, user: Any) -> None:
        previous = self._user
        if user == previous:
            return
        self._user = user
        # An explicit sign-out ends the shared clock; a fresh sign-in gets a full budget.
        self._sync(clear_clock=previous is not None and user is None)

    def set_route(self, route: str | None) -> None:
        if route == self._route:
            return
        self._route = route
        self._sync()

    def record_interaction(self, event: str, *, hidden: bool = False) -> bool:
        if event not in INTERACTION_EVENTS:
            logger.debug("ignoring non-qualifying interaction %r", event)
            return False
        # Background tabs can emit synthetic events; they must not reset the clock.
        if hidden:
            return False
        if not self._coordinator.is_active:
            return False
        self._coordinator.touch()
        return True

    def extend_session(self) -> bool:
        if not self._coordinator.is_active:
            return False
        self._coordinator.extend_session()
        return True

    def close(self) -> None:
        self._coordinator.deactivate()

    def _sync(self, *, clear_clock: bool = False) -> None:
        coordinator = self._coordinator
        if coordinator.phase is IdlePhase.LOGGED_OUT:
            coordinator.deactivate()

        if self.monitoring:
            if not coordinator.is_active:
                coordinator.activate()
            return

        if coordinator.is_active or clear_clock:
            coordinator.deactivate(clear_clock=clear_clock)


__all__ = ["IdleSessionGate"]
