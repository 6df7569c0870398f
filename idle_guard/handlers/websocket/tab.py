"""Binds one WebSocket connection to an idle coordinator (the connection is a "tab")."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any

from fastapi import WebSocket

from idle_guard.state import EnvelopeState, IdlePhase, IdleSnapshot, RuntimeDeps
from idle_guard.session import AsyncioScheduler, IdleSessionGate, IdleSessionCoordinator
from idle_guard.session.interfaces import Scheduler
from idle_guard.config.websocket import WS_MSG_NAVIGATE, WS_MSG_IDLE_STATE, WS_MSG_SIGNED_OUT

from .outbound import send_envelope

logger = logging.getLogger(__name__)


class WebSocketTab:
    """Pushes idle state to the client and turns a forced logout into a close.

    Coordinator callbacks are synchronous; outbound frames go through a queue so
    they reach the client in the order the coordinator produced them.
    """

    def __init__(
        self,
        ws: WebSocket,
        *,
        scope_key: str,
        runtime_deps: RuntimeDeps,
        state: EnvelopeState,
        scheduler: Scheduler | None = None,
    ) -> None:
        idle = runtime_deps.settings.idle
        self._ws = ws
        self._scopes = runtime_deps.scopes
        self._state = state
        self.scope_key = scope_key
        self._storage = runtime_deps.scopes.attach_storage(scope_key)
        self._channel = runtime_deps.scopes.open_channel(scope_key, idle.channel_name)
        self._outbox: asyncio.Queue[tuple[str, dict[str, Any]] | None] = asyncio.Queue()
        self._sender: asyncio.Task | None = None
        self._logged_out = asyncio.Event()
        self.signed_out = False

        self.coordinator = IdleSessionCoordinator(
            scheduler=scheduler or AsyncioScheduler(),
            storage=self._storage,
            channel=self._channel,
            sign_out=self._sign_out,
            navigate=self._navigate,
            idle_max_ms=idle.idle_max_ms,
            warning_ms=idle.warning_ms,
            login_route=idle.login_route,
        )
        self.gate = IdleSessionGate(self.coordinator)
        self._unsubscribe = self.coordinator.subscribe(self._on_snapshot)

    @property
    def logged_out(self) -> bool:
        return self._logged_out.is_set()

    def start(self) -> None:
        if self._sender is None:
            self._sender = asyncio.create_task(self._send_loop())

    def push_state(self) -> None:
        self._enqueue(WS_MSG_IDLE_STATE, self.coordinator.snapshot().to_payload())

    async def drain(self) -> None:
        if self._sender is None or self._sender.done():
            return
        await self._outbox.join()

    async def close(self) -> None:
        self._unsubscribe()
        self.gate.close()
        self._channel.close()
        self._storage.close()
        self._scopes.release(self.scope_key)
        if self._sender is None:
            return
        self._outbox.put_nowait(None)
        with contextlib.suppress(Exception):
            await asyncio.wait_for(self._sender, timeout=1.0)
        if not self._sender.done():
            self._sender.cancel()
        self._sender = None

    def _on_snapshot(self, snapshot: IdleSnapshot) -> None:
        self._enqueue(WS_MSG_IDLE_STATE, snapshot.to_payload())

    def _sign_out(self) -> None:
        self.signed_out = True
        logger.info("tab signed out scope=%s", self.scope_key)
        self._enqueue(WS_MSG_SIGNED_OUT, {})

    def _navigate(self, route: str) -> None:
        self._enqueue(WS_MSG_NAVIGATE, {"route": route})
        if self.coordinator.phase is IdlePhase.LOGGED_OUT:
            self._logged_out.set()

    def _enqueue(self, msg_type: str, payload: dict[str, Any]) -> None:
        self._outbox.put_nowait((msg_type, payload))

    async def _send_loop(self) -> None:
        while True:
            item = await self._outbox.get()
            try:
                if item is None:
                    return
                msg_type, payload = item
                await send_envelope(
                    self._ws,
                    msg_type=msg_type,
                    session_id=self.scope_key,
                    request_id=self._state.request_id,
                    payload=payload,
                )
            finally:
                self._outbox.task_done()


__all__ = ["WebSocketTab"]
