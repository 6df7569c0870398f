"""Idle session coordination across tabs, with a WebSocket front end."""

from idle_guard.state import IdlePhase, IdleSnapshot
from idle_guard.errors import ChannelUnsupportedError, StorageUnavailableError
from idle_guard.session import (
    BroadcastHub,
    IdleSessionGate,
    AsyncioScheduler,
    SharedStorageArea,
    IdleSessionCoordinator,
)

__all__ = [
    "AsyncioScheduler",
    "BroadcastHub",
    "ChannelUnsupportedError",
    "IdlePhase",
    "IdleSessionCoordinator",
    "IdleSessionGate",
    "IdleSnapshot",
    "SharedStorageArea",
    "StorageUnavailableError",
]
