"""Idle session coordination: coordinator, activation gate and shared primitives."""

from .gate import IdleSessionGate
from .channel import BroadcastChannel
from .channel_hub import BroadcastHub
from .scheduler import AsyncioScheduler
from .storage_area import SharedStorageArea
from .storage_view import SharedStorageView
from .coordinator import IdleSessionCoordinator
from .registry import SessionScope, SessionScopeRegistry

__all__ = [
    "AsyncioScheduler",
    "BroadcastChannel",
    "BroadcastHub",
    "IdleSessionCoordinator",
    "IdleSessionGate",
    "SessionScope",
    "SessionScopeRegistry",
    "SharedStorageArea",
    "SharedStorageView",
]
