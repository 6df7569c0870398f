"""Named best-effort broadcast channels between tabs of one scope."""

from __future__ import annotations

import logging
from typing import Any

from .channel import BroadcastChannel

logger = logging.getLogger(__name__)


class BroadcastHub:
    def __init__(self) -> None:
        self._channels: dict[str, list[BroadcastChannel]] = {}

    def open(self, name: str) -> BroadcastChannel:
        channel = BroadcastChannel(self, name)
        self._channels.setdefault(name, []).append(channel)
        return channel

    def release(self, channel: BroadcastChannel) -> None:
        members = self._channels.get(channel.name)
        if not members:
            return
        if channel in members:
            members.remove(channel)
        if not members:
            self._channels.pop(channel.name, None)

    def deliver(self, sender: BroadcastChannel, payload: dict[str, Any]) -> int:
        delivered = 0
        for member in list(self._channels.get(sender.name, ())):
            if member is sender:
                continue
            member.dispatch(payload)
            delivered += 1
        return delivered

    def member_count(self, name: str) -> int:
        return len(self._channels.get(name, ()))

    @property
    def is_empty(self) -> bool:
        return not self._channels


__all__ = ["BroadcastHub"]
