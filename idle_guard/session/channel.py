"""One tab's endpoint on a named broadcast channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from collections.abc import Callable

if TYPE_CHECKING:
    from .channel_hub import BroadcastHub

logger = logging.getLogger(__name__)


class BroadcastChannel:
    """Posts reach every other open channel with the same name, never the sender.

    Delivery is best effort: closed channels and handlers added after a post
    simply miss the message.
    """

    def __init__(self, hub: BroadcastHub, name: str) -> None:
        self._hub = hub
        self.name = name
        self._handlers: list[Callable[[dict[str, Any]], None]] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def post_message(self, payload: dict[str, Any]) -> None:
        if self._closed:
            return
        self._hub.deliver(self, dict(payload))

    def on_message(self, handler: Callable[[dict[str, Any]], None]) -> Callable[[], None]:
        self._handlers.append(handler)

        def _remove() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _remove

    def dispatch(self, payload: dict[str, Any]) -> None:
        if self._closed:
            return
        for handler in list(self._handlers):
            try:
                handler(dict(payload))
            except Exception:
                logger.exception("broadcast handler failed channel=%s", self.name)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._handlers.clear()
        self._hub.release(self)


__all__ = ["BroadcastChannel"]
