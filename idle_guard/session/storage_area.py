"""In-process shared key-value storage with cross-view change notification."""

from __future__ import annotations

import logging
from collections.abc import Callable

from idle_guard.state.storage import StorageChange

from .storage_view import SharedStorageView

logger = logging.getLogger(__name__)


class SharedStorageArea:
    """Values visible to every attached view.

    A write through one view notifies the handlers registered on every *other*
    view, mirroring how a browser only fires `storage` events in sibling tabs.
    """

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._handlers: dict[int, list[Callable[[StorageChange], None]]] = {}
        self._next_view_id = 0

    def attach(self) -> SharedStorageView:
        view_id = self._next_view_id
        self._next_view_id += 1
        self._handlers[view_id] = []
        return SharedStorageView(self, view_id)

    def detach(self, view_id: int) -> None:
        self._handlers.pop(view_id, None)

    def read(self, key: str) -> str | None:
        return self._values.get(key)

    def write(self, view_id: int, key: str, value: str | None) -> None:
        old = self._values.get(key)
        if old == value:
            return
        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = value
        self._notify(view_id, StorageChange(key=key, old_value=old, new_value=value))

    def add_handler(self, view_id: int, handler: Callable[[StorageChange], None]) -> Callable[[], None]:
        handlers = self._handlers.setdefault(view_id, [])
        handlers.append(handler)

        def _remove() -> None:
            current = self._handlers.get(view_id)
            if current is not None and handler in current:
                current.remove(handler)

        return _remove

    def _notify(self, source_view_id: int, change: StorageChange) -> None:
        for view_id, handlers in list(self._handlers.items()):
            if view_id == source_view_id:
                continue
            for handler in list(handlers):
                try:
                    handler(change)
                except Exception:
                    logger.exception("storage change handler failed key=%s", change.key)

    @property
    def view_count(self) -> int:
        return len(self._handlers)

    def __len__(self) -> int:
        return len(self._values)


__all__ = ["SharedStorageArea"]
