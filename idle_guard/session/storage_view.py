"""Per-tab handle onto a shared storage area."""

from __future__ import annotations

from typing import TYPE_CHECKING
from collections.abc import Callable

from idle_guard.state.storage import StorageChange
from idle_guard.errors import StorageUnavailableError

if TYPE_CHECKING:
    from .storage_area import SharedStorageArea


class SharedStorageView:
    def __init__(self, area: SharedStorageArea, view_id: int) -> None:
        self._area = area
        self._view_id = view_id
        self._closed = False

    @property
    def view_id(self) -> int:
        return self._view_id

    def get(self, key: str) -> str | None:
        self._ensure_open()
        return self._area.read(key)

    def set(self, key: str, value: str) -> None:
        self._ensure_open()
        self._area.write(self._view_id, key, str(value))

    def remove(self, key: str) -> None:
        self._ensure_open()
        self._area.write(self._view_id, key, None)

    def on_change(self, handler: Callable[[StorageChange], None]) -> Callable[[], None]:
        self._ensure_open()
        return self._area.add_handler(self._view_id, handler)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._area.detach(self._view_id)

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageUnavailableError("storage view is closed")


__all__ = ["SharedStorageView"]
