"""Shared storage notifications (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StorageChange:
    key: str
    old_value: str | None
    new_value: str | None


__all__ = ["StorageChange"]
