"""Idle coordinator phases."""

from __future__ import annotations

from enum import Enum


class IdlePhase(str, Enum):
    ACTIVE = "active"
    WARNING = "warning"
    LOGGED_OUT = "logged_out"


__all__ = ["IdlePhase"]
