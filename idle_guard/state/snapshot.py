"""Observable idle state (dataclasses only)."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

from .phase import IdlePhase


@dataclass(frozen=True, slots=True)
class IdleSnapshot:
    phase: IdlePhase
    # Only meaningful in IdlePhase.WARNING.
    seconds_left: int
    idle_max_ms: int

    @property
    def is_warning(self) -> bool:
        return self.phase is IdlePhase.WARNING

    def to_payload(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "seconds_left": self.seconds_left,
            "idle_max_ms": self.idle_max_ms,
        }


__all__ = ["IdleSnapshot"]
