"""Per-connection envelope state."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class EnvelopeState:
    session_id: str = "unknown"
    request_id: str = "unknown"
    # Scope (shared storage + channel) the connection joined on its first session.update.
    bound_session_id: str | None = None


__all__ = ["EnvelopeState"]
