"""Shared error types for the idle session service."""

from __future__ import annotations

from dataclasses import dataclass


class StorageUnavailableError(RuntimeError):
    """Raised by shared storage that cannot be read or written (e.g. privacy restrictions)."""


class ChannelUnsupportedError(RuntimeError):
    """Raised by a broadcast channel the runtime cannot provide."""


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


__all__ = ["ChannelUnsupportedError", "RateLimitError", "StorageUnavailableError"]
