"""Per-connection budget for client messages."""

from __future__ import annotations

import time
import collections
from collections.abc import Callable, Iterable

from idle_guard.errors import RateLimitError

TimeFn = Callable[[], float]


class MessageRateLimiter:
    """Counts client messages over a rolling window.

    Message types in `exempt_types` are never counted. The limiter is disabled
    when `limit` or `window_seconds` is not positive.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        exempt_types: Iterable[str] = (),
        now_fn: TimeFn | None = None,
    ) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self.exempt_types = frozenset(exempt_types)
        self._now = now_fn or time.monotonic
        self._admitted: collections.deque[float] = collections.deque()

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window_seconds > 0

    def counts(self, msg_type: str) -> bool:
        return self.enabled and msg_type not in self.exempt_types

    def retry_in(self) -> float:
        """Seconds until a counted message would be admitted; 0.0 when it would be now."""
        if not self.enabled:
            return 0.0
        return self._wait_at(self._now())

    def consume(self, msg_type: str) -> None:
        if not self.counts(msg_type):
            return
        now = self._now()
        wait = self._wait_at(now)
        if wait > 0:
            raise RateLimitError(retry_in=wait, limit=self.limit, window_seconds=self.window_seconds)
        self._admitted.append(now)

    def _wait_at(self, now: float) -> float:
        cutoff = now - self.window_seconds
        admitted = self._admitted
        while admitted and admitted[0] <= cutoff:
            admitted.popleft()
        if len(admitted) < self.limit:
            return 0.0
        return admitted[0] + self.window_seconds - now


__all__ = ["MessageRateLimiter"]
