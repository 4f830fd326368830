"""Per-path fixed-window rate limiter.

All paths share one window expiry. When a request observes that the
window has expired, only that request's path counter is reset (to 1) and
the shared expiry moves forward; other paths keep their old counts until
one of their own requests arrives after an expiry.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

DEFAULT_WINDOW_SECONDS = 60.0


class RateLimiter:
    """Counts requests per path within a shared fixed window.

    Usage::

        limiter = RateLimiter(limit=10)
        if not limiter.try_acquire("/deploy"):
            ...  # answer 429
    """

    def __init__(
        self,
        limit: int,
        window: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit < 0:
            raise ValueError("limit must be >= 0")
        self._limit = limit
        self._window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}
        self._expires_at = clock() + window

    @property
    def limit(self) -> int:
        return self._limit

    def count(self, path: str) -> int:
        with self._lock:
            return self._counts.get(path, 0)

    def try_acquire(self, path: str) -> bool:
        """Record a request for ``path`` and report whether it may proceed."""
        with self._lock:
            self._counts[path] = self._counts.get(path, 0) + 1
            now = self._clock()
            if now > self._expires_at:
                self._counts[path] = 1
                self._expires_at = now + self._window
            return self._limit == 0 or self._counts[path] <= self._limit
