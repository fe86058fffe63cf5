# src/ratelimit/limiter.py — v1
"""Fixed-window admission control in front of the generative model.

One process-wide window protects the shared upstream quota; it is not a
per-user fairness mechanism. A multi-instance deployment needs a shared
counter service instead.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from checkwise.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_S = 60.0
DEFAULT_MAX_REQUESTS = 10


class FixedWindowRateLimiter:
    """Admit at most ``max_requests`` calls per ``window_s`` seconds.

    The window resets lazily: the first admission check after the reset
    time zeroes the counter and schedules the next reset ``window_s``
    seconds from that moment. Denial never blocks and never counts.

    Args:
        max_requests: Admissions allowed per window.
        window_s: Window length in seconds.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_s: float = DEFAULT_WINDOW_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be > 0")
        if window_s <= 0:
            raise ValueError("window_s must be > 0")
        self._max_requests = max_requests
        self._window_s = window_s
        self._clock = clock
        self._lock = threading.Lock()
        self._count = 0
        self._reset_at = clock() + window_s

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], float] = time.monotonic
    ) -> FixedWindowRateLimiter:
        return cls(
            max_requests=settings.rate_limit_max_requests,
            window_s=settings.rate_limit_window_s,
            clock=clock,
        )

    def admit(self) -> bool:
        """Return True and count the call if the window has room."""
        with self._lock:
            now = self._clock()
            if now > self._reset_at:
                self._count = 0
                self._reset_at = now + self._window_s
            if self._count >= self._max_requests:
                logger.warning(
                    "Rate limit reached (%d/%d), resets in %.1fs",
                    self._count, self._max_requests, self._reset_at - now,
                )
                return False
            self._count += 1
            return True

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def count(self) -> int:
        """Admissions counted in the current window."""
        return self._count

    @property
    def remaining(self) -> int:
        """Admissions left before the next reset (ignores a pending reset)."""
        return max(self._max_requests - self._count, 0)

    @property
    def reset_in(self) -> float:
        """Seconds until the current window may reset."""
        return max(self._reset_at - self._clock(), 0.0)
