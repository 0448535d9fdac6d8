"""In-memory sliding window rate limiting.

Single-process only: counters live in this process and are not shared
between workers. Dependencies run in FastAPI's threadpool, so all access to
the counters goes through one lock.
"""

import logging
import math
import threading
import time
from collections import defaultdict
from typing import Callable

from fastapi import Request

from domain.model.errors import RateLimitedError

logger = logging.getLogger(__name__)

_CLEANUP_EVERY = 1000


class SlidingWindowRateLimiter:
    """Allow at most ``max_requests`` per key within any ``window_seconds`` span."""

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, list[float]] = defaultdict(list)
        self._calls = 0
        self._lock = threading.Lock()

    def hit(self, key: str) -> None:
        """Record one request for ``key``.

        Raises:
            RateLimitedError: ``key`` already used its quota in the current window
        """
        with self._lock:
            now = self._clock()
            window_start = now - self.window_seconds

            hits = [ts for ts in self._hits[key] if ts > window_start]
            self._hits[key] = hits

            if len(hits) >= self.max_requests:
                retry_after = max(1, math.ceil(hits[0] + self.window_seconds - now))
            else:
                retry_after = None
                hits.append(now)

                self._calls += 1
                if self._calls % _CLEANUP_EVERY == 0:
                    self._purge_inactive(window_start)

        if retry_after is not None:
            logger.warning(
                "Rate limit exceeded",
                extra={"client": key, "requests": self.max_requests, "window": self.window_seconds},
            )
            raise RateLimitedError(retry_after)

    def _purge_inactive(self, window_start: float) -> None:
        # Caller holds self._lock
        inactive = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in inactive:
            del self._hits[key]


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def limit_otp_requests(request: Request) -> None:
    """Dependency applying the app's OTP send limiter to the calling address."""
    limiter: SlidingWindowRateLimiter = request.app.state.otp_rate_limiter
    limiter.hit(client_address(request))
