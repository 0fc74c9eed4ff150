"""
Per-client fixed-window rate limiter.

All limited endpoints share one limiter, so a client gets
``max_requests`` calls to /analyze-document and /submit-order combined
per window.

Thread Safety:
    Counters live in a dict guarded by threading.Lock; everything else in
    the application is request-local or read-only.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one hit against the limiter."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: int
    """Seconds until the client's window resets."""

    def headers(self) -> Dict[str, str]:
        """Standard RateLimit-* headers (plus Retry-After when refused)."""
        headers = {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.reset_after)
        return headers


class RateLimiter:
    """
    Fixed-window counter keyed by client identifier.

    Attributes:
        max_requests: Requests allowed per window
        window_seconds: Window length
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0:
            raise ValueError(f"max_requests must be > 0, got {max_requests}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be > 0, got {window_seconds}")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # client -> (window start, hits in window)
        self._windows: Dict[str, Tuple[float, int]] = {}

    def hit(self, client: str) -> RateLimitDecision:
        """Count one request for ``client`` and decide whether it may proceed."""
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            start, count = self._windows.get(client, (now, 0))
            count += 1
            self._windows[client] = (start, count)

        reset_after = max(0, math.ceil(start + self.window_seconds - now))
        allowed = count <= self.max_requests
        if not allowed and count == self.max_requests + 1:
            logger.warning(f"Rate limit reached for {client} ({self.max_requests} per {self.window_seconds:.0f}s)")

        return RateLimitDecision(
            allowed=allowed,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_after=reset_after,
        )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _evict_expired(self, now: float) -> None:
        # Caller holds the lock
        expired = [
            client for client, (start, _) in self._windows.items()
            if now - start >= self.window_seconds
        ]
        for client in expired:
            del self._windows[client]
