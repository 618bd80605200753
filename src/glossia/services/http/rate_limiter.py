"""Rate Limiter - token bucket shaping outbound provider traffic."""

from __future__ import annotations

import asyncio
import threading
import time
from typing import Callable, Optional

POLL_INTERVAL_SECONDS = 0.01


class RateLimiter:
    """
    Token bucket refilled to capacity once per interval.

    Defaults to 10 tokens per second. Callers either poll with
    try_acquire or await wait_for_permit.
    """

    def __init__(
        self,
        max_tokens: int = 10,
        refill_interval: float = 1.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        if max_tokens <= 0:
            raise ValueError("max_tokens must be positive")
        if refill_interval <= 0:
            raise ValueError("refill_interval must be positive")

        self.max_tokens = max_tokens
        self.refill_interval = refill_interval
        self._clock = clock or time.monotonic
        self._tokens = max_tokens
        self._last_refill = self._clock()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        now = self._clock()
        intervals = int((now - self._last_refill) // self.refill_interval)
        if intervals > 0:
            self._tokens = min(self.max_tokens, self._tokens + intervals * self.max_tokens)
            self._last_refill = now

    def try_acquire(self) -> bool:
        """Take a token if one is available, without waiting."""
        with self._lock:
            self._refill()
            if self._tokens > 0:
                self._tokens -= 1
                return True
            return False

    async def wait_for_permit(self) -> None:
        """Suspend cooperatively until a token is taken."""
        while not self.try_acquire():
            await asyncio.sleep(POLL_INTERVAL_SECONDS)

    def available_tokens(self) -> int:
        with self._lock:
            self._refill()
            return self._tokens
