"""Circuit Breaker - sheds load after repeated authentication failures."""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from glossia.core import ApiError, GlossiaError

logger = logging.getLogger(__name__)

OPEN_CIRCUIT_MESSAGE = "Circuit breaker is open - too many authentication failures"


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Three-state breaker counting only authentication failures.

    CLOSED counts consecutive 401/403 failures and opens at the threshold.
    OPEN rejects calls until the recovery timeout has passed since the last
    failure, then lets calls through in HALF_OPEN. HALF_OPEN closes after
    enough successes and reopens on any authentication failure. Other
    errors pass through without touching the counters.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        success_threshold: int = 2,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.success_threshold = success_threshold
        self._clock = clock or time.monotonic

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failure_count

    async def call(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        """
        Run an operation under the breaker.

        Raises:
            ApiError: If the circuit is open and the recovery timeout has
                not yet elapsed. The operation is not invoked.
        """
        self._before_call()

        try:
            result = await operation()
        except GlossiaError as e:
            if e.triggers_circuit_breaker:
                self._on_failure()
            raise

        self._on_success()
        return result

    def _before_call(self) -> None:
        with self._lock:
            if self._state is not CircuitState.OPEN:
                return

            elapsed = self._clock() - (self._last_failure_time or 0.0)
            if elapsed < self.recovery_timeout:
                raise ApiError(OPEN_CIRCUIT_MESSAGE)

            self._state = CircuitState.HALF_OPEN
            self._success_count = 0
            logger.info(
                "Circuit breaker half-open, allowing trial requests",
                extra={"event": "circuit_breaker_half_open"},
            )

    def _on_success(self) -> None:
        with self._lock:
            if self._state is CircuitState.HALF_OPEN:
                self._success_count += 1
                if self._success_count >= self.success_threshold:
                    self._state = CircuitState.CLOSED
                    self._failure_count = 0
                    self._success_count = 0
                    logger.info(
                        "Circuit breaker closed after successful recovery",
                        extra={"event": "circuit_breaker_closed"},
                    )
            elif self._state is CircuitState.CLOSED:
                self._failure_count = 0

    def _on_failure(self) -> None:
        with self._lock:
            self._failure_count += 1
            self._last_failure_time = self._clock()

            if self._state is CircuitState.HALF_OPEN:
                self._state = CircuitState.OPEN
                self._success_count = 0
                logger.error(
                    "Circuit breaker reopened after failure in half-open state",
                    extra={"event": "circuit_breaker_opened", "failure_count": self._failure_count},
                )
            elif self._state is CircuitState.CLOSED and self._failure_count >= self.failure_threshold:
                self._state = CircuitState.OPEN
                logger.error(
                    f"Circuit breaker opened after {self._failure_count} authentication failures",
                    extra={"event": "circuit_breaker_opened", "failure_count": self._failure_count},
                )
