"""Retry Service - tenacity-driven exponential backoff with jitter for retryable failures."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

from glossia.core import GlossiaError

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


@dataclass
class RetryConfig:
    """Backoff policy: `1 + max_retries` attempts, delays in seconds."""

    max_retries: int = 3
    base_delay: float = 0.1
    max_delay: float = 5.0
    backoff_multiplier: float = 2.0
    jitter: bool = True

    def delay_for_attempt(self, attempt: int) -> float:
        """
        Compute the sleep before the next try after a failed attempt.

        Args:
            attempt: 0-based index of the attempt that just failed.

        Returns:
            Delay in seconds, capped at max_delay and optionally jittered.
        """
        delay = min(self.base_delay * (self.backoff_multiplier ** attempt), self.max_delay)
        if self.jitter:
            delay *= random.uniform(0.8, 1.2)
        return delay


class RetryService:
    """
    Executes an async operation, retrying only errors marked retryable.

    Non-Glossia exceptions and fatal Glossia errors propagate on the first
    occurrence; retryable ones are re-attempted until the budget runs out.
    """

    def __init__(self, config: Optional[RetryConfig] = None, sleep: Optional[Sleeper] = None):
        self.config = config or RetryConfig()
        self._sleep = sleep or asyncio.sleep

    async def execute(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        total_attempts = self.config.max_retries + 1
        retrying = AsyncRetrying(
            stop=stop_after_attempt(total_attempts),
            wait=self._wait,
            retry=retry_if_exception(_is_retryable),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            return await retrying(operation)
        except GlossiaError as e:
            if e.is_retryable:
                logger.error(
                    f"Request failed after {total_attempts} attempts: {e}",
                    extra={"error_kind": e.kind, "attempts": total_attempts},
                )
            raise

    def _wait(self, retry_state: RetryCallState) -> float:
        # attempt_number is 1-based and counts the attempt that just failed
        return self.config.delay_for_attempt(retry_state.attempt_number - 1)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        delay = retry_state.next_action.sleep
        total_attempts = self.config.max_retries + 1
        logger.warning(
            f"Retryable failure (attempt {retry_state.attempt_number}/{total_attempts}): {error}. "
            f"Retrying in {delay:.2f}s...",
            extra={"error_kind": error.kind, "attempt": retry_state.attempt_number},
        )


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, GlossiaError) and error.is_retryable
