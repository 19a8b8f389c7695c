"""Retry controller with bounded exponential backoff."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from resumescorer.config import RetryConfig
from resumescorer.exceptions import ApiRequestError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(error: BaseException) -> bool:
    """Return True if ``error`` is a typed error of a retryable kind."""
    return isinstance(error, ApiRequestError) and error.retryable


class RetryController:
    """Re-invoke a failing operation using jitter-free exponential backoff.

    The delay before retry ``n`` (0-based) is
    ``min(max_timeout, min_timeout * backoff_factor ** n)``. Only typed
    errors of a retryable kind are retried; anything else propagates on
    first occurrence without consuming a retry.

    Attributes:
        attempts: Number of times the operation has been invoked.
        last_error: The most recent error raised by the operation.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config or RetryConfig()
        self.attempts = 0
        self.last_error: Optional[BaseException] = None
        self._sleep = sleep
        self._wait = wait_exponential(
            multiplier=self.config.min_timeout_ms / 1000.0,
            exp_base=self.config.backoff_factor,
            min=self.config.min_timeout_ms / 1000.0,
            max=self.config.max_timeout_ms / 1000.0,
        )

    @property
    def max_attempts(self) -> int:
        return self.config.max_retries + 1

    def delay_for(self, retry_number: int) -> float:
        """Return the delay in seconds before the given 0-based retry."""
        delay_ms = min(
            self.config.max_timeout_ms,
            self.config.min_timeout_ms * self.config.backoff_factor**retry_number,
        )
        return delay_ms / 1000.0

    def retry(self, error: BaseException) -> bool:
        """Decide whether another attempt should follow ``error``.

        Returns:
            True if attempts remain and the error is retryable, False if the
            caller must treat the error as terminal.
        """
        self.last_error = error
        return self.attempts < self.max_attempts and is_retryable(error)

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Attempt %d/%d failed (%s), retrying in %.2fs",
            retry_state.attempt_number,
            self.max_attempts,
            error,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
        )

    async def attempt(self, operation: Callable[[int], Awaitable[T]]) -> T:
        """Run ``operation`` until it succeeds or fails terminally.

        Args:
            operation: Coroutine function called with the 1-based attempt
                number.

        Returns:
            The operation's result.

        Raises:
            BaseException: The terminal error, unchanged.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=retry_if_exception(self.retry),
            before_sleep=self._before_sleep,
            sleep=self._sleep,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                self.attempts = attempt.retry_state.attempt_number
                return await operation(self.attempts)

        raise RuntimeError("retry loop exited without an outcome")  # pragma: no cover
