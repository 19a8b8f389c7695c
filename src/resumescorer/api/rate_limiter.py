"""Rate limiter bounding concurrency and start spacing of outbound calls."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, TypeVar

from resumescorer.config import RateLimitConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RateLimiter:
    """Admit tasks in FIFO order under a concurrency cap and a start spacing.

    A task is admitted once fewer than ``max_concurrent`` tasks are running
    and at least ``min_time_ms`` has passed since the previous admitted
    task started. Waiting tasks queue in submission order; nothing is ever
    dropped and task errors propagate unchanged.

    The limiter must be used from a single event loop.
    """

    def __init__(self, max_concurrent: Optional[int] = 5, min_time_ms: int = 200) -> None:
        """Initialize the limiter.

        Args:
            max_concurrent: Maximum tasks in flight. None means unbounded.
            min_time_ms: Minimum spacing between task starts in milliseconds.
        """
        if max_concurrent is not None and max_concurrent <= 0:
            raise ValueError("max_concurrent must be a positive integer or None")
        if min_time_ms < 0:
            raise ValueError("min_time_ms must be >= 0")

        self.max_concurrent = max_concurrent
        self.min_time = min_time_ms / 1000.0

        # asyncio.Lock wakes waiters in FIFO order
        self._admission = asyncio.Lock()
        self._slots = asyncio.Semaphore(max_concurrent) if max_concurrent else None
        self._next_start: Optional[float] = None
        self._running = 0
        self._queued = 0

    @classmethod
    def from_config(cls, config: RateLimitConfig) -> "RateLimiter":
        return cls(max_concurrent=config.max_concurrent, min_time_ms=config.min_time_ms)

    @property
    def running(self) -> int:
        """Number of admitted tasks that have not finished."""
        return self._running

    @property
    def queued(self) -> int:
        """Number of tasks waiting for admission."""
        return self._queued

    def counts(self) -> Dict[str, int]:
        return {"RUNNING": self._running, "QUEUED": self._queued}

    async def _wait_for_spacing(self) -> None:
        loop = asyncio.get_running_loop()
        while self._next_start is not None:
            remaining = self._next_start - loop.time()
            if remaining <= 0:
                break
            await asyncio.sleep(remaining)

    async def _acquire(self) -> None:
        self._queued += 1
        try:
            async with self._admission:
                if self._slots is not None:
                    await self._slots.acquire()
                try:
                    await self._wait_for_spacing()
                except BaseException:
                    if self._slots is not None:
                        self._slots.release()
                    raise
                self._next_start = asyncio.get_running_loop().time() + self.min_time
                self._running += 1
        finally:
            self._queued -= 1

    def _release(self) -> None:
        self._running -= 1
        if self._slots is not None:
            self._slots.release()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one admission slot for the duration of the block."""
        await self._acquire()
        try:
            yield
        finally:
            self._release()

    async def schedule(
        self, task: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """Run ``task(*args, **kwargs)`` once it is admitted.

        Args:
            task: Coroutine function to run.
            *args: Positional arguments for the task.
            **kwargs: Keyword arguments for the task.

        Returns:
            Whatever the task returns.
        """
        async with self.slot():
            logger.debug(
                "Admitted task (running=%d, queued=%d)", self._running, self._queued
            )
            return await task(*args, **kwargs)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(max_concurrent={self.max_concurrent}, "
            f"min_time_ms={int(self.min_time * 1000)})"
        )
