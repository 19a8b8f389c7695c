"""Asynchronous utility functions for resumescorer."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, TypeVar, Union, cast

from typing_extensions import ParamSpec, TypeGuard

logger = logging.getLogger(__name__)


T = TypeVar("T")
P = ParamSpec("P")
R = TypeVar("R")


def is_async_callable(obj: Any) -> TypeGuard[Callable[..., Awaitable[Any]]]:
    """Check if an object is an async callable (function or method)."""
    if inspect.iscoroutinefunction(obj):
        return True

    if inspect.isclass(obj):
        return False

    call = getattr(obj, "__call__", None)
    if call is not None and call is not obj:
        return inspect.iscoroutinefunction(call)

    return False


async def run_async(
    func: Union[Callable[P, R], Callable[P, Awaitable[R]]],
    *args: P.args,
    **kwargs: P.kwargs,
) -> R:
    """Run a function asynchronously, whether it's sync or async.

    Synchronous functions run in the loop's default thread pool so blocking
    work (such as PDF parsing) does not stall the event loop.

    Args:
        func: The function to run (can be sync or async).
        *args: Positional arguments to pass to the function.
        **kwargs: Keyword arguments to pass to the function.

    Returns:
        The result of the function call.
    """
    if is_async_callable(func):
        return await cast(Callable[P, Awaitable[R]], func)(*args, **kwargs)

    loop = asyncio.get_running_loop()
    func_with_args = partial(cast(Callable[P, R], func), *args, **kwargs)
    return await loop.run_in_executor(None, func_with_args)


async def gather_with_concurrency(
    n: int,
    *tasks: Union[Awaitable[T], Callable[[], Awaitable[T]]],
    return_exceptions: bool = False,
) -> list:
    """Run coroutines with limited concurrency.

    Args:
        n: Maximum number of concurrent tasks.
        *tasks: Coroutines or callables that return coroutines.
        return_exceptions: If True, exceptions are returned in place of
            results instead of being raised.

    Returns:
        List of results in the same order as the input tasks.
    """
    semaphore = asyncio.Semaphore(n)

    async def run_task(task: Union[Awaitable[T], Callable[[], Awaitable[T]]]) -> T:
        async with semaphore:
            if callable(task):
                task = task()
            return await task

    return await asyncio.gather(
        *(run_task(task) for task in tasks),
        return_exceptions=return_exceptions,
    )
