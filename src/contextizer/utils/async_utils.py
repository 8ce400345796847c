"""
Async utilities for Contextizer.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any, Awaitable, Callable, TypeVar

from contextizer.exceptions import ExecutionError

T = TypeVar("T")


def dual(func: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """
    Decorator: makes an async method callable from sync and async code.

    Without a running loop the coroutine is driven to completion with
    ``asyncio.run``; inside one the coroutine itself is returned.

    Usage:
        @dual
        async def run(self, target, inputs=None):
            ...

        ctx.run("sum", {"a": 4})         # blocks
        await ctx.run("sum", {"a": 4})   # inside a coroutine
    """
    if not inspect.iscoroutinefunction(func):
        raise TypeError("@dual can only be applied to async def functions")

    @functools.wraps(func)
    def sync_or_async_call(*args: Any, **kwargs: Any) -> Any:
        coro = func(*args, **kwargs)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)
        return coro

    return sync_or_async_call  # type: ignore[return-value]


def running_loop(action: str) -> asyncio.AbstractEventLoop:
    """
    The running event loop, or an ExecutionError naming what needed it.

    Raises:
        ExecutionError: If called outside a running event loop
    """
    try:
        return asyncio.get_running_loop()
    except RuntimeError as e:
        raise ExecutionError(
            f"{action} needs a running event loop; use run() from synchronous code",
            details={"action": action},
        ) from e


async def settle(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def pin(value: Any) -> Any:
    """
    Schedule a bare awaitable once so several readers can await it.

    Coroutines can only be awaited once; they are wrapped in a future on
    the running loop. Futures and plain values are returned unchanged.
    """
    if inspect.isawaitable(value) and not asyncio.isfuture(value):
        return asyncio.ensure_future(value)
    return value
