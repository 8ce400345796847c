"""
Argument mappings passed to compute and cleanup callbacks.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Mapping
from typing import Any

from contextizer.core.items import FunctionItem


def make_arg(context: Mapping[str, Any], item: FunctionItem, resolved: list[str]) -> dict[str, Any]:
    """
    Parameter bag merged with dependency values.

    Keys are the dependency references exactly as the item declared them
    (``"foo"``, ``".foo"``, ``"pkg.foo"``); values come from the context
    under the matching resolved canonical name. Entries may still be
    awaitable.
    """
    arg = dict(item.params)
    for declared, canonical in zip(item.deps, resolved, strict=True):
        arg[declared] = context[canonical]
    return arg


async def resolve_fields(arg: Mapping[str, Any]) -> dict[str, Any]:
    """
    Await every awaitable field of ``arg``.

    All fields must settle successfully; otherwise the first failure is
    raised. Futures that are already done are read directly, so results
    pinned by an earlier event loop stay readable.
    """
    values = dict(arg)
    pending: dict[str, Awaitable[Any]] = {}
    for key, value in arg.items():
        if not inspect.isawaitable(value):
            continue
        if asyncio.isfuture(value) and value.done():
            values[key] = value.result()
        else:
            pending[key] = value

    if pending:
        results = await asyncio.gather(*pending.values())
        values.update(zip(pending, results))
    return values


async def none_on_failure(awaitable: Awaitable[Any]) -> Any:
    """
    Await ``awaitable``, turning its failure or cancellation into None.

    The awaited future is shielded: cancelling the caller propagates as
    usual and never cancels a computation other readers share.
    """
    future = asyncio.ensure_future(awaitable)
    try:
        return await asyncio.shield(future)
    except asyncio.CancelledError:
        if future.cancelled():
            return None
        raise
    except Exception:
        return None
