"""
Cleanup coordination.

Once an invocation's target settles, successfully or not, every function
item evaluated in that invocation that defines a cleanup callback gets it
called exactly once. Items are visited in reverse evaluation order (target
first, leaves last). Failed fields are passed as None so a failure
upstream never blocks cleanup downstream, and a failing cleanup is
reported to the error sink instead of propagating.
"""

import asyncio
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from contextizer.core.arguments import make_arg, none_on_failure, resolve_fields
from contextizer.core.items import FunctionItem
from contextizer.utils.async_utils import settle
from contextizer.utils.logging import get_logger

logger = get_logger("contextizer.cleanup")

# Key under which cleanup callbacks receive the item's own result
VALUE_KEY = "$value"

ErrorSink = Callable[[str, BaseException], Any]


@dataclass(frozen=True)
class CleanupEntry:
    """A function item evaluated by one invocation, with its resolved dependencies."""

    name: str
    item: FunctionItem
    deps: list[str]


def log_cleanup_error(name: str, error: BaseException) -> None:
    """Default error sink: log the failure with its traceback."""
    logger.error(f"Item '{name}' threw error during cleanup: {error!r}", exc_info=error)


class CleanupCoordinator:
    """
    Runs cleanup passes for settled invocations.

    Keeps a reference to every running pass so tasks are not garbage
    collected mid-flight and so callers can wait for them with ``drain()``.
    """

    def __init__(self, on_error: ErrorSink | None = None):
        self.on_error: ErrorSink = on_error or log_cleanup_error
        self._passes: set[asyncio.Task] = set()

    def attach(
        self,
        result: asyncio.Future,
        entries: list[CleanupEntry],
        context: dict[str, Any],
    ) -> asyncio.Future:
        """
        Schedule a cleanup pass to start once ``result`` settles.

        Args:
            result: The invocation's target future
            entries: Function items with a cleanup callback, in evaluation order
            context: The invocation's execution context

        Returns:
            Future resolved (with None) when the pass has finished
        """
        loop = asyncio.get_running_loop()
        finished = loop.create_future()

        if not entries:
            finished.set_result(None)
            return finished

        def start(_: asyncio.Future) -> None:
            task = loop.create_task(self._run_pass(entries, context))
            self._passes.add(task)
            task.add_done_callback(self._passes.discard)
            task.add_done_callback(lambda _: finished.done() or finished.set_result(None))

        result.add_done_callback(start)
        return finished

    async def _run_pass(self, entries: list[CleanupEntry], context: dict[str, Any]) -> None:
        tasks = [asyncio.create_task(self._run_one(entry, context)) for entry in reversed(entries)]
        await asyncio.gather(*tasks)
        logger.debug(f"Cleanup pass finished for {len(tasks)} item(s)")

    async def _run_one(self, entry: CleanupEntry, context: dict[str, Any]) -> None:
        try:
            arg = make_arg(context, entry.item, entry.deps)
            arg[VALUE_KEY] = context[entry.name]
            safe_arg = {
                key: none_on_failure(value) if inspect.isawaitable(value) else value for key, value in arg.items()
            }
            await settle(entry.item.cleanup(await resolve_fields(safe_arg)))
        except Exception as e:
            self._report(entry.name, e)

    def _report(self, name: str, error: Exception) -> None:
        try:
            self.on_error(name, error)
        except Exception:
            logger.exception(f"Cleanup error sink failed while reporting item '{name}'")

    async def drain(self) -> None:
        """Wait until every started cleanup pass has finished."""
        # Let done-callbacks of just-settled targets start their passes
        await asyncio.sleep(0)
        while self._passes:
            await asyncio.gather(*list(self._passes), return_exceptions=True)

    @property
    def pending(self) -> int:
        """Number of cleanup passes currently running."""
        return len(self._passes)
