"""
Per-invocation execution engine.

Planning happens synchronously: an unknown target, a cycle, an unresolvable
reference or a missing input raises before anything is scheduled. The walk
over the ordering then binds every item into a fresh execution context,
scheduling one task per function item, and hands the target's future to
the caller with a cleanup pass attached.
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from contextizer.core.arguments import make_arg, resolve_fields
from contextizer.core.cleanup import CleanupCoordinator, CleanupEntry
from contextizer.core.graph import GraphStore
from contextizer.core.items import ConstantItem, FunctionItem, InputItem
from contextizer.core.traversal import Ordering, traverse
from contextizer.exceptions import ConfigurationError, MissingInputError, TargetNotFoundError
from contextizer.utils.async_utils import pin, running_loop, settle
from contextizer.utils.logging import get_logger

logger = get_logger("contextizer.executor")


@dataclass
class Invocation:
    """
    One started ``execute`` call.

    Attributes:
        target: Canonical name being evaluated
        ordering: Dependency-first evaluation order, target last
        context: Canonical name -> value or awaitable for this invocation only
        result: Future of the target's value
        cleanup_done: Future resolved once this invocation's cleanup pass finished
    """

    target: str
    ordering: Ordering
    context: dict[str, Any]
    result: asyncio.Future
    cleanup_done: asyncio.Future

    async def wait_settled(self) -> None:
        """Wait for every future this invocation bound on the running loop."""
        loop = asyncio.get_running_loop()
        pending = [
            value
            for value in self.context.values()
            if asyncio.isfuture(value) and not value.done() and value.get_loop() is loop
        ]
        if pending:
            await asyncio.wait(pending)


class Executor:
    """
    Evaluates targets against a graph store.

    Each call owns an independent execution context. The only state shared
    between invocations is the graph store itself (cached promotion) and
    each function item's parameter bag.
    """

    def __init__(self, store: GraphStore, cleanup: CleanupCoordinator, cached_failures: str = "pin"):
        if cached_failures not in ("pin", "evict"):
            raise ConfigurationError(
                f"cached_failures must be 'pin' or 'evict', got {cached_failures!r}",
                details={"cached_failures": cached_failures},
            )
        self.store = store
        self.cleanup = cleanup
        self.cached_failures = cached_failures

    def plan(self, target: str) -> Ordering:
        """Evaluation order for ``target`` without running anything."""
        if target not in self.store:
            raise TargetNotFoundError(target)
        return traverse(self.store, target)

    def execute(self, target: str, inputs: Mapping[str, Any] | None = None) -> asyncio.Future:
        """
        Start evaluating ``target`` and return the future of its value.

        Must be called while an event loop is running. The future fails with
        whatever a compute callback raised; cleanup never affects it.
        """
        return self.start(target, inputs).result

    def start(self, target: str, inputs: Mapping[str, Any] | None = None) -> Invocation:
        """
        Like ``execute`` but returns the whole invocation record.

        Raises:
            TargetNotFoundError: If ``target`` is not registered
            CycleDetectedError: If the target's dependencies form a cycle
            MissingDependencyError: If a dotted reference names nothing
            DependencyNotFoundError: If a bare reference resolves nowhere
            MissingInputError: If an input item has no value in ``inputs``
            ExecutionError: If no event loop is running
        """
        inputs = inputs if inputs is not None else {}
        ordering = self.plan(target)
        self._check_inputs(ordering, inputs)

        loop = running_loop("execute()")
        logger.debug(f"Executing '{target}' over {len(ordering)} item(s)")

        context: dict[str, Any] = {}
        entries: list[CleanupEntry] = []
        for name, deps in ordering:
            item = self.store.get(name)
            if isinstance(item, InputItem):
                context[name] = pin(inputs[name])
            elif isinstance(item, ConstantItem):
                context[name] = item.bind()
            else:
                arg = make_arg(context, item, deps)
                task = loop.create_task(self._evaluate(name, item, arg), name=f"contextizer:{name}")
                context[name] = task
                if name != target:
                    task.add_done_callback(self._observe)
                if item.cached:
                    # Cached results outlive the invocation, so they are never cleaned up
                    self._promote(name, item, task)
                elif item.cleanup is not None:
                    entries.append(CleanupEntry(name, item, deps))

        result = self._as_future(context[target], loop)
        cleanup_done = self.cleanup.attach(result, entries, context)
        return Invocation(target, ordering, context, result, cleanup_done)

    def _check_inputs(self, ordering: Ordering, inputs: Mapping[str, Any]) -> None:
        for name, _ in ordering:
            if isinstance(self.store.get(name), InputItem) and name not in inputs:
                raise MissingInputError(name)

    async def _evaluate(self, name: str, item: FunctionItem, arg: dict[str, Any]) -> Any:
        values = await resolve_fields(arg)
        logger.debug(f"Computing '{name}'")
        return await settle(item.func(values))

    def _promote(self, name: str, item: FunctionItem, task: asyncio.Task) -> None:
        constant = ConstantItem(item.name, task)
        self.store.replace(name, constant)
        logger.debug(f"Promoted cached item '{name}' to a constant")

        def release(done: asyncio.Task) -> None:
            if done.cancelled():
                reason = "was cancelled"
            elif self.cached_failures == "evict" and done.exception() is not None:
                reason = "failed"
            else:
                return
            # Only undo our own promotion
            if self.store.get(name) is constant:
                self.store.replace(name, item)
                logger.warning(f"Cached item '{name}' {reason}; it will be recomputed on next use")

        task.add_done_callback(release)

    @staticmethod
    def _observe(task: asyncio.Task) -> None:
        # Failures reach the caller through the target; this only marks them retrieved
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Task '{task.get_name()}' failed: {task.exception()!r}")

    @staticmethod
    def _as_future(value: Any, loop: asyncio.AbstractEventLoop) -> asyncio.Future:
        if asyncio.isfuture(value) and value.get_loop() is loop:
            return value
        return loop.create_task(settle(value))
