"""
Contextizer: context injection.

Like dependency injection but done per invocation, with new inputs every
time. Items are registered once; each ``execute`` call resolves the
target's dependencies from scratch (except cached items), then runs the
cleanup callbacks of everything it touched.

Example:
    ctx = Contextizer()
    ctx.register("a").as_input()
    ctx.register("b").as_constant(5)
    ctx.register("sum").as_function(deps=["a", "b"], func=lambda arg: arg["a"] + arg["b"])

    await ctx.execute("sum", {"a": 4})   # 9
    ctx.run("sum", {"a": 4})             # 9, from synchronous code
"""

import os
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from contextizer.config.loader import Config, load_config
from contextizer.config.singleton import GlobalConfig
from contextizer.core.cleanup import CleanupCoordinator, ErrorSink
from contextizer.core.executor import Executor
from contextizer.core.graph import GraphStore, ItemConfigurator
from contextizer.core.traversal import Ordering
from contextizer.utils.async_utils import dual
from contextizer.utils.logging import setup_logging_from_config


class Contextizer:
    """
    Registration and execution surface over one graph store.

    Attributes:
        config: Resolved configuration
        graph: Graph store holding every registered item
        cleanup: Cleanup coordinator shared by all invocations
        executor: Execution engine
    """

    def __init__(self, config: Config | Mapping[str, Any] | None = None, on_cleanup_error: ErrorSink | None = None):
        if not isinstance(config, Config):
            config = Config(dict(config or {}))
        config.validate()
        self.config = config
        self.graph = GraphStore()
        self.cleanup = CleanupCoordinator(on_error=on_cleanup_error)
        self.executor = Executor(
            self.graph,
            self.cleanup,
            cached_failures=config.get("engine.cached_failures", "pin"),
        )

    @classmethod
    def from_project(
        cls,
        project_dir: Path | str | None = None,
        env: str | None = None,
        on_cleanup_error: ErrorSink | None = None,
    ) -> "Contextizer":
        """
        Build an instance from ``contextizer.yaml`` in ``project_dir``.

        Installs the config globally and configures logging from it.

        Environment:
            Uses CONTEXTIZER_ENV when ``env`` is not given
        """
        project_dir = Path(project_dir) if project_dir is not None else Path.cwd()
        env = env or os.environ.get("CONTEXTIZER_ENV")
        config = load_config(project_dir, env)
        GlobalConfig.set_config(config, project_dir=project_dir)
        setup_logging_from_config(config.data, project_dir=project_dir)
        return cls(config, on_cleanup_error=on_cleanup_error)

    def register(self, name: str) -> ItemConfigurator:
        """Start registering ``name``; finish with as_input/as_constant/as_function."""
        return self.graph.register(name)

    def function(
        self,
        name: str,
        deps: Sequence[str] = (),
        cleanup: Callable[[dict[str, Any]], Any] | None = None,
        params: dict[str, Any] | None = None,
        cached: bool = False,
    ) -> Callable[[Callable], Callable]:
        """
        Decorator form of ``register(name).as_function(...)``.

        The decorated callable is registered as the compute callback and
        returned unchanged.
        """

        def decorator(func: Callable) -> Callable:
            self.register(name).as_function(deps=deps, func=func, cleanup=cleanup, params=params, cached=cached)
            return func

        return decorator

    def plan(self, target: str) -> Ordering:
        """Dependency-first evaluation order for ``target``."""
        return self.executor.plan(target)

    def execute(self, target: str, inputs: Mapping[str, Any] | None = None):
        """
        Start evaluating ``target``; returns an ``asyncio.Future``.

        Structural problems (unknown target, cycles, unresolvable
        references, missing inputs) raise immediately.
        """
        return self.executor.execute(target, inputs)

    @dual
    async def run(self, target: str, inputs: Mapping[str, Any] | None = None) -> Any:
        """
        Evaluate ``target`` and wait for its cleanup pass.

        Also waits for every other task the invocation started, so that a
        failing target never leaves siblings (cached ones included) to be
        cancelled when a synchronous call closes its event loop.

        Blocks when called from synchronous code; returns a coroutine when
        an event loop is already running.
        """
        invocation = self.executor.start(target, inputs)
        try:
            return await invocation.result
        finally:
            await invocation.wait_settled()
            await invocation.cleanup_done

    async def drain(self) -> None:
        """Wait for every running cleanup pass."""
        await self.cleanup.drain()

    def __contains__(self, name: object) -> bool:
        return name in self.graph

    def __len__(self) -> int:
        return len(self.graph)
