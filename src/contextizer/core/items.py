"""
Graph item variants.

An item is one of three variants stored behind a single slot per canonical
name in the graph store. Cached promotion swaps a FunctionItem slot for a
ConstantItem, so code must always re-read the slot instead of holding on
to an item across invocations.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from contextizer.core.names import CanonicalName
from contextizer.utils.async_utils import pin


@dataclass
class InputItem:
    """Value supplied fresh from the caller's input bag on every invocation."""

    name: CanonicalName

    @property
    def deps(self) -> list[str]:
        return []

    def __repr__(self) -> str:
        return f"InputItem('{self.name}')"


@dataclass
class ConstantItem:
    """Fixed value, or awaitable, set at registration time."""

    name: CanonicalName
    value: Any = None

    @property
    def deps(self) -> list[str]:
        return []

    def bind(self) -> Any:
        """
        Value to place in an invocation context.

        A bare coroutine can only be awaited once, so the first binding
        schedules it and pins the resulting future in place of the
        coroutine. Must be called with a running event loop.
        """
        self.value = pin(self.value)
        return self.value

    def __repr__(self) -> str:
        return f"ConstantItem('{self.name}')"


@dataclass
class FunctionItem:
    """
    Value computed from dependency values plus the item's parameter bag.

    Attributes:
        name: Canonical name
        deps: Dependency references exactly as declared (possibly shorthand)
        func: Compute callback, called with the argument mapping
        cleanup: Optional callback run once per invocation after the target settles
        params: Mutable state shared by every invocation of this item
        cached: Promote to a constant holding the first invocation's result
    """

    name: CanonicalName
    deps: list[str]
    func: Callable[[dict[str, Any]], Any]
    cleanup: Callable[[dict[str, Any]], Any] | None = None
    params: dict[str, Any] = field(default_factory=dict)
    cached: bool = False

    def __repr__(self) -> str:
        return f"FunctionItem('{self.name}', deps={self.deps!r}, cached={self.cached})"


Item = InputItem | ConstantItem | FunctionItem
