"""
Graph store: canonical name -> item slot.

Each name is registered once through ``register(name)``, which hands back a
configurator with three terminal calls (input, constant, function). The
store is built once and then read by every invocation; the only later
writes are cached-function promotions.
"""

from collections.abc import Callable, Iterator, Sequence
from typing import Any

from contextizer.core.items import ConstantItem, FunctionItem, InputItem, Item
from contextizer.core.names import CanonicalName
from contextizer.exceptions import DuplicateNameError, RegistrationError
from contextizer.utils.logging import get_logger

logger = get_logger("contextizer.graph")


class ItemConfigurator:
    """Terminal step of ``GraphStore.register``; finishes exactly one item."""

    def __init__(self, store: "GraphStore", name: CanonicalName):
        self._store = store
        self._name = name
        self._done = False

    def as_input(self) -> InputItem:
        """Register the name as a per-invocation input."""
        return self._finish(InputItem(self._name))

    def as_constant(self, value: Any) -> ConstantItem:
        """Register a fixed value or awaitable."""
        return self._finish(ConstantItem(self._name, value))

    def as_function(
        self,
        deps: Sequence[str],
        func: Callable[[dict[str, Any]], Any],
        cleanup: Callable[[dict[str, Any]], Any] | None = None,
        params: dict[str, Any] | None = None,
        cached: bool = False,
    ) -> FunctionItem:
        """
        Register a computed item.

        Args:
            deps: Dependency references (bare, dotted, or ``.``-prefixed)
            func: Compute callback ``(arg) -> value | awaitable``
            cleanup: Optional cleanup callback ``(arg) -> Any``; ``arg["$value"]``
                holds the item's own result (None if it failed)
            params: Mutable parameter bag merged into every argument mapping
            cached: Compute once and reuse the result for the store's lifetime
        """
        if isinstance(deps, str) or not all(isinstance(d, str) and d for d in deps):
            raise RegistrationError(
                f"Item '{self._name}': deps must be a sequence of non-empty names, got {deps!r}",
                details={"name": str(self._name)},
            )
        if not callable(func):
            raise RegistrationError(f"Item '{self._name}': func must be callable", details={"name": str(self._name)})
        if cleanup is not None and not callable(cleanup):
            raise RegistrationError(
                f"Item '{self._name}': cleanup must be callable", details={"name": str(self._name)}
            )
        item = FunctionItem(
            name=self._name,
            deps=list(deps),
            func=func,
            cleanup=cleanup,
            params=params if params is not None else {},
            cached=bool(cached),
        )
        return self._finish(item)

    def _finish(self, item: Item) -> Any:
        if self._done:
            raise RegistrationError(
                f"Item '{self._name}' was already configured", details={"name": str(self._name)}
            )
        self._store._claim(item)
        self._done = True
        return item


class GraphStore:
    """Mapping from canonical name to item, one registration per name."""

    def __init__(self) -> None:
        self._slots: dict[str, Item] = {}

    def register(self, name: str) -> ItemConfigurator:
        """
        Start registering ``name``.

        Raises:
            InvalidNameError: If ``name`` is empty, not a string, or has empty segments
            DuplicateNameError: If ``name`` is already registered
        """
        canonical = CanonicalName.parse(name)
        if name in self._slots:
            raise DuplicateNameError(name, self._slots[name])
        return ItemConfigurator(self, canonical)

    def _claim(self, item: Item) -> None:
        name = str(item.name)
        # Checked again: two configurators may be open for the same name
        if name in self._slots:
            raise DuplicateNameError(name, self._slots[name])
        self._slots[name] = item
        logger.debug(f"Registered {item!r}")

    def get(self, name: str) -> Item | None:
        """Current item in the slot for ``name``."""
        return self._slots.get(name)

    def replace(self, name: str, item: Item) -> None:
        """Swap the item held by an existing slot (cached promotion)."""
        if name not in self._slots:
            raise KeyError(name)
        self._slots[name] = item

    def names(self) -> list[str]:
        """Registered canonical names in registration order."""
        return list(self._slots)

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)
