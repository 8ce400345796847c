"""
Core engine: graph store, name resolution, traversal, execution and cleanup.
"""

from contextizer.core.cleanup import CleanupCoordinator
from contextizer.core.contextizer import Contextizer
from contextizer.core.executor import Executor, Invocation
from contextizer.core.graph import GraphStore, ItemConfigurator
from contextizer.core.items import ConstantItem, FunctionItem, InputItem
from contextizer.core.names import CanonicalName, resolve_reference
from contextizer.core.traversal import render_plan, render_tree, traverse

__all__ = [
    "Contextizer",
    "GraphStore",
    "ItemConfigurator",
    "InputItem",
    "ConstantItem",
    "FunctionItem",
    "CanonicalName",
    "resolve_reference",
    "traverse",
    "render_plan",
    "render_tree",
    "Executor",
    "Invocation",
    "CleanupCoordinator",
]
