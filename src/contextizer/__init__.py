"""
Contextizer - per-invocation context injection for asyncio.

Declare inputs, constants and functions with dependencies once; evaluate
any target with fresh inputs on every call, with guaranteed cleanup.
"""

__version__ = "0.1.0"

from contextizer.config.loader import Config, load_config
from contextizer.core.contextizer import Contextizer
from contextizer.core.traversal import render_plan, render_tree

from contextizer.exceptions import (
    ConfigurationError,
    ContextizerError,
    CycleDetectedError,
    DependencyNotFoundError,
    DuplicateNameError,
    ExecutionError,
    InvalidNameError,
    MissingDependencyError,
    MissingInputError,
    RegistrationError,
    ResolutionError,
    TargetNotFoundError,
)

from contextizer.utils.logging import get_logger, setup_logging, setup_logging_from_config

__all__ = [
    "Contextizer",
    "render_plan",
    "render_tree",
    # Config
    "Config",
    "load_config",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Exceptions
    "ContextizerError",
    "ConfigurationError",
    "RegistrationError",
    "DuplicateNameError",
    "InvalidNameError",
    "ResolutionError",
    "TargetNotFoundError",
    "MissingDependencyError",
    "DependencyNotFoundError",
    "CycleDetectedError",
    "ExecutionError",
    "MissingInputError",
]
