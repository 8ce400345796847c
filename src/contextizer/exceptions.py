"""
Contextizer exception hierarchy.

All domain-specific exceptions inherit from ContextizerError, making it easy
to catch any framework error with a single base class while still allowing
fine-grained handling when needed.

Hierarchy::

    ContextizerError
    ├── ConfigurationError         - config loading, parsing, validation
    ├── RegistrationError          - graph registration
    │   ├── DuplicateNameError     - canonical name already registered
    │   └── InvalidNameError       - empty or malformed canonical name
    ├── ResolutionError            - structural errors raised before evaluation
    │   ├── TargetNotFoundError    - executed name is not registered
    │   ├── MissingDependencyError - resolved dependency has no item
    │   ├── DependencyNotFoundError - bare reference matches no namespace
    │   └── CycleDetectedError     - dependency cycle on the traversal path
    └── ExecutionError             - per-invocation failures
        └── MissingInputError      - input item absent from the input bag

Errors raised by compute callbacks are never wrapped: they propagate
unchanged out of the target's future.
"""

from __future__ import annotations


class ContextizerError(Exception):
    """Base exception for all Contextizer errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(ContextizerError):
    """Raised when configuration loading, parsing, or validation fails."""


# --- Registration ------------------------------------------------------------


class RegistrationError(ContextizerError):
    """Raised when an item cannot be registered."""


class DuplicateNameError(RegistrationError):
    """Raised when a canonical name is registered twice."""

    def __init__(self, name: str, existing: object = None) -> None:
        super().__init__(
            f"Name '{name}' already registered as {existing!r}",
            details={"name": name},
        )
        self.name = name


class InvalidNameError(RegistrationError):
    """Raised for an empty, non-string or malformed canonical name."""

    def __init__(self, name: object) -> None:
        super().__init__(f"Invalid item name: {name!r}", details={"name": name})
        self.name = name


# --- Resolution --------------------------------------------------------------


class ResolutionError(ContextizerError):
    """Raised when a target's dependency graph cannot be planned."""


class TargetNotFoundError(ResolutionError):
    """Raised when executing a name that is not registered."""

    def __init__(self, target: str) -> None:
        super().__init__(f"Target '{target}' not found", details={"target": target})
        self.target = target


class MissingDependencyError(ResolutionError):
    """Raised when a canonical dependency name has no registered item."""

    def __init__(self, name: str, *, required_by: str | None = None) -> None:
        message = f"Missing dependency: '{name}'"
        if required_by is not None:
            message += f" (required by '{required_by}')"
        super().__init__(message, details={"name": name, "required_by": required_by})
        self.name = name
        self.required_by = required_by


class DependencyNotFoundError(ResolutionError):
    """Raised when a bare dependency reference matches no enclosing namespace."""

    def __init__(self, dependency: str, path: str) -> None:
        super().__init__(
            f"Dependency '{dependency}' not found for item '{path}'",
            details={"dependency": dependency, "path": path},
        )
        self.dependency = dependency
        self.path = path


class CycleDetectedError(ResolutionError):
    """Raised when traversal revisits a name still on the active path."""

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(
            "Dependency cycle found: " + " -> ".join(cycle),
            details={"cycle": list(cycle)},
        )
        self.cycle = list(cycle)


# --- Execution ---------------------------------------------------------------


class ExecutionError(ContextizerError):
    """Raised when an invocation cannot be started."""


class MissingInputError(ExecutionError):
    """Raised when an input item has no value in the invocation's input bag."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing input '{name}'", details={"input": name})
        self.name = name
