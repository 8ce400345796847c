"""
Canonical names and dependency reference resolution.

A canonical name is a dot-delimited path (``a.b.c``). Its prefixes form an
implicit namespace hierarchy; there is no separate namespace object.

Dependency references declared on function items come in three forms:

- ``.value``   absolute: leading dot stripped, rest used as-is
- ``pkg.value`` already canonical: used verbatim
- ``value``    bare: looked up from the innermost enclosing namespace
               of the referring item outwards
"""

from collections.abc import Container
from dataclasses import dataclass

from contextizer.exceptions import DependencyNotFoundError, InvalidNameError

SEPARATOR = "."


@dataclass(frozen=True)
class CanonicalName:
    """A canonical name parsed into its segments once."""

    segments: tuple[str, ...]

    @classmethod
    def parse(cls, name: str) -> "CanonicalName":
        if not isinstance(name, str) or not name:
            raise InvalidNameError(name)
        segments = tuple(name.split(SEPARATOR))
        if not all(segments):
            raise InvalidNameError(name)
        return cls(segments)

    @property
    def namespace(self) -> tuple[str, ...]:
        """Segments of the enclosing namespace (empty for top-level names)."""
        return self.segments[:-1]

    def candidates(self, dep: str) -> list[str]:
        """
        Candidate canonical names for a bare reference, innermost first.

        The referring name itself is never a candidate, so ``pkg.foo`` can
        depend on a bare ``foo`` that lives in an outer namespace.
        """
        own = str(self)
        result = []
        for i in range(len(self.segments) - 1, -1, -1):
            candidate = SEPARATOR.join(self.segments[:i] + (dep,))
            if candidate != own:
                result.append(candidate)
        return result

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)


def resolve_reference(path: CanonicalName, dep: str, registered: Container[str]) -> str:
    """
    Resolve one declared dependency reference to a canonical name.

    Dotted references are not checked against ``registered``; a missing
    target surfaces later as a missing dependency during traversal.

    Args:
        path: Canonical name of the referring item
        dep: Dependency reference as declared
        registered: Names currently present in the graph store

    Returns:
        Canonical dependency name

    Raises:
        DependencyNotFoundError: If a bare reference resolves in no namespace
    """
    if SEPARATOR in dep:
        if dep.startswith(SEPARATOR):
            return dep[1:]
        return dep

    for candidate in path.candidates(dep):
        if candidate in registered:
            return candidate
    raise DependencyNotFoundError(dep, str(path))
