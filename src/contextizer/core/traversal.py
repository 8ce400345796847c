"""
Topological ordering of a target's transitive dependencies.

Depth-first post-order visit from the target. A node is appended after all
of its dependencies, so the target is always last and every entry's
dependencies appear strictly before it.
"""

from contextizer.core.graph import GraphStore
from contextizer.core.items import FunctionItem
from contextizer.core.names import resolve_reference
from contextizer.exceptions import CycleDetectedError, MissingDependencyError

# (canonical name, resolved dependency names)
Ordering = list[tuple[str, list[str]]]


def resolve_dependencies(store: GraphStore, name: str, required_by: str | None = None) -> list[str]:
    """
    Canonical names of the dependencies declared by ``name``.

    Raises:
        MissingDependencyError: If ``name`` itself is not registered
        DependencyNotFoundError: If a bare reference resolves nowhere
    """
    item = store.get(name)
    if item is None:
        raise MissingDependencyError(name, required_by=required_by)
    if not isinstance(item, FunctionItem):
        return []
    return [resolve_reference(item.name, dep, store) for dep in item.deps]


def traverse(store: GraphStore, target: str) -> Ordering:
    """
    Dependency-first ordering of everything ``target`` needs, ending with ``target``.

    Traversal state lives only in this call, so concurrent invocations
    never see each other's marks.

    Raises:
        CycleDetectedError: With the on-path names followed by the repeated name
        MissingDependencyError: If a resolved name has no item
        DependencyNotFoundError: If a bare reference resolves nowhere
    """
    result: dict[str, list[str]] = {}
    visited: set[str] = set()
    # Insertion-ordered: outermost call first
    on_path: dict[str, None] = {}

    def visit(name: str, parent: str | None) -> None:
        visited.add(name)
        on_path[name] = None

        deps = resolve_dependencies(store, name, required_by=parent)
        for dep in deps:
            if dep not in visited:
                visit(dep, name)
            elif dep in on_path:
                raise CycleDetectedError([*on_path, dep])

        del on_path[name]
        if name not in result:
            result[name] = deps

    visit(target, None)
    return list(result.items())


def render_plan(ordering: Ordering) -> str:
    """Numbered evaluation order, one item per line with its dependencies."""
    lines = []
    width = len(str(len(ordering)))
    for index, (name, deps) in enumerate(ordering, start=1):
        suffix = f" <- {', '.join(deps)}" if deps else ""
        lines.append(f"{index:>{width}}. {name}{suffix}")
    return "\n".join(lines)


def render_tree(ordering: Ordering) -> str:
    """
    Dependency tree of the ordering's target (its last entry).

    Shows dependencies with tree branches (│, ├─, └─). A subtree is
    expanded the first time it appears; later appearances are marked.
    """
    if not ordering:
        return ""

    deps_of = dict(ordering)
    target = ordering[-1][0]
    lines = [target]
    expanded: set[str] = {target}

    def build_tree(name: str, prefix: str) -> None:
        children = deps_of.get(name, [])
        for i, child in enumerate(children):
            is_last = i == len(children) - 1
            branch = "└─ " if is_last else "├─ "
            if child in expanded and deps_of.get(child):
                lines.append(f"{prefix}{branch}{child} (shared)")
                continue
            lines.append(f"{prefix}{branch}{child}")
            expanded.add(child)
            build_tree(child, prefix + ("   " if is_last else "│  "))

    build_tree(target, "")
    return "\n".join(lines)
