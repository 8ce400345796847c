"""
contextizer plan - Show the evaluation order of a target.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from contextizer.cli.common import item_kind, load_contextizer
from contextizer.core.traversal import render_tree
from contextizer.exceptions import ContextizerError

console = Console()


def plan(
    graph: str = typer.Argument(..., help="Graph to load, as MODULE:ATTRIBUTE"),
    target: str = typer.Argument(..., help="Item to plan"),
    tree: bool = typer.Option(False, "--tree", "-t", help="Show a dependency tree instead of a table"),
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-d", help="Directory to import the graph from"),
) -> None:
    """
    Show which items evaluating TARGET touches, dependencies first.

    Examples:
        contextizer plan app.graph:ctx info
        contextizer plan app.graph:build info --tree
    """
    ctx = load_contextizer(graph, project_dir)
    try:
        ordering = ctx.plan(target)
    except ContextizerError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    if tree:
        console.print(render_tree(ordering), highlight=False)
        return

    table = Table(title=f"Evaluation order for '{target}'", title_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Item", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Depends on", style="yellow")
    for index, (name, deps) in enumerate(ordering, start=1):
        table.add_row(str(index), name, item_kind(ctx.graph.get(name)), ", ".join(deps))
    console.print(table)
