"""
contextizer items - List the items registered in a graph.

Shows every registered name with its kind, its dependency references as
declared, and whether it is cached or has a cleanup callback.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from contextizer.cli.common import item_kind, load_contextizer
from contextizer.core.items import FunctionItem

console = Console()


def items(
    graph: str = typer.Argument(..., help="Graph to load, as MODULE:ATTRIBUTE"),
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="Only names under this namespace"),
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-d", help="Directory to import the graph from"),
) -> None:
    """
    List registered items.

    Examples:
        contextizer items app.graph:ctx
        contextizer items app.graph:ctx -n com.example
    """
    ctx = load_contextizer(graph, project_dir)
    prefix = f"{namespace.strip('.')}." if namespace else ""
    names = [name for name in ctx.graph if name.startswith(prefix)]

    if not names:
        console.print("[yellow]No items registered[/yellow]")
        return

    table = Table(title=f"Items ({len(names)})", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Depends on", style="yellow")
    table.add_column("Flags", style="dim")
    for name in names:
        item = ctx.graph.get(name)
        deps = ", ".join(item.deps)
        flags = []
        if isinstance(item, FunctionItem):
            if item.cached:
                flags.append("cached")
            if item.cleanup is not None:
                flags.append("cleanup")
        table.add_row(name, item_kind(item), deps, " ".join(flags))
    console.print(table)
