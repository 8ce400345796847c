"""
contextizer run - Evaluate a target once.
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.pretty import Pretty

from contextizer.cli.common import load_contextizer, parse_inputs
from contextizer.exceptions import ContextizerError
from contextizer.utils.logging import get_logger, setup_logging

logger = get_logger("contextizer.cli.run")
console = Console()


def run(
    graph: str = typer.Argument(..., help="Graph to load, as MODULE:ATTRIBUTE"),
    target: str = typer.Argument(..., help="Item to evaluate"),
    inputs: list[str] | None = typer.Option(None, "--input", "-i", help="Input value as key=value (repeatable)"),
    json_inputs: bool = typer.Option(False, "--json", help="Decode input values as JSON"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-d", help="Directory to import the graph from"),
) -> None:
    """
    Evaluate TARGET with the given inputs and print its value.

    Examples:
        contextizer run app.graph:ctx sum -i a=4 --json
        contextizer run app.graph:ctx info -i user='{"id": 1}' --json -o json
    """
    if output not in ("pretty", "json"):
        raise typer.BadParameter(f"Unknown output format '{output}'")

    setup_logging(level="DEBUG" if verbose else "WARNING")
    ctx = load_contextizer(graph, project_dir)
    bag = parse_inputs(inputs, as_json=json_inputs)

    try:
        value = ctx.run(target, bag)
    except ContextizerError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e
    except Exception as e:
        logger.debug(f"Target '{target}' failed", exc_info=e)
        console.print(f"[red]Target '{target}' failed: {e!r}[/red]")
        raise typer.Exit(1) from e

    if output == "json":
        typer.echo(json.dumps(value, indent=2, default=str))
    else:
        console.print(Pretty(value))
