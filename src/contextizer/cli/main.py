"""
Main CLI entry point.

Every command takes the graph as MODULE:ATTRIBUTE, naming a Contextizer
instance (or a zero-argument factory returning one) importable from the
project directory.
"""

import typer

from contextizer import __version__
from contextizer.cli.items import items
from contextizer.cli.plan import plan
from contextizer.cli.run import run

app = typer.Typer(
    name="contextizer",
    help="Contextizer - per-invocation context injection",
    add_completion=False,
)

app.command("items")(items)
app.command("plan")(plan)
app.command("run")(run)


def show_version(value: bool) -> None:
    if value:
        typer.echo(f"contextizer version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", callback=show_version, is_eager=True, help="Show version and exit."
    ),
):
    """
    Inspect and evaluate Contextizer graphs.

    Run 'contextizer <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def main():
    app()


if __name__ == "__main__":
    main()
