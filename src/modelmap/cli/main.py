"""
Main CLI entry point.
"""

import typer

from modelmap import __version__
from modelmap.cli import inspect


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"modelmap version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="modelmap",
    help="modelmap - wire spreadsheet models together and work out their execution order",
    add_completion=True,
)

app.command("inspect")(inspect.inspect)


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """
    modelmap - wire spreadsheet models together and work out their execution order.

    Run 'modelmap <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
