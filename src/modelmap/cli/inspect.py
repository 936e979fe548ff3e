"""
modelmap inspect - Show the ports a workbook would contribute to the graph.
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from modelmap.config.loader import Config, load_config
from modelmap.config.singleton import set_config
from modelmap.exceptions import ConfigurationError
from modelmap.ingestion.excel import IngestionResult, is_accepted_file, parse_workbook, rejected_file_message
from modelmap.utils.logging import setup_logging, setup_logging_from_config

console = Console()
err_console = Console(stderr=True)


def _load_project_config(project_dir: Path) -> Config:
    """Load config.yaml when the project has one, defaults otherwise."""
    if not (project_dir / "config.yaml").exists():
        setup_logging(level="ERROR", console=err_console)
        return Config({})

    try:
        config = load_config(project_dir)
    except ConfigurationError as e:
        err_console.print(e.message, style="red", markup=False, highlight=False)
        raise typer.Exit(2) from None

    set_config(config)
    setup_logging_from_config(config.data, project_dir=project_dir, console=err_console)
    return config


def _render(result: IngestionResult) -> None:
    console.print(f"\n[bold blue]{escape(result.filename)}[/bold blue]")

    if result.error:
        console.print(result.error, style="red", markup=False, highlight=False)
        return

    table = Table(show_header=True)
    table.add_column("#", style="dim", justify="right")
    table.add_column(f"Inputs ({len(result.inputs)})", style="cyan")
    table.add_column(f"Outputs ({len(result.outputs)})", style="green")

    for i in range(max(len(result.inputs), len(result.outputs))):
        table.add_row(
            str(i + 1),
            escape(result.inputs[i]) if i < len(result.inputs) else "",
            escape(result.outputs[i]) if i < len(result.outputs) else "",
        )

    if not result.inputs and not result.outputs:
        table.add_row("", "[dim]none[/dim]", "[dim]none[/dim]")

    console.print(table)


def inspect(
    path: Path = typer.Argument(..., help="Workbook (.xlsx or .xls) to read"),
    as_json: bool = typer.Option(False, "--json", help="Print the ingestion result as JSON"),
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-d", help="Directory holding config.yaml"),
) -> None:
    """
    Read a workbook's INPUTS and OUTPUTS sheets and list its variables.

    Exits with status 1 when the workbook cannot be used as a model.

    Examples:
        modelmap inspect revenue.xlsx
        modelmap inspect revenue.xlsx --json
    """
    config = _load_project_config(project_dir)

    if not is_accepted_file(path.name, config.accepted_extensions):
        result = IngestionResult(filename=path.name, error=rejected_file_message(config.accepted_extensions))
    else:
        result = parse_workbook(path)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render(result)

    if not result.ok:
        raise typer.Exit(1)
