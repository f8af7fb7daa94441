"""Update command - re-render every managed file"""

from __future__ import annotations

from rich.table import Table

from projectctl.lib.context import CLIContext
from projectctl.lib.errors import handle_error
from projectctl.models import UpdateCommand
from projectctl.services import run_command

from .utils import console


def update_command(ctx: CLIContext, force: bool = False) -> None:
    """Re-render the managed files of the project."""
    try:
        report = run_command(ctx, UpdateCommand(force=force))
    except Exception as e:
        handle_error(e)

    if not report.updated and not report.skipped:
        console.print("[yellow]No rendered files found[/yellow]")
        return

    table = Table()
    table.add_column("File", style="cyan")
    table.add_column("Status")
    for rel in report.updated:
        table.add_row(rel, "[green]updated[/green]")
    for rel in report.skipped:
        table.add_row(rel, "[yellow]skipped (modified)[/yellow]")
    console.print(table)
