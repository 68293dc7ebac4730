"""
FILE: scratchpad/cli/commands/system.py
PURPOSE: System commands (version, export, import, float)
"""

from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..app import app, console, error_console, get_store, __version__


@app.command()
def version():
    """Show scratchpad version."""
    console.print(f"Scratchpad v{__version__}")


@app.command()
def export(
    path: Optional[Path] = typer.Argument(
        None, help="Output file (default: TaskScratchpad-Backup-<date>.json)"
    ),
):
    """
    Export every scratchpad, task, and subtask to a JSON backup.

    Example:
        scratchpad export
        scratchpad export ~/backups/tasks.json
    """
    path = path or Path(f"TaskScratchpad-Backup-{date.today().isoformat()}.json")

    if not get_store().export_to_file(path):
        error_console.print(f"[red]Error:[/red] Could not write {escape(str(path))}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Exported to {escape(str(path))}")


@app.command("import")
def import_(
    path: Path = typer.Argument(..., help="Backup file written by 'scratchpad export'"),
):
    """
    Import a JSON backup. Imported items are added next to existing ones.

    Example:
        scratchpad import ~/backups/tasks.json
    """
    store = get_store()
    before = len(store.list_scratchpads())

    if not store.import_from_file(path):
        error_console.print(
            f"[red]Error:[/red] Could not import {path} (unreadable or not a scratchpad backup)"
        )
        raise typer.Exit(1)

    added = len(store.list_scratchpads()) - before
    console.print(f"[green]✓[/green] Imported {added} scratchpad(s) from {escape(str(path))}")


@app.command("float")
def float_(
    state: Optional[bool] = typer.Argument(None, help="on/off (omit to show current state)"),
):
    """
    Show or set the "float on top" window preference.

    Example:
        scratchpad float
        scratchpad float true
    """
    store = get_store()
    if state is not None:
        store.is_floating = state
    console.print(f"Float on top: {'on' if store.is_floating else 'off'}")
