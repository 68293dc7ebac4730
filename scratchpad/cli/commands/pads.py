"""
FILE: scratchpad/cli/commands/pads.py
PURPOSE: Scratchpad commands (pad_add, pad_ls, pad_rm, pad_rename, pad_color, pad_select)
"""

import json
from typing import Optional

import typer
from rich.markup import escape

from ..app import pad_app, console, error_console, get_store
from ...core import service
from ...core.exceptions import ScratchpadError
from ...formatting import TaskFormatter, short_id


@pad_app.command("add")
def pad_add(
    name: Optional[str] = typer.Argument(None, help="Scratchpad name (default: Untitled)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new scratchpad and select it.

    Example:
        scratchpad pad add "Work"
        scratchpad pad add --json
    """
    try:
        pad = get_store().add_scratchpad(name)

        if json_output:
            console.print_json(pad.to_json())
        elif raw:
            console.print(f"{pad.id}: {pad.name}", markup=False)
        else:
            console.print(f"[green]✓[/green] Created scratchpad {short_id(pad.id)}: {escape(pad.name)}")

    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@pad_app.command("ls")
def pad_ls(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List all scratchpads; the selected one is marked.

    Example:
        scratchpad pad ls
        scratchpad pad ls --json
    """
    try:
        store = get_store()
        pads = store.list_scratchpads()
        selected = store.selected_scratchpad_id

        if json_output:
            data = [dict(pad.to_dict(), selected=pad.id == selected) for pad in pads]
            console.print_json(json.dumps(data))
        elif raw:
            for pad in pads:
                marker = "*" if pad.id == selected else " "
                console.print(f"{marker} {pad.id}: {pad.name}", markup=False)
        else:
            console.print(TaskFormatter.scratchpad_table(pads, selected))
            console.print(f"\n[dim]Total: {len(pads)} scratchpad(s)[/dim]")

    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@pad_app.command("rm")
def pad_rm(
    pad_id: str = typer.Argument(..., help="Scratchpad ID (or unique prefix)"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete a scratchpad with all of its tasks.

    The last remaining scratchpad cannot be deleted.

    Example:
        scratchpad pad rm 3f2a
        scratchpad pad rm 3f2a --yes
    """
    try:
        store = get_store()
        pad = service.get_scratchpad(service.resolve_scratchpad_id(pad_id))
        task_count = len(store.list_tasks(pad.id))

        if not yes and task_count:
            console.print(f"[yellow]'{escape(pad.name)}' has {task_count} task(s)[/yellow]")
            if not typer.confirm("Delete it anyway?", default=False):
                console.print("[dim]Cancelled[/dim]")
                raise typer.Exit(0)

        if not store.delete_scratchpad(pad.id):
            error_console.print("[yellow]Can't delete the last scratchpad[/yellow]")
            raise typer.Exit(1)

        console.print(f"[red]✗[/red] Deleted scratchpad: {escape(pad.name)}")

    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@pad_app.command("rename")
def pad_rename(
    pad_id: str = typer.Argument(..., help="Scratchpad ID (or unique prefix)"),
    name: str = typer.Argument(..., help="New name"),
):
    """
    Rename a scratchpad.

    Example:
        scratchpad pad rename 3f2a "Side project"
    """
    try:
        pad = get_store().rename_scratchpad(service.resolve_scratchpad_id(pad_id), name)
        console.print(f"[blue]✎[/blue] Renamed scratchpad {short_id(pad.id)}: {escape(pad.name)}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@pad_app.command("color")
def pad_color(
    pad_id: str = typer.Argument(..., help="Scratchpad ID (or unique prefix)"),
    hex_value: str = typer.Argument(..., help="Color as #RRGGBB"),
):
    """Change a scratchpad's color tag."""
    try:
        pad = get_store().recolor_scratchpad(service.resolve_scratchpad_id(pad_id), hex_value)
        console.print(f"[{pad.color_hex}]●[/] {escape(pad.name)} is now {pad.color_hex}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@pad_app.command("select")
def pad_select(
    pad_id: str = typer.Argument(..., help="Scratchpad ID (or unique prefix)"),
):
    """
    Select the scratchpad that task commands use by default.

    Example:
        scratchpad pad select 3f2a
    """
    try:
        store = get_store()
        store.select_scratchpad(service.resolve_scratchpad_id(pad_id))
        console.print(f"[cyan]→[/cyan] Selected {escape(store.selected_scratchpad().name)}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
