"""
FILE: scratchpad/cli/commands/subtasks.py
PURPOSE: Subtask commands (sub_add, sub_done, sub_edit, sub_rm, sub_mv)
"""

import typer
from rich.markup import escape

from ..app import sub_app, console, error_console, get_store
from ...core import service
from ...core.exceptions import ScratchpadError
from ...formatting import TaskFormatter, short_id


@sub_app.command("add")
def sub_add(
    task_id: str = typer.Argument(..., help="Parent task ID (or unique prefix)"),
    title: str = typer.Argument(..., help="Subtask title"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Append a subtask to a task.

    Example:
        scratchpad sub add 9c1e "Draft outline"
    """
    try:
        subtask = get_store().add_subtask(service.resolve_task_id(task_id), title)
        if raw:
            console.print(f"{subtask.id}: {subtask.title}", markup=False)
        else:
            console.print(f"[green]✓[/green] Added subtask {short_id(subtask.id)}: {escape(subtask.title)}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@sub_app.command("done")
def sub_done(
    subtask_id: str = typer.Argument(..., help="Subtask ID (or unique prefix)"),
):
    """Toggle completion of a subtask."""
    try:
        store = get_store()
        subtask = store.toggle_subtask(service.resolve_subtask_id(subtask_id))
        completed, total = store.task_progress(subtask.task_id)
        mark = "[green]✓[/green]" if subtask.is_completed else "[yellow]○[/yellow]"
        console.print(f"{mark} {escape(subtask.title)} [dim]({completed}/{total})[/dim]")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@sub_app.command("edit")
def sub_edit(
    subtask_id: str = typer.Argument(..., help="Subtask ID (or unique prefix)"),
    title: str = typer.Argument(..., help="New title"),
):
    """Update a subtask's title."""
    try:
        subtask = get_store().rename_subtask(service.resolve_subtask_id(subtask_id), title)
        console.print(f"[blue]✎[/blue] Updated subtask {short_id(subtask.id)}: {escape(subtask.title)}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@sub_app.command("rm")
def sub_rm(
    subtask_id: str = typer.Argument(..., help="Subtask ID (or unique prefix)"),
):
    """Delete a subtask."""
    try:
        subtask = service.get_subtask(service.resolve_subtask_id(subtask_id))
        get_store().delete_subtask(subtask.id)
        console.print(f"[red]✗[/red] Deleted subtask: {escape(subtask.title)}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@sub_app.command("mv")
def sub_mv(
    task_id: str = typer.Argument(..., help="Parent task ID (or unique prefix)"),
    source: int = typer.Argument(..., help="Current position (1-based)"),
    destination: int = typer.Argument(..., help="New position (1-based)"),
):
    """
    Move a subtask to another position within its task.

    Example:
        scratchpad sub mv 9c1e 3 1
    """
    try:
        subtasks = get_store().move_subtask(
            service.resolve_task_id(task_id), source - 1, destination - 1
        )
        console.print(TaskFormatter.subtask_table(subtasks))
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
