"""
FILE: scratchpad/cli/commands/tasks.py
PURPOSE: Task commands (add, ls, show, done, edit, note, focus, color, collapse, mv, rm, clear)
"""

import json
import os
import subprocess
import sys
import tempfile
from typing import List, Optional

import typer
from rich.markup import escape

from ..app import app, console, error_console, get_store
from ...core import service
from ...core.exceptions import ScratchpadError
from ...formatting import TaskFormatter, short_id


def parse_ids(value: str) -> List[str]:
    """Split a comma-separated id list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def resolve_pad(pad_prefix: Optional[str]) -> Optional[str]:
    return service.resolve_scratchpad_id(pad_prefix) if pad_prefix else None


def render_task_list(pad_id: Optional[str] = None, json_output: bool = False, raw: bool = False) -> None:
    """Print the tasks of a scratchpad (default: selected) in display order."""
    store = get_store()
    pad = service.get_scratchpad(pad_id) if pad_id else store.ensure_default_scratchpad()
    tasks = store.list_tasks(pad.id)
    subtasks = {task.id: store.list_subtasks(task.id) for task in tasks}

    if json_output:
        data = [
            dict(task.to_dict(), subtasks=[s.to_dict() for s in subtasks[task.id]])
            for task in tasks
        ]
        console.print_json(json.dumps(data))
    elif raw:
        for position, task in enumerate(tasks, start=1):
            mark = "x" if task.is_completed else " "
            console.print(f"{position}. [{mark}] {short_id(task.id)} {task.title}", markup=False)
            for subtask in subtasks[task.id]:
                mark = "x" if subtask.is_completed else " "
                console.print(f"     [{mark}] {short_id(subtask.id)} {subtask.title}", markup=False)
    else:
        if not tasks:
            console.print(f"[dim]No tasks in {escape(pad.name)}[/dim]")
            return
        console.print(TaskFormatter.task_table(tasks, title=pad.name, subtasks=subtasks))
        completed = sum(1 for t in tasks if t.is_completed)
        console.print(f"\n[dim]{completed}/{len(tasks)} done[/dim]")


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    pad: Optional[str] = typer.Option(None, "--pad", "-p", help="Scratchpad ID (default: selected)"),
    note_text: str = typer.Option("", "--note", "-n", help="Quick context note"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task at the top of a scratchpad.

    Example:
        scratchpad add "Write documentation"
        scratchpad add "Fix bug" --pad 3f2a --note "see issue tracker"
    """
    try:
        task = get_store().add_task(title, scratchpad_id=resolve_pad(pad), notes=note_text)

        if json_output:
            console.print_json(task.to_json())
        elif raw:
            console.print(f"{task.id}: {task.title}", markup=False)
        else:
            console.print(f"[green]✓ Created task [bold]{short_id(task.id)}[/bold]:[/green] {escape(task.title)}")

    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def ls(
    pad: Optional[str] = typer.Option(None, "--pad", "-p", help="Scratchpad ID (default: selected)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks: open ones first, then completed.

    Example:
        scratchpad ls
        scratchpad ls --pad 3f2a --json
    """
    try:
        render_task_list(resolve_pad(pad), json_output=json_output, raw=raw)
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def show(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show full details for a task including notes and focus notes.

    Example:
        scratchpad show 9c1e
    """
    try:
        store = get_store()
        task = service.get_task(service.resolve_task_id(task_id))
        subtasks = store.list_subtasks(task.id)

        if json_output:
            data = dict(task.to_dict(), subtasks=[s.to_dict() for s in subtasks])
            console.print_json(json.dumps(data))
        elif raw:
            console.print(f"Task {task.id}", markup=False)
            console.print(f"Title: {task.title}", markup=False)
            console.print(f"Status: {'done' if task.is_completed else 'open'}")
            console.print(f"Color: {task.color_hex}")
            console.print(f"Created: {task.created_at}")
            for subtask in subtasks:
                mark = "x" if subtask.is_completed else " "
                console.print(f"  [{mark}] {subtask.title}", markup=False)
            if task.notes:
                console.print(f"Notes: {task.notes}", markup=False)
            if task.focus_notes:
                console.print(f"Focus notes:\n{task.focus_notes}", markup=False)
        else:
            console.print(TaskFormatter.task_panel(task, subtasks, store.task_progress(task.id)))

    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def done(
    task_ids: str = typer.Argument(..., help="Task ID(s) to toggle (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Toggle completion of one or more tasks.

    Example:
        scratchpad done 9c1e
        scratchpad done 9c1e,44ab
    """
    store = get_store()
    toggled = []
    failed = False

    for prefix in parse_ids(task_ids):
        try:
            task = store.toggle_task(service.resolve_task_id(prefix))
            toggled.append(task)
            if not json_output:
                if task.is_completed:
                    console.print(f"[green]✓[/green] Completed: {escape(task.title)}")
                else:
                    console.print(f"[yellow]○[/yellow] Reopened: {escape(task.title)}")
        except ScratchpadError as e:
            error_console.print(f"[red]Error:[/red] {escape(str(e))}")
            failed = True

    if json_output:
        console.print_json(json.dumps([t.to_dict() for t in toggled]))
    if failed:
        raise typer.Exit(1)


@app.command()
def edit(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    title: str = typer.Argument(..., help="New title"),
):
    """
    Update a task's title.

    Example:
        scratchpad edit 9c1e "Write better documentation"
    """
    try:
        task = get_store().rename_task(service.resolve_task_id(task_id), title)
        console.print(f"[blue]✎[/blue] Updated task {short_id(task.id)}: {escape(task.title)}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def note(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    text: str = typer.Argument("", help="Quick context note (empty clears it)"),
):
    """
    Set the quick context note shown under a task.

    Example:
        scratchpad note 9c1e "https://example.com/ticket/42"
        scratchpad note 9c1e ""
    """
    try:
        task = get_store().set_task_notes(service.resolve_task_id(task_id), text)
        verb = "Updated" if task.notes else "Cleared"
        console.print(f"[blue]✎[/blue] {verb} note for {short_id(task.id)}: {escape(task.title)}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _edit_in_editor(initial: str) -> str:
    """Open $EDITOR on a temporary Markdown file and return what was saved."""
    editor = os.environ.get("EDITOR")
    if not editor:
        editor = "notepad" if sys.platform == "win32" else "nano"

    with tempfile.NamedTemporaryFile(mode="w", suffix=".md", delete=False, encoding="utf-8") as f:
        f.write(initial)
        temp_path = f.name

    try:
        subprocess.run([editor, temp_path], check=True)
        with open(temp_path, "r", encoding="utf-8") as f:
            return f.read()
    finally:
        os.unlink(temp_path)


@app.command()
def focus(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    text: Optional[str] = typer.Option(None, "--set", help="Replace focus notes without opening an editor"),
):
    """
    Edit a task's focus notes (Markdown) in your text editor.

    Opens $EDITOR (or notepad on Windows) with the current focus notes.

    Example:
        scratchpad focus 9c1e
        scratchpad focus 9c1e --set "# Plan"
    """
    try:
        store = get_store()
        task = service.get_task(service.resolve_task_id(task_id))
        new_notes = text if text is not None else _edit_in_editor(task.focus_notes)
        task = store.set_task_focus_notes(task.id, new_notes)

        verb = "Updated" if task.focus_notes.strip() else "Cleared"
        console.print(f"[blue]✎[/blue] {verb} focus notes for {short_id(task.id)}: {escape(task.title)}")

    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except (OSError, subprocess.CalledProcessError) as e:
        error_console.print(f"[red]Error:[/red] Editor failed: {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def color(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
    hex_value: str = typer.Argument(..., help="Color as #RRGGBB"),
):
    """
    Change a task's color tag.

    Example:
        scratchpad color 9c1e "#41B3A3"
    """
    try:
        task = get_store().set_task_color(service.resolve_task_id(task_id), hex_value)
        console.print(f"[{task.color_hex}]●[/] {escape(task.title)} is now {task.color_hex}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def collapse(
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix)"),
):
    """
    Toggle whether a task's subtasks are shown in listings.
    """
    try:
        task = get_store().toggle_task_expanded(service.resolve_task_id(task_id))
        state = "expanded" if task.is_expanded else "collapsed"
        console.print(f"[dim]{escape(task.title)} {state}[/dim]")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def mv(
    source: int = typer.Argument(..., help="Current position (1-based, as listed)"),
    destination: int = typer.Argument(..., help="New position (1-based)"),
    pad: Optional[str] = typer.Option(None, "--pad", "-p", help="Scratchpad ID (default: selected)"),
):
    """
    Move a task to another position in the list.

    Positions are the '#' column of 'scratchpad ls'.

    Example:
        scratchpad mv 4 1
    """
    try:
        tasks = get_store().move_task(source - 1, destination - 1, scratchpad_id=resolve_pad(pad))
        moved = tasks[max(0, min(destination - 1, len(tasks) - 1))]
        console.print(f"[blue]↕[/blue] Moved '{escape(moved.title)}' to position {moved.sort_order + 1}")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def rm(
    task_ids: str = typer.Argument(..., help="Task ID(s) to delete (comma-separated)"),
):
    """
    Delete one or more tasks with their subtasks.

    Example:
        scratchpad rm 9c1e
        scratchpad rm 9c1e,44ab
    """
    store = get_store()
    failed = False

    for prefix in parse_ids(task_ids):
        try:
            task_id = service.resolve_task_id(prefix)
            task = service.get_task(task_id)
            store.delete_task(task_id)
            console.print(f"[red]✗[/red] Deleted: {escape(task.title)}")
        except ScratchpadError as e:
            error_console.print(f"[red]Error:[/red] {escape(str(e))}")
            failed = True

    if failed:
        raise typer.Exit(1)


@app.command()
def clear(
    pad: Optional[str] = typer.Option(None, "--pad", "-p", help="Scratchpad ID (default: selected)"),
):
    """
    Delete every completed task in a scratchpad.
    """
    try:
        count = get_store().clear_completed(resolve_pad(pad))
        if count:
            console.print(f"[red]✗[/red] Cleared {count} completed task(s)")
        else:
            console.print("[dim]No completed tasks[/dim]")
    except ScratchpadError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
