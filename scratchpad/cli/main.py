"""
FILE: scratchpad/cli/main.py
PURPOSE: CLI entry point; registers every command on the Typer app
EXPORTS:
  - app (Typer application, re-exported from cli.app)
  - main() (entry point)
  - version() / export() / import_() / float_()
  - add() / ls() / show() / done() / edit() / note() / focus() / color()
  - collapse() / mv() / rm() / clear()
  - pad_add() / pad_ls() / pad_rm() / pad_rename() / pad_color() / pad_select()
  - sub_add() / sub_done() / sub_edit() / sub_rm() / sub_mv()
DEPENDENCIES:
  - typer (CLI framework)
  - scratchpad.cli.app (shared app and consoles)
  - scratchpad.cli.commands (command handlers)
NOTES:
  - All commands support --json and --raw where they print entities
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Running with no command lists the selected scratchpad
"""

import sys

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.markup import escape

from .app import app, configure_logging, error_console
from ..core.exceptions import ScratchpadError

# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (
    # System commands
    version,
    export,
    import_,
    float_,
    # Task commands
    add,
    ls,
    show,
    done,
    edit,
    note,
    focus,
    color,
    collapse,
    mv,
    rm,
    clear,
    # Scratchpad commands
    pad_add,
    pad_ls,
    pad_rm,
    pad_rename,
    pad_color,
    pad_select,
    # Subtask commands
    sub_add,
    sub_done,
    sub_edit,
    sub_rm,
    sub_mv,
)
from .commands.tasks import render_task_list


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    Task scratchpads with subtasks, notes, and JSON backups.

    With no command, lists the selected scratchpad.
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        try:
            render_task_list()
        except ScratchpadError as e:
            error_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
