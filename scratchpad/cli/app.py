"""
FILE: scratchpad/cli/app.py
PURPOSE: Shared CLI objects (Typer apps, consoles, store accessor)
EXPORTS:
  - app (Typer application)
  - pad_app (scratchpad sub-commands)
  - sub_app (subtask sub-commands)
  - console / error_console (Rich consoles)
  - get_store() -> TaskStore
  - configure_logging(verbose) -> None
  - __version__
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output, logging handler)
  - scratchpad.core.store (TaskStore facade)
NOTES:
  - Command modules import from here, main.py wires everything together
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..core.store import TaskStore

# Typer app setup
app = typer.Typer(
    name="scratchpad",
    help="Task scratchpads with subtasks, notes, and JSON backups",
    add_completion=False,
)

# Scratchpad sub-command group
pad_app = typer.Typer(
    name="pad",
    help="Scratchpad (tab) management commands",
)
app.add_typer(pad_app, name="pad")

# Subtask sub-command group
sub_app = typer.Typer(
    name="sub",
    help="Subtask commands",
)
app.add_typer(sub_app, name="sub")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.0.2"

_store: Optional[TaskStore] = None


def get_store() -> TaskStore:
    """Open the store once per process."""
    global _store
    if _store is None:
        _store = TaskStore()
    return _store


def configure_logging(verbose: bool) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )
