"""
FILE: scratchpad/formatting.py
PURPOSE: Shared formatting utilities for CLI output
EXPORTS:
  - short_id(entity_id) -> str
  - TaskFormatter: Class for formatting scratchpads, tasks, and subtasks
DEPENDENCIES:
  - rich (tables, panels, markdown)
  - scratchpad.core.models (Scratchpad, Task, Subtask)
  - scratchpad.core.colors (color_or_default)
  - scratchpad.core.dates (relative_string)
NOTES:
  - Short ids are the first 8 characters; commands accept any unique prefix
  - Entity colors are rendered with the default accent when invalid
"""

from typing import Dict, List, Optional, Tuple

from rich.console import Group
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.colors import color_or_default
from .core.dates import relative_string
from .core.models import Scratchpad, Task, Subtask

SHORT_ID_LENGTH = 8


def short_id(entity_id: str) -> str:
    return entity_id[:SHORT_ID_LENGTH]


def _swatch(color_hex: str) -> Text:
    return Text("●", style=color_or_default(color_hex))


def _check(done: bool) -> str:
    return "[green]✓[/green]" if done else "[dim]○[/dim]"


class TaskFormatter:
    """Centralized display formatting."""

    @staticmethod
    def scratchpad_table(pads: List[Scratchpad], selected_id: Optional[str] = None) -> Table:
        """
        Create Rich table for scratchpads.

        The selected scratchpad is marked with an arrow.
        """
        table = Table(title="Scratchpads", show_header=True, header_style="bold cyan")
        table.add_column("", width=2, no_wrap=True)
        table.add_column("ID", style="cyan", width=8, no_wrap=True)
        table.add_column("", width=1, no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Created", style="dim")

        for pad in pads:
            marker = "[bold]→[/bold]" if pad.id == selected_id else ""
            table.add_row(
                marker,
                short_id(pad.id),
                _swatch(pad.color_hex),
                Text(pad.name),
                relative_string(pad.created_at) if pad.created_at else "",
            )
        return table

    @staticmethod
    def task_table(
        tasks: List[Task],
        title: str = "Tasks",
        subtasks: Optional[Dict[str, List[Subtask]]] = None,
    ) -> Table:
        """
        Create Rich table for tasks in display order.

        Args:
            tasks: Tasks already in display order
            title: Table title
            subtasks: Optional task id -> subtasks map; expanded tasks show them

        Returns:
            Rich Table object ready for display
        """
        table = Table(title=escape(title), show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=3, no_wrap=True)
        table.add_column("", width=1, no_wrap=True)
        table.add_column("ID", style="cyan", width=8, no_wrap=True)
        table.add_column("", width=1, no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Subtasks", style="magenta", width=8)
        table.add_column("Created", style="dim", width=10)

        subtasks = subtasks or {}
        for position, task in enumerate(tasks, start=1):
            children = subtasks.get(task.id, [])
            done = sum(1 for s in children if s.is_completed)
            title_text = Text(task.title, style="dim strike" if task.is_completed else "white")
            if task.notes:
                first_line = task.notes.strip().splitlines()[0] if task.notes.strip() else ""
                if first_line:
                    title_text.append(f"\n{first_line}", style="dim italic")
            if task.is_expanded:
                for child in children:
                    mark = "✓" if child.is_completed else "○"
                    title_text.append(
                        f"\n  {mark} {child.title}",
                        style="dim" if child.is_completed else "white",
                    )

            table.add_row(
                str(position),
                _check(task.is_completed),
                short_id(task.id),
                _swatch(task.color_hex),
                title_text,
                f"{done}/{len(children)}" if children else "",
                relative_string(task.created_at) if task.created_at else "",
            )
        return table

    @staticmethod
    def subtask_table(subtasks: List[Subtask], title: str = "Subtasks") -> Table:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=3, no_wrap=True)
        table.add_column("", width=1, no_wrap=True)
        table.add_column("ID", style="cyan", width=8, no_wrap=True)
        table.add_column("Title", style="white")
        for position, subtask in enumerate(subtasks, start=1):
            table.add_row(
                str(position),
                _check(subtask.is_completed),
                short_id(subtask.id),
                Text(subtask.title, style="dim strike" if subtask.is_completed else "white"),
            )
        return table

    @staticmethod
    def task_panel(task: Task, subtasks: List[Subtask], progress: Tuple[int, int]) -> Panel:
        """Full task details, focus notes rendered as Markdown."""
        header = Text()
        header.append(f"{task.title}\n", style="bold white")
        header.append("Status: ", style="dim")
        header.append(
            "done\n" if task.is_completed else "open\n",
            style="green" if task.is_completed else "yellow",
        )
        header.append("Color: ", style="dim")
        header.append(f"{task.color_hex}\n", style=color_or_default(task.color_hex))
        header.append("Created: ", style="dim")
        header.append(f"{relative_string(task.created_at) if task.created_at else '-'}\n")
        completed, total = progress
        if total:
            header.append("Subtasks: ", style="dim")
            header.append(f"{completed}/{total}\n", style="magenta")

        parts = [header]
        if subtasks:
            parts.append(TaskFormatter.subtask_table(subtasks))
        if task.notes:
            parts.append(Text("\nNotes:", style="dim"))
            parts.append(Text(task.notes))
        if task.focus_notes:
            parts.append(Text("\nFocus notes:", style="dim"))
            parts.append(Markdown(task.focus_notes))

        return Panel(
            Group(*parts),
            title=f"Task {short_id(task.id)}",
            border_style=color_or_default(task.color_hex),
        )
