"""
FILE: scratchpad/core/service.py
PURPOSE: Business logic layer for scratchpad, task, and subtask operations
EXPORTS:
  - resolve_scratchpad_id(prefix) / resolve_task_id(prefix) / resolve_subtask_id(prefix) -> str
  - get_scratchpad(scratchpad_id) / get_task(task_id) / get_subtask(subtask_id)
  - list_scratchpads() -> List[Scratchpad]
  - create_scratchpad(name, color_hex) -> Scratchpad
  - rename_scratchpad(scratchpad_id, name) -> Scratchpad
  - recolor_scratchpad(scratchpad_id, color_hex) -> Scratchpad
  - delete_scratchpad(scratchpad_id) -> bool
  - list_tasks(scratchpad_id) -> List[Task]
  - create_task(scratchpad_id, title, color_hex) -> Task
  - update_task_title(task_id, title) -> Task
  - set_task_notes(task_id, notes) -> Task
  - set_task_focus_notes(task_id, focus_notes) -> Task
  - set_task_color(task_id, color_hex) -> Task
  - toggle_task(task_id) -> Task
  - toggle_task_expanded(task_id) -> Task
  - delete_task(task_id) -> None
  - clear_completed(scratchpad_id) -> int
  - move_task(scratchpad_id, source, destination) -> List[Task]
  - task_progress(task_id) -> Tuple[int, int]
  - list_subtasks(task_id) -> List[Subtask]
  - create_subtask(task_id, title) -> Subtask
  - update_subtask_title(subtask_id, title) -> Subtask
  - toggle_subtask(subtask_id) -> Subtask
  - delete_subtask(subtask_id) -> None
  - move_subtask(task_id, source, destination) -> List[Subtask]
  - normalize_all() -> int
DEPENDENCIES:
  - scratchpad.core.repository (all CRUD functions)
  - scratchpad.core.ordering (sort order rules)
  - scratchpad.core.colors (color validation)
  - scratchpad.core.exceptions
NOTES:
  - No direct database access (use repository layer)
  - Returns domain objects, never dicts or raw SQL results
  - List functions return siblings in display order
  - Deleting the last scratchpad is refused with False, not an exception
"""

import logging
from typing import List, Optional, Tuple

from . import repository, ordering
from .colors import normalize_hex
from .constants import NEW_SCRATCHPAD_NAME
from .models import Scratchpad, Task, Subtask
from .exceptions import (
    ScratchpadNotFoundError,
    TaskNotFoundError,
    SubtaskNotFoundError,
    InvalidInputError,
)

logger = logging.getLogger(__name__)


def _clean_title(title: str, what: str) -> str:
    title = (title or "").strip()
    if not title:
        raise InvalidInputError(f"{what} cannot be empty")
    return title


# --- Lookup ---


def _resolve(table: str, prefix: str, not_found) -> str:
    if not prefix or not prefix.strip():
        raise not_found(prefix)
    matches = repository.resolve_id(table, prefix)
    if not matches:
        raise not_found(prefix)
    if len(matches) > 1:
        raise InvalidInputError(
            f"ID prefix '{prefix}' is ambiguous ({len(matches)} matches)"
        )
    return matches[0]


def resolve_scratchpad_id(prefix: str) -> str:
    """
    Expand a unique id prefix to a full scratchpad id.

    Raises:
        ScratchpadNotFoundError: If nothing matches
        InvalidInputError: If more than one scratchpad matches
    """
    return _resolve("scratchpads", prefix, ScratchpadNotFoundError)


def resolve_task_id(prefix: str) -> str:
    return _resolve("tasks", prefix, TaskNotFoundError)


def resolve_subtask_id(prefix: str) -> str:
    return _resolve("subtasks", prefix, SubtaskNotFoundError)


def get_scratchpad(scratchpad_id: str) -> Scratchpad:
    pad = repository.get_scratchpad(scratchpad_id)
    if not pad:
        raise ScratchpadNotFoundError(scratchpad_id)
    return pad


def get_task(task_id: str) -> Task:
    task = repository.get_task(task_id)
    if not task:
        raise TaskNotFoundError(task_id)
    return task


def get_subtask(subtask_id: str) -> Subtask:
    subtask = repository.get_subtask(subtask_id)
    if not subtask:
        raise SubtaskNotFoundError(subtask_id)
    return subtask


# --- Scratchpad Operations ---


def list_scratchpads() -> List[Scratchpad]:
    return repository.list_scratchpads()


def create_scratchpad(name: Optional[str], color_hex: str) -> Scratchpad:
    """
    Create a scratchpad after the existing ones.

    Args:
        name: Display name (defaults to "Untitled" when None)
        color_hex: Tag color

    Raises:
        InvalidInputError: If name is empty or color is invalid
    """
    name = NEW_SCRATCHPAD_NAME if name is None else _clean_title(name, "Scratchpad name")
    color_hex = normalize_hex(color_hex)

    sort_order = ordering.next_scratchpad_order(repository.list_scratchpads())
    pad = repository.create_scratchpad(name, color_hex, sort_order)
    logger.debug("Created scratchpad %s (%s)", pad.id, pad.name)
    return pad


def rename_scratchpad(scratchpad_id: str, name: str) -> Scratchpad:
    name = _clean_title(name, "Scratchpad name")
    pad = get_scratchpad(scratchpad_id)
    pad.name = name
    repository.update_scratchpad(pad)
    return pad


def recolor_scratchpad(scratchpad_id: str, color_hex: str) -> Scratchpad:
    color_hex = normalize_hex(color_hex)
    pad = get_scratchpad(scratchpad_id)
    pad.color_hex = color_hex
    repository.update_scratchpad(pad)
    return pad


def delete_scratchpad(scratchpad_id: str) -> bool:
    """
    Delete a scratchpad with all of its tasks and subtasks.

    Returns:
        True if deleted, False if it was the last scratchpad (nothing changes)

    Raises:
        ScratchpadNotFoundError: If scratchpad doesn't exist
    """
    get_scratchpad(scratchpad_id)

    if repository.count_scratchpads() <= 1:
        logger.debug("Refusing to delete the last scratchpad %s", scratchpad_id)
        return False

    repository.delete_scratchpad(scratchpad_id)
    return True


# --- Task Operations ---


def list_tasks(scratchpad_id: str) -> List[Task]:
    """
    Tasks of a scratchpad in display order (incomplete first, then completed).

    Raises:
        ScratchpadNotFoundError: If scratchpad doesn't exist
    """
    get_scratchpad(scratchpad_id)
    return ordering.display_order(repository.list_tasks(scratchpad_id))


def create_task(scratchpad_id: str, title: str, color_hex: str, notes: str = "") -> Task:
    """
    Create a task at the top of a scratchpad.

    Raises:
        ScratchpadNotFoundError: If scratchpad doesn't exist
        InvalidInputError: If title is empty or color is invalid

    Notes:
        - Trims whitespace from title
        - New task gets a sort order below every existing sibling
    """
    title = _clean_title(title, "Task title")
    color_hex = normalize_hex(color_hex)
    get_scratchpad(scratchpad_id)

    sort_order = ordering.next_task_order(repository.list_tasks(scratchpad_id))
    task = repository.create_task(scratchpad_id, title, color_hex, sort_order, notes=notes)
    logger.debug("Created task %s at sort order %d", task.id, sort_order)
    return task


def update_task_title(task_id: str, title: str) -> Task:
    title = _clean_title(title, "Task title")
    task = get_task(task_id)
    task.title = title
    repository.update_task(task)
    return task


def set_task_notes(task_id: str, notes: Optional[str]) -> Task:
    """
    Replace the quick-context notes of a task.

    Notes can be empty to clear them. Stored verbatim.
    """
    task = get_task(task_id)
    task.notes = notes or ""
    repository.update_task(task)
    return task


def set_task_focus_notes(task_id: str, focus_notes: Optional[str]) -> Task:
    """Replace the focus notes (Markdown source) of a task."""
    task = get_task(task_id)
    task.focus_notes = focus_notes or ""
    repository.update_task(task)
    return task


def set_task_color(task_id: str, color_hex: str) -> Task:
    color_hex = normalize_hex(color_hex)
    task = get_task(task_id)
    task.color_hex = color_hex
    repository.update_task(task)
    return task


def toggle_task(task_id: str) -> Task:
    """
    Flip a task's completion flag.

    Its sort order is kept, so it lands in the other band at its old rank.
    """
    task = get_task(task_id)
    task.is_completed = not task.is_completed
    repository.update_task(task)
    return task


def toggle_task_expanded(task_id: str) -> Task:
    task = get_task(task_id)
    task.is_expanded = not task.is_expanded
    repository.update_task(task)
    return task


def delete_task(task_id: str) -> None:
    """
    Delete task permanently, with its subtasks.

    Raises:
        TaskNotFoundError: If task doesn't exist
    """
    repository.delete_tasks([task_id])


def clear_completed(scratchpad_id: str) -> int:
    """
    Delete every completed task of a scratchpad.

    Returns:
        Number of tasks deleted
    """
    get_scratchpad(scratchpad_id)
    completed = [t.id for t in repository.list_tasks(scratchpad_id) if t.is_completed]
    if completed:
        repository.delete_tasks(completed)
    return len(completed)


def move_task(scratchpad_id: str, source: int, destination: int) -> List[Task]:
    """
    Drag a task from one displayed position to another.

    Args:
        scratchpad_id: Scratchpad whose task list is reordered
        source: 0-based index in the displayed list
        destination: 0-based target index in the displayed list

    Returns:
        Tasks in their new order, sort orders renumbered 0..N-1

    Raises:
        InvalidInputError: If source is out of range
    """
    displayed = list_tasks(scratchpad_id)
    reordered = ordering.reorder(displayed, source, destination)
    repository.update_sort_orders("tasks", reordered)
    return reordered


def task_progress(task_id: str) -> Tuple[int, int]:
    """Return (completed, total) subtasks for a task."""
    get_task(task_id)
    return ordering.completion_counts(repository.list_subtasks(task_id))


# --- Subtask Operations ---


def list_subtasks(task_id: str) -> List[Subtask]:
    get_task(task_id)
    return ordering.display_order(repository.list_subtasks(task_id))


def create_subtask(task_id: str, title: str) -> Subtask:
    """
    Append a subtask to a task.

    Raises:
        TaskNotFoundError: If task doesn't exist
        InvalidInputError: If title is empty
    """
    title = _clean_title(title, "Subtask title")
    get_task(task_id)

    sort_order = ordering.next_subtask_order(repository.list_subtasks(task_id))
    return repository.create_subtask(task_id, title, sort_order)


def update_subtask_title(subtask_id: str, title: str) -> Subtask:
    title = _clean_title(title, "Subtask title")
    subtask = get_subtask(subtask_id)
    subtask.title = title
    repository.update_subtask(subtask)
    return subtask


def toggle_subtask(subtask_id: str) -> Subtask:
    subtask = get_subtask(subtask_id)
    subtask.is_completed = not subtask.is_completed
    repository.update_subtask(subtask)
    return subtask


def delete_subtask(subtask_id: str) -> None:
    repository.delete_subtask(subtask_id)


def move_subtask(task_id: str, source: int, destination: int) -> List[Subtask]:
    """Drag a subtask within its task's displayed list (see move_task)."""
    displayed = list_subtasks(task_id)
    reordered = ordering.reorder(displayed, source, destination)
    repository.update_sort_orders("subtasks", reordered)
    return reordered


# --- Maintenance ---


def normalize_all() -> int:
    """
    Renumber every sibling set whose sort orders drifted from 0..N-1.

    Covers scratchpads, the tasks of each scratchpad, and the subtasks of each task.

    Returns:
        Number of rows rewritten
    """
    graph = repository.load_graph()

    rewritten = ordering.normalize([node.scratchpad for node in graph])
    if rewritten:
        repository.update_sort_orders("scratchpads", rewritten)
    changed = len(rewritten)

    for pad_node in graph:
        tasks = [node.task for node in pad_node.tasks]
        rewritten = ordering.normalize(tasks)
        if rewritten:
            repository.update_sort_orders("tasks", rewritten)
            changed += len(rewritten)

        for task_node in pad_node.tasks:
            rewritten = ordering.normalize(task_node.subtasks)
            if rewritten:
                repository.update_sort_orders("subtasks", rewritten)
                changed += len(rewritten)

    if changed:
        logger.debug("Normalized %d sort order(s)", changed)
    return changed
