"""
FILE: scratchpad/core/ordering.py
PURPOSE: Sibling ordering rules for scratchpads, tasks, and subtasks
EXPORTS:
  - display_order(siblings) -> List
  - completion_counts(siblings) -> Tuple[int, int]
  - next_task_order(siblings) -> int
  - next_subtask_order(siblings) -> int
  - next_scratchpad_order(pads) -> int
  - reorder(displayed, source, destination) -> List
  - needs_normalization(siblings) -> bool
  - normalize(siblings) -> List
DEPENDENCIES:
  - typing (stdlib)
  - scratchpad.core.exceptions (InvalidInputError)
NOTES:
  - Pure functions over model objects; persistence happens in the service layer
  - Display order is two bands: incomplete ascending, then completed ascending
  - New tasks prepend (min - 1), new subtasks append (max + 1)
  - reorder() and normalize() mutate sort_order in place and return the sequence
"""

from typing import List, Sequence, Tuple, TypeVar

from .exceptions import InvalidInputError

T = TypeVar("T")


def _sort_key(item) -> tuple:
    # created_at/id only break ties between equal sort orders
    return (item.sort_order, getattr(item, "created_at", ""), item.id)


def ascending(siblings: Sequence[T]) -> List[T]:
    """Plain ascending sort on sort_order, ignoring completion."""
    return sorted(siblings, key=_sort_key)


def display_order(siblings: Sequence[T]) -> List[T]:
    """
    Order siblings the way they are shown to the user.

    Returns:
        Incomplete items ascending by sort_order, followed by completed
        items ascending by sort_order
    """
    active = [s for s in siblings if not s.is_completed]
    completed = [s for s in siblings if s.is_completed]
    return ascending(active) + ascending(completed)


def completion_counts(siblings: Sequence) -> Tuple[int, int]:
    """Return (completed, total) for a sibling set."""
    completed = sum(1 for s in siblings if s.is_completed)
    return completed, len(siblings)


def next_task_order(siblings: Sequence) -> int:
    """Sort order for a new task: one below the current minimum, 0 if empty."""
    if not siblings:
        return 0
    return min(s.sort_order for s in siblings) - 1


def next_subtask_order(siblings: Sequence) -> int:
    """Sort order for a new subtask: one above the current maximum, 0 if empty."""
    if not siblings:
        return 0
    return max(s.sort_order for s in siblings) + 1


def next_scratchpad_order(pads: Sequence) -> int:
    """Scratchpads are appended like subtasks."""
    return next_subtask_order(pads)


def reorder(displayed: Sequence[T], source: int, destination: int) -> List[T]:
    """
    Move one item within the displayed sequence and renumber everything.

    Args:
        displayed: Siblings in the order currently shown (see display_order)
        source: Index of the item being dragged
        destination: Index the item should end up at (clamped to the list)

    Returns:
        The new sequence; every item's sort_order equals its index

    Raises:
        InvalidInputError: If source is out of range

    Notes:
        Every sibling is rewritten, so the result is gap-free: {0, ..., N-1}
    """
    items = list(displayed)
    if not 0 <= source < len(items):
        raise InvalidInputError(
            f"Position {source + 1} is out of range (1-{len(items)})"
        )

    destination = max(0, min(destination, len(items) - 1))
    moved = items.pop(source)
    items.insert(destination, moved)

    for index, item in enumerate(items):
        item.sort_order = index

    return items


def needs_normalization(siblings: Sequence) -> bool:
    """True if any stored sort_order differs from its plain ascending position."""
    return any(
        item.sort_order != index for index, item in enumerate(ascending(siblings))
    )


def normalize(siblings: Sequence[T]) -> List[T]:
    """
    Rewrite sort orders to their plain ascending position.

    Returns:
        Items whose sort_order changed (empty if already normalized)
    """
    if not needs_normalization(siblings):
        return []

    changed = []
    for index, item in enumerate(ascending(siblings)):
        if item.sort_order != index:
            item.sort_order = index
            changed.append(item)
    return changed
