"""
FILE: scratchpad/core/repository.py
PURPOSE: Database operations and SQLite connection management
EXPORTS:
  - connect() -> context manager yielding Connection
  - init_database(conn) -> None
  - create_scratchpad(name, color_hex, sort_order) -> Scratchpad
  - get_scratchpad(scratchpad_id) -> Scratchpad | None
  - list_scratchpads() -> List[Scratchpad]
  - count_scratchpads() -> int
  - update_scratchpad(scratchpad) -> None
  - delete_scratchpad(scratchpad_id) -> None
  - create_task(scratchpad_id, title, color_hex, sort_order) -> Task
  - get_task(task_id) -> Task | None
  - list_tasks(scratchpad_id) -> List[Task]
  - update_task(task) -> None
  - delete_tasks(task_ids) -> None
  - create_subtask(task_id, title, sort_order) -> Subtask
  - get_subtask(subtask_id) -> Subtask | None
  - list_subtasks(task_id) -> List[Subtask]
  - update_subtask(subtask) -> None
  - delete_subtask(subtask_id) -> None
  - update_sort_orders(table, items) -> None
  - resolve_id(table, prefix) -> List[str]
  - load_graph() -> List[ScratchpadNode]
  - insert_graph(nodes) -> None
DEPENDENCIES:
  - sqlite3 (stdlib)
  - pathlib (stdlib)
  - os (stdlib)
  - logging (stdlib)
  - scratchpad.core.models (Scratchpad, Task, Subtask, nodes)
  - scratchpad.core.exceptions (not-found errors)
NOTES:
  - Database stored at $SCRATCHPAD_HOME/scratchpad.db (default ~/.scratchpad)
  - Auto-creates directory and initializes schema on first connection
  - Returns domain objects, never raw rows
  - Every public function is one transaction: commit on success, rollback on error
  - Cascade delete (scratchpad -> tasks -> subtasks) is done here, children first
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .constants import HOME_ENV_VAR
from .dates import now_iso
from .exceptions import ScratchpadNotFoundError, TaskNotFoundError, SubtaskNotFoundError
from .models import (
    Scratchpad,
    Task,
    Subtask,
    TaskNode,
    ScratchpadNode,
    new_id,
)

logger = logging.getLogger(__name__)

# Database file location (cross-platform)
DB_DIR = Path(os.environ.get(HOME_ENV_VAR) or Path.home() / ".scratchpad")
DB_PATH = DB_DIR / "scratchpad.db"

# Schema file ships next to this module
SCHEMA_PATH = Path(__file__).parent / "schema.sql"

SORTABLE_TABLES = ("scratchpads", "tasks", "subtasks")


@contextmanager
def connect() -> Iterator[sqlite3.Connection]:
    """
    Open a connection to the scratchpad database for one unit of work.

    Creates the data directory and schema if needed.
    Commits when the block finishes, rolls back if it raises, always closes.
    """
    DB_DIR.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row

    # Orphaned children are a programming error; let SQLite catch them
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        init_database(conn)
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times (uses CREATE TABLE IF NOT EXISTS).
    """
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='subtasks'"
    )
    if cursor.fetchone() is None:
        conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
        logger.debug("Initialized schema at %s", DB_PATH)


# --- Scratchpad Operations ---


def _insert_scratchpad(conn: sqlite3.Connection, pad: Scratchpad) -> None:
    conn.execute(
        """
        INSERT INTO scratchpads (id, name, color_hex, sort_order, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (pad.id, pad.name, pad.color_hex, pad.sort_order, pad.created_at),
    )


def create_scratchpad(name: str, color_hex: str, sort_order: int = 0) -> Scratchpad:
    """
    Create a new scratchpad.

    Returns:
        Newly created Scratchpad object with a fresh id and created_at
    """
    pad = Scratchpad(
        id=new_id(),
        name=name,
        color_hex=color_hex,
        sort_order=sort_order,
        created_at=now_iso(),
    )
    with connect() as conn:
        _insert_scratchpad(conn, pad)
    return pad


def get_scratchpad(scratchpad_id: str) -> Optional[Scratchpad]:
    """
    Fetch single scratchpad by ID.

    Returns:
        Scratchpad object if found, None otherwise
    """
    with connect() as conn:
        row = conn.execute(
            "SELECT * FROM scratchpads WHERE id = ?", (scratchpad_id,)
        ).fetchone()
    return Scratchpad.from_row(row) if row else None


def list_scratchpads() -> List[Scratchpad]:
    """
    List all scratchpads.

    Returns:
        Scratchpads ordered by sort_order (ties by creation date)
    """
    with connect() as conn:
        rows = conn.execute(
            "SELECT * FROM scratchpads ORDER BY sort_order, created_at, id"
        ).fetchall()
    return [Scratchpad.from_row(row) for row in rows]


def count_scratchpads() -> int:
    with connect() as conn:
        return conn.execute("SELECT COUNT(*) FROM scratchpads").fetchone()[0]


def update_scratchpad(pad: Scratchpad) -> None:
    """
    Update existing scratchpad (name, color, sort order).

    Raises:
        ScratchpadNotFoundError: If scratchpad doesn't exist
    """
    with connect() as conn:
        cursor = conn.execute(
            "UPDATE scratchpads SET name = ?, color_hex = ?, sort_order = ? WHERE id = ?",
            (pad.name, pad.color_hex, pad.sort_order, pad.id),
        )
        if cursor.rowcount == 0:
            raise ScratchpadNotFoundError(pad.id)


def delete_scratchpad(scratchpad_id: str) -> None:
    """
    Delete scratchpad by ID, along with all of its tasks and their subtasks.

    Raises:
        ScratchpadNotFoundError: If scratchpad doesn't exist

    Note:
        Children are deleted first, all in one transaction.
    """
    with connect() as conn:
        row = conn.execute(
            "SELECT id FROM scratchpads WHERE id = ?", (scratchpad_id,)
        ).fetchone()
        if not row:
            raise ScratchpadNotFoundError(scratchpad_id)

        conn.execute(
            """
            DELETE FROM subtasks WHERE task_id IN (
                SELECT id FROM tasks WHERE scratchpad_id = ?
            )
            """,
            (scratchpad_id,),
        )
        conn.execute("DELETE FROM tasks WHERE scratchpad_id = ?", (scratchpad_id,))
        conn.execute("DELETE FROM scratchpads WHERE id = ?", (scratchpad_id,))

    logger.debug("Deleted scratchpad %s", scratchpad_id)


# --- Task Operations ---


def _insert_task(conn: sqlite3.Connection, task: Task) -> None:
    conn.execute(
        """
        INSERT INTO tasks (id, scratchpad_id, title, notes, focus_notes,
                           is_completed, is_expanded, color_hex, created_at, sort_order)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            task.id,
            task.scratchpad_id,
            task.title,
            task.notes,
            task.focus_notes,
            int(task.is_completed),
            int(task.is_expanded),
            task.color_hex,
            task.created_at,
            task.sort_order,
        ),
    )


def create_task(
    scratchpad_id: str,
    title: str,
    color_hex: str,
    sort_order: int = 0,
    notes: str = "",
) -> Task:
    """
    Create a new task in a scratchpad.

    Returns:
        Newly created Task object (incomplete, expanded)

    Raises:
        sqlite3.IntegrityError: If the scratchpad doesn't exist
    """
    task = Task(
        id=new_id(),
        scratchpad_id=scratchpad_id,
        title=title,
        notes=notes,
        color_hex=color_hex,
        created_at=now_iso(),
        sort_order=sort_order,
    )
    with connect() as conn:
        _insert_task(conn, task)
    return task


def get_task(task_id: str) -> Optional[Task]:
    """
    Fetch single task by ID.

    Returns:
        Task object if found, None otherwise
    """
    with connect() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
    return Task.from_row(row) if row else None


def list_tasks(scratchpad_id: str) -> List[Task]:
    """
    List all tasks of a scratchpad.

    Returns:
        Tasks ordered by raw sort_order; use ordering.display_order() for display
    """
    with connect() as conn:
        rows = conn.execute(
            "SELECT * FROM tasks WHERE scratchpad_id = ? ORDER BY sort_order, created_at, id",
            (scratchpad_id,),
        ).fetchall()
    return [Task.from_row(row) for row in rows]


def update_task(task: Task) -> None:
    """
    Update existing task.

    Updates all mutable fields (title, notes, focus notes, flags, color, sort order).

    Raises:
        TaskNotFoundError: If task doesn't exist
    """
    with connect() as conn:
        cursor = conn.execute(
            """
            UPDATE tasks
            SET title = ?,
                notes = ?,
                focus_notes = ?,
                is_completed = ?,
                is_expanded = ?,
                color_hex = ?,
                sort_order = ?
            WHERE id = ?
            """,
            (
                task.title,
                task.notes,
                task.focus_notes,
                int(task.is_completed),
                int(task.is_expanded),
                task.color_hex,
                task.sort_order,
                task.id,
            ),
        )
        if cursor.rowcount == 0:
            raise TaskNotFoundError(task.id)


def delete_tasks(task_ids: Iterable[str]) -> None:
    """
    Delete tasks and their subtasks in one transaction.

    Raises:
        TaskNotFoundError: If any task doesn't exist (nothing is deleted)
    """
    task_ids = list(task_ids)
    with connect() as conn:
        for task_id in task_ids:
            row = conn.execute("SELECT id FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if not row:
                raise TaskNotFoundError(task_id)
            conn.execute("DELETE FROM subtasks WHERE task_id = ?", (task_id,))
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))

    logger.debug("Deleted %d task(s)", len(task_ids))


# --- Subtask Operations ---


def _insert_subtask(conn: sqlite3.Connection, subtask: Subtask) -> None:
    conn.execute(
        """
        INSERT INTO subtasks (id, task_id, title, is_completed, sort_order)
        VALUES (?, ?, ?, ?, ?)
        """,
        (
            subtask.id,
            subtask.task_id,
            subtask.title,
            int(subtask.is_completed),
            subtask.sort_order,
        ),
    )


def create_subtask(task_id: str, title: str, sort_order: int = 0) -> Subtask:
    """
    Create a new subtask under a task.

    Raises:
        sqlite3.IntegrityError: If the task doesn't exist
    """
    subtask = Subtask(id=new_id(), task_id=task_id, title=title, sort_order=sort_order)
    with connect() as conn:
        _insert_subtask(conn, subtask)
    return subtask


def get_subtask(subtask_id: str) -> Optional[Subtask]:
    with connect() as conn:
        row = conn.execute(
            "SELECT * FROM subtasks WHERE id = ?", (subtask_id,)
        ).fetchone()
    return Subtask.from_row(row) if row else None


def list_subtasks(task_id: str) -> List[Subtask]:
    with connect() as conn:
        rows = conn.execute(
            "SELECT * FROM subtasks WHERE task_id = ? ORDER BY sort_order, id",
            (task_id,),
        ).fetchall()
    return [Subtask.from_row(row) for row in rows]


def update_subtask(subtask: Subtask) -> None:
    """
    Update existing subtask.

    Raises:
        SubtaskNotFoundError: If subtask doesn't exist
    """
    with connect() as conn:
        cursor = conn.execute(
            "UPDATE subtasks SET title = ?, is_completed = ?, sort_order = ? WHERE id = ?",
            (subtask.title, int(subtask.is_completed), subtask.sort_order, subtask.id),
        )
        if cursor.rowcount == 0:
            raise SubtaskNotFoundError(subtask.id)


def delete_subtask(subtask_id: str) -> None:
    """
    Delete subtask by ID.

    Raises:
        SubtaskNotFoundError: If subtask doesn't exist
    """
    with connect() as conn:
        cursor = conn.execute("DELETE FROM subtasks WHERE id = ?", (subtask_id,))
        if cursor.rowcount == 0:
            raise SubtaskNotFoundError(subtask_id)


# --- Bulk Operations ---


def update_sort_orders(table: str, items: Iterable) -> None:
    """
    Persist sort_order for a batch of siblings in one transaction.

    Args:
        table: One of 'scratchpads', 'tasks', 'subtasks'
        items: Model objects carrying id and sort_order
    """
    if table not in SORTABLE_TABLES:
        raise ValueError(f"Unknown table '{table}'")

    with connect() as conn:
        conn.executemany(
            f"UPDATE {table} SET sort_order = ? WHERE id = ?",
            [(item.sort_order, item.id) for item in items],
        )


def resolve_id(table: str, prefix: str) -> List[str]:
    """
    Find ids in a table starting with prefix.

    Returns:
        Matching ids (an exact match is returned alone)
    """
    if table not in SORTABLE_TABLES:
        raise ValueError(f"Unknown table '{table}'")

    prefix = prefix.strip().lower()
    escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    with connect() as conn:
        exact = conn.execute(f"SELECT id FROM {table} WHERE id = ?", (prefix,)).fetchone()
        if exact:
            return [exact["id"]]
        rows = conn.execute(
            f"SELECT id FROM {table} WHERE id LIKE ? ESCAPE '\\' ORDER BY id",
            (escaped + "%",),
        ).fetchall()
    return [row["id"] for row in rows]


def load_graph() -> List[ScratchpadNode]:
    """
    Load every scratchpad with its tasks and their subtasks.

    Returns:
        Scratchpad nodes ordered by sort_order; children in raw sort_order
    """
    with connect() as conn:
        pads = [
            Scratchpad.from_row(row)
            for row in conn.execute(
                "SELECT * FROM scratchpads ORDER BY sort_order, created_at, id"
            ).fetchall()
        ]
        tasks = [
            Task.from_row(row)
            for row in conn.execute(
                "SELECT * FROM tasks ORDER BY sort_order, created_at, id"
            ).fetchall()
        ]
        subtasks = [
            Subtask.from_row(row)
            for row in conn.execute(
                "SELECT * FROM subtasks ORDER BY sort_order, id"
            ).fetchall()
        ]

    subtasks_by_task = {}
    for subtask in subtasks:
        subtasks_by_task.setdefault(subtask.task_id, []).append(subtask)

    tasks_by_pad = {}
    for task in tasks:
        node = TaskNode(task=task, subtasks=subtasks_by_task.get(task.id, []))
        tasks_by_pad.setdefault(task.scratchpad_id, []).append(node)

    return [
        ScratchpadNode(scratchpad=pad, tasks=tasks_by_pad.get(pad.id, []))
        for pad in pads
    ]


def insert_graph(nodes: Iterable[ScratchpadNode]) -> None:
    """
    Insert a whole scratchpad graph in one transaction.

    Note:
        Used by import; parents are inserted before their children.
    """
    with connect() as conn:
        for pad_node in nodes:
            _insert_scratchpad(conn, pad_node.scratchpad)
            for task_node in pad_node.tasks:
                _insert_task(conn, task_node.task)
                for subtask in task_node.subtasks:
                    _insert_subtask(conn, subtask)
