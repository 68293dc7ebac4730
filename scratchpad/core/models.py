"""
FILE: scratchpad/core/models.py
PURPOSE: Domain models for scratchpads, tasks, and subtasks
EXPORTS:
  - Scratchpad (dataclass)
  - Task (dataclass)
  - Subtask (dataclass)
  - TaskNode (dataclass) - task with its subtasks
  - ScratchpadNode (dataclass) - scratchpad with its task nodes
  - new_id() -> str
DEPENDENCIES:
  - dataclasses (stdlib)
  - json (stdlib)
  - uuid (stdlib)
  - typing (stdlib)
NOTES:
  - Each entity kind lives in its own table; parents are referenced by id
  - All models have from_row() for SQLite row conversion
  - All models have to_json() for serialization
  - Timestamps stored as ISO-8601 strings (UTC)
  - Nodes are only used to carry a whole graph for export/import
"""

from dataclasses import dataclass, asdict, field
from typing import List
import json
import uuid


def new_id() -> str:
    """Generate a fresh entity identity."""
    return str(uuid.uuid4())


@dataclass
class Scratchpad:
    """A named tab holding an ordered list of tasks."""

    id: str
    name: str
    color_hex: str
    sort_order: int = 0
    created_at: str = ""

    @classmethod
    def from_row(cls, row) -> "Scratchpad":
        """Convert SQLite row to Scratchpad object."""
        return cls(
            id=row["id"],
            name=row["name"],
            color_hex=row["color_hex"],
            sort_order=row["sort_order"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize scratchpad to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class Task:
    """A task with quick-context notes, focus notes, and subtasks."""

    id: str
    scratchpad_id: str
    title: str
    notes: str = ""
    focus_notes: str = ""
    is_completed: bool = False
    is_expanded: bool = True
    color_hex: str = ""
    created_at: str = ""
    sort_order: int = 0

    @classmethod
    def from_row(cls, row) -> "Task":
        """Convert SQLite row to Task object."""
        return cls(
            id=row["id"],
            scratchpad_id=row["scratchpad_id"],
            title=row["title"],
            notes=row["notes"],
            focus_notes=row["focus_notes"],
            is_completed=bool(row["is_completed"]),
            is_expanded=bool(row["is_expanded"]),
            color_hex=row["color_hex"],
            created_at=row["created_at"],
            sort_order=row["sort_order"],
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class Subtask:
    """A checklist item inside a task."""

    id: str
    task_id: str
    title: str
    is_completed: bool = False
    sort_order: int = 0

    @classmethod
    def from_row(cls, row) -> "Subtask":
        """Convert SQLite row to Subtask object."""
        return cls(
            id=row["id"],
            task_id=row["task_id"],
            title=row["title"],
            is_completed=bool(row["is_completed"]),
            sort_order=row["sort_order"],
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize subtask to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class TaskNode:
    task: Task
    subtasks: List[Subtask] = field(default_factory=list)


@dataclass
class ScratchpadNode:
    scratchpad: Scratchpad
    tasks: List[TaskNode] = field(default_factory=list)
