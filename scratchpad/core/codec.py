"""
FILE: scratchpad/core/codec.py
PURPOSE: Versioned JSON export/import of the scratchpad -> task -> subtask graph
EXPORTS:
  - build_document(graph, exported_at) -> dict
  - encode_document(document) -> bytes
  - export_bytes(graph, exported_at) -> bytes
  - decode_document(data) -> List[ScratchpadNode]
DEPENDENCIES:
  - json (stdlib)
  - uuid (stdlib)
  - datetime (stdlib)
  - scratchpad.core.models (entities and graph nodes)
  - scratchpad.core.ordering (display_order)
  - scratchpad.core.dates (timestamp wire format)
  - scratchpad.core.exceptions (MalformedDocumentError)
NOTES:
  - Output is UTF-8, 2-space indented, keys sorted at every level
  - Scratchpads by sort order, tasks and subtasks in display order,
    so identical input and timestamp give identical bytes
  - decode_document() validates the whole document before building anything
    and reports every problem it finds
  - Imported entities always get fresh ids; the document's ids are only checked
  - Focus notes are not part of the 1.0 document
"""

import json
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from .constants import EXPORT_VERSION, SUPPORTED_VERSIONS
from .dates import format_timestamp, parse_timestamp
from .exceptions import MalformedDocumentError
from .models import Scratchpad, Task, Subtask, TaskNode, ScratchpadNode, new_id
from .ordering import ascending, display_order

# SQLite INTEGER is a signed 64-bit value
SQLITE_INT_MIN = -(2 ** 63)
SQLITE_INT_MAX = 2 ** 63 - 1


# --- Export ---


def _export_subtask(subtask: Subtask) -> Dict[str, Any]:
    return {
        "id": subtask.id,
        "title": subtask.title,
        "isCompleted": subtask.is_completed,
        "sortOrder": subtask.sort_order,
    }


def _export_task(node: TaskNode) -> Dict[str, Any]:
    task = node.task
    return {
        "id": task.id,
        "title": task.title,
        "notes": task.notes,
        "isCompleted": task.is_completed,
        "colorHex": task.color_hex,
        "createdAt": task.created_at,
        "sortOrder": task.sort_order,
        "subtasks": [_export_subtask(s) for s in display_order(node.subtasks)],
    }


def _export_scratchpad(node: ScratchpadNode) -> Dict[str, Any]:
    pad = node.scratchpad
    by_task = {t.task.id: t for t in node.tasks}
    ordered = display_order([t.task for t in node.tasks])
    return {
        "id": pad.id,
        "name": pad.name,
        "colorHex": pad.color_hex,
        "sortOrder": pad.sort_order,
        "createdAt": pad.created_at,
        "tasks": [_export_task(by_task[task.id]) for task in ordered],
    }


def build_document(graph: List[ScratchpadNode], exported_at: datetime) -> Dict[str, Any]:
    """
    Build the export document for a loaded graph.

    Args:
        graph: Every scratchpad node with its tasks and subtasks
        exported_at: Timezone-aware export time
    """
    by_pad = {node.scratchpad.id: node for node in graph}
    ordered = ascending([node.scratchpad for node in graph])
    return {
        "version": EXPORT_VERSION,
        "exportedAt": format_timestamp(exported_at),
        "scratchpads": [_export_scratchpad(by_pad[pad.id]) for pad in ordered],
    }


def encode_document(document: Dict[str, Any]) -> bytes:
    text = json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False)
    return (text + "\n").encode("utf-8")


def export_bytes(graph: List[ScratchpadNode], exported_at: datetime) -> bytes:
    return encode_document(build_document(graph, exported_at))


# --- Import ---


class _Reader:
    """Typed field access that records problems instead of raising."""

    def __init__(self):
        self.problems: List[str] = []

    def _field(self, obj: Dict[str, Any], key: str, path: str) -> Any:
        if key not in obj:
            self.problems.append(f"{path}.{key} is missing")
            return None
        if obj[key] is None:
            self.problems.append(f"{path}.{key} must not be null")
        return obj[key]

    def string(self, obj, key, path) -> Optional[str]:
        value = self._field(obj, key, path)
        if value is not None and not isinstance(value, str):
            self.problems.append(f"{path}.{key} must be a string")
            return None
        return value

    def integer(self, obj, key, path) -> Optional[int]:
        value = self._field(obj, key, path)
        # bool is an int subclass; JSON true is not a sort order
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            self.problems.append(f"{path}.{key} must be an integer")
            return None
        if value is not None and not SQLITE_INT_MIN <= value <= SQLITE_INT_MAX:
            self.problems.append(f"{path}.{key} is out of range")
            return None
        return value

    def boolean(self, obj, key, path) -> Optional[bool]:
        value = self._field(obj, key, path)
        if value is not None and not isinstance(value, bool):
            self.problems.append(f"{path}.{key} must be a boolean")
            return None
        return value

    def identity(self, obj, key, path) -> None:
        value = self.string(obj, key, path)
        if value is None:
            return
        try:
            uuid.UUID(value)
        except ValueError:
            self.problems.append(f"{path}.{key} is not a UUID")

    def timestamp(self, obj, key, path) -> Optional[str]:
        value = self.string(obj, key, path)
        if value is None:
            return None
        try:
            return format_timestamp(parse_timestamp(value))
        except (ValueError, OverflowError):
            self.problems.append(f"{path}.{key} is not an ISO 8601 timestamp with timezone")
            return None

    def objects(self, obj, key, path) -> List[Dict[str, Any]]:
        value = self._field(obj, key, path)
        if value is None:
            return []
        if not isinstance(value, list):
            self.problems.append(f"{path}.{key} must be an array")
            return []
        items = []
        for index, item in enumerate(value):
            if isinstance(item, dict):
                items.append(item)
            else:
                self.problems.append(f"{path}.{key}[{index}] must be an object")
        return items


def _read_subtask(reader: _Reader, obj: Dict[str, Any], path: str, task_id: str) -> Subtask:
    reader.identity(obj, "id", path)
    return Subtask(
        id=new_id(),
        task_id=task_id,
        title=reader.string(obj, "title", path),
        is_completed=reader.boolean(obj, "isCompleted", path),
        sort_order=reader.integer(obj, "sortOrder", path),
    )


def _read_task(reader: _Reader, obj: Dict[str, Any], path: str, scratchpad_id: str) -> TaskNode:
    reader.identity(obj, "id", path)
    task = Task(
        id=new_id(),
        scratchpad_id=scratchpad_id,
        title=reader.string(obj, "title", path),
        notes=reader.string(obj, "notes", path),
        is_completed=reader.boolean(obj, "isCompleted", path),
        color_hex=reader.string(obj, "colorHex", path),
        created_at=reader.timestamp(obj, "createdAt", path),
        sort_order=reader.integer(obj, "sortOrder", path),
    )
    subtasks = [
        _read_subtask(reader, item, f"{path}.subtasks[{i}]", task.id)
        for i, item in enumerate(reader.objects(obj, "subtasks", path))
    ]
    return TaskNode(task=task, subtasks=subtasks)


def _read_scratchpad(reader: _Reader, obj: Dict[str, Any], path: str) -> ScratchpadNode:
    reader.identity(obj, "id", path)
    pad = Scratchpad(
        id=new_id(),
        name=reader.string(obj, "name", path),
        color_hex=reader.string(obj, "colorHex", path),
        sort_order=reader.integer(obj, "sortOrder", path),
        created_at=reader.timestamp(obj, "createdAt", path),
    )
    tasks = [
        _read_task(reader, item, f"{path}.tasks[{i}]", pad.id)
        for i, item in enumerate(reader.objects(obj, "tasks", path))
    ]
    return ScratchpadNode(scratchpad=pad, tasks=tasks)


def decode_document(data: bytes) -> List[ScratchpadNode]:
    """
    Parse an export document into a new graph with fresh identities.

    Args:
        data: Raw file contents (UTF-8 JSON)

    Returns:
        Scratchpad nodes ready for repository.insert_graph()

    Raises:
        MalformedDocumentError: If the bytes are not a valid export document.
            Nothing is returned in that case, so the import is all-or-nothing.
    """
    try:
        payload = json.loads(data.decode("utf-8") if isinstance(data, bytes) else data)
    except UnicodeDecodeError as e:
        raise MalformedDocumentError([f"not valid UTF-8: {e.reason}"])
    except ValueError as e:
        raise MalformedDocumentError([f"not valid JSON: {e}"])
    except RecursionError:
        raise MalformedDocumentError(["not valid JSON: nested too deeply"])

    if not isinstance(payload, dict):
        raise MalformedDocumentError(["top level must be an object"])

    reader = _Reader()
    version = reader.string(payload, "version", "$")
    if version is not None and version not in SUPPORTED_VERSIONS:
        reader.problems.append(f"$.version '{version}' is not supported")
    reader.timestamp(payload, "exportedAt", "$")

    graph = [
        _read_scratchpad(reader, item, f"$.scratchpads[{i}]")
        for i, item in enumerate(reader.objects(payload, "scratchpads", "$"))
    ]

    if reader.problems:
        raise MalformedDocumentError(reader.problems)
    return graph
