"""
FILE: scratchpad/core/store.py
PURPOSE: TaskStore facade - the single surface UI layers call into
EXPORTS:
  - TaskStore (class)
DEPENDENCIES:
  - scratchpad.core.service (CRUD with ordering rules)
  - scratchpad.core.repository (graph load/insert for export/import)
  - scratchpad.core.codec (export document encode/decode)
  - scratchpad.core.settings (injected key-value settings)
  - scratchpad.core.colors (palette cycling)
  - logging, pathlib, datetime (stdlib)
NOTES:
  - Holds selection state and the color cycle; everything else lives in SQLite
  - Persists the floating flag and the selected scratchpad id in Settings
  - Import/export failures are logged and returned as False, never raised
  - Guarantees at least one scratchpad exists once opened
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from . import service, repository, codec
from .colors import color_at, color_or_default
from .constants import (
    DEFAULT_SCRATCHPAD_NAME,
    DEFAULT_SCRATCHPAD_COLOR,
    FLOATING_KEY,
    SELECTED_SCRATCHPAD_KEY,
)
from .dates import utc_now
from .exceptions import MalformedDocumentError, ScratchpadNotFoundError, StorageIOError
from .models import Scratchpad, Task, Subtask
from .settings import Settings

logger = logging.getLogger(__name__)


def _read_file(path: Union[str, Path]) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise StorageIOError(str(path), e.strerror or str(e)) from e


def _write_file(path: Union[str, Path], data: bytes) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise StorageIOError(str(path), e.strerror or str(e)) from e


class TaskStore:
    """
    State container passed to UI handlers.

    Args:
        settings: Key-value store for UI state (defaults to the settings file)
        normalize: Run the sort-order hygiene pass when opening
    """

    def __init__(self, settings: Optional[Settings] = None, normalize: bool = True):
        self.settings = settings if settings is not None else Settings()
        self._next_color_index = 0
        self._is_floating = self.settings.get_bool(FLOATING_KEY)
        self.selected_scratchpad_id: Optional[str] = self.settings.get_string(
            SELECTED_SCRATCHPAD_KEY
        )

        self.ensure_default_scratchpad()
        if normalize:
            service.normalize_all()

    # --- UI state ---

    @property
    def is_floating(self) -> bool:
        return self._is_floating

    @is_floating.setter
    def is_floating(self, value: bool) -> None:
        self._is_floating = bool(value)
        self.settings.set(FLOATING_KEY, self._is_floating)

    def next_color(self) -> str:
        """Next palette color, cycling through all eight and wrapping."""
        color = color_at(self._next_color_index)
        self._next_color_index += 1
        return color

    def color_for(self, item: Union[Scratchpad, Task]) -> str:
        """Display color of a task or scratchpad, default accent if invalid."""
        return color_or_default(item.color_hex)

    def select_scratchpad(self, scratchpad_id: Optional[str]) -> None:
        """
        Remember the selected scratchpad (None clears the selection).

        Raises:
            ScratchpadNotFoundError: If scratchpad doesn't exist
        """
        if scratchpad_id is None:
            self.selected_scratchpad_id = None
            self.settings.remove(SELECTED_SCRATCHPAD_KEY)
            return

        service.get_scratchpad(scratchpad_id)
        self.selected_scratchpad_id = scratchpad_id
        self.settings.set(SELECTED_SCRATCHPAD_KEY, scratchpad_id)

    def selected_scratchpad(self) -> Optional[Scratchpad]:
        if self.selected_scratchpad_id is None:
            return None
        return repository.get_scratchpad(self.selected_scratchpad_id)

    def ensure_default_scratchpad(self) -> Scratchpad:
        """
        Make sure a scratchpad exists and one is selected.

        Creates "My Tasks" on first run; repairs a missing or stale selection
        by selecting the first scratchpad.

        Returns:
            The selected scratchpad
        """
        pads = service.list_scratchpads()
        if not pads:
            pad = repository.create_scratchpad(
                DEFAULT_SCRATCHPAD_NAME, DEFAULT_SCRATCHPAD_COLOR, 0
            )
            logger.debug("Created default scratchpad %s", pad.id)
            self.select_scratchpad(pad.id)
            return pad

        for pad in pads:
            if pad.id == self.selected_scratchpad_id:
                return pad

        self.select_scratchpad(pads[0].id)
        return pads[0]

    # --- Scratchpads ---

    def list_scratchpads(self) -> List[Scratchpad]:
        return service.list_scratchpads()

    def add_scratchpad(self, name: Optional[str] = None) -> Scratchpad:
        """Create a scratchpad after the others and select it."""
        pad = service.create_scratchpad(name, self.next_color())
        self.select_scratchpad(pad.id)
        return pad

    def rename_scratchpad(self, scratchpad_id: str, name: str) -> Scratchpad:
        return service.rename_scratchpad(scratchpad_id, name)

    def recolor_scratchpad(self, scratchpad_id: str, color_hex: str) -> Scratchpad:
        return service.recolor_scratchpad(scratchpad_id, color_hex)

    def delete_scratchpad(self, scratchpad_id: str) -> bool:
        """
        Delete a scratchpad and everything in it.

        Returns:
            False if it is the last scratchpad (nothing changes)

        Notes:
            Deleting the selected scratchpad selects the first remaining one
        """
        was_selected = self.selected_scratchpad_id == scratchpad_id
        if not service.delete_scratchpad(scratchpad_id):
            return False

        if was_selected:
            remaining = service.list_scratchpads()
            self.select_scratchpad(remaining[0].id if remaining else None)
        return True

    def _current_scratchpad_id(self, scratchpad_id: Optional[str]) -> str:
        if scratchpad_id is not None:
            return scratchpad_id
        if self.selected_scratchpad_id is None:
            raise ScratchpadNotFoundError("(none selected)")
        return self.selected_scratchpad_id

    # --- Tasks ---

    def list_tasks(self, scratchpad_id: Optional[str] = None) -> List[Task]:
        """Tasks of a scratchpad (default: selected) in display order."""
        return service.list_tasks(self._current_scratchpad_id(scratchpad_id))

    def add_task(self, title: str, scratchpad_id: Optional[str] = None, notes: str = "") -> Task:
        """Create a task at the top of a scratchpad (default: selected)."""
        return service.create_task(
            self._current_scratchpad_id(scratchpad_id), title, self.next_color(), notes=notes
        )

    def rename_task(self, task_id: str, title: str) -> Task:
        return service.update_task_title(task_id, title)

    def set_task_notes(self, task_id: str, notes: str) -> Task:
        return service.set_task_notes(task_id, notes)

    def set_task_focus_notes(self, task_id: str, focus_notes: str) -> Task:
        return service.set_task_focus_notes(task_id, focus_notes)

    def set_task_color(self, task_id: str, color_hex: str) -> Task:
        return service.set_task_color(task_id, color_hex)

    def toggle_task(self, task_id: str) -> Task:
        return service.toggle_task(task_id)

    def toggle_task_expanded(self, task_id: str) -> Task:
        return service.toggle_task_expanded(task_id)

    def delete_task(self, task_id: str) -> None:
        service.delete_task(task_id)

    def clear_completed(self, scratchpad_id: Optional[str] = None) -> int:
        return service.clear_completed(self._current_scratchpad_id(scratchpad_id))

    def move_task(self, source: int, destination: int, scratchpad_id: Optional[str] = None) -> List[Task]:
        return service.move_task(self._current_scratchpad_id(scratchpad_id), source, destination)

    def task_progress(self, task_id: str) -> Tuple[int, int]:
        return service.task_progress(task_id)

    # --- Subtasks ---

    def list_subtasks(self, task_id: str) -> List[Subtask]:
        return service.list_subtasks(task_id)

    def add_subtask(self, task_id: str, title: str) -> Subtask:
        return service.create_subtask(task_id, title)

    def rename_subtask(self, subtask_id: str, title: str) -> Subtask:
        return service.update_subtask_title(subtask_id, title)

    def toggle_subtask(self, subtask_id: str) -> Subtask:
        return service.toggle_subtask(subtask_id)

    def delete_subtask(self, subtask_id: str) -> None:
        service.delete_subtask(subtask_id)

    def move_subtask(self, task_id: str, source: int, destination: int) -> List[Subtask]:
        return service.move_subtask(task_id, source, destination)

    # --- Export/Import ---

    def export_all(self, now: Optional[datetime] = None) -> bytes:
        """Serialize every scratchpad, task, and subtask to an export document."""
        return codec.export_bytes(repository.load_graph(), now or utc_now())

    def import_all(self, data: bytes) -> bool:
        """
        Add the contents of an export document as new entities.

        Returns:
            True on success; False if the document is malformed (nothing changes)

        Notes:
            Existing data is never touched. On success the first scratchpad
            (by sort order) becomes selected.
        """
        try:
            graph = codec.decode_document(data)
        except MalformedDocumentError as e:
            logger.warning("Import rejected: %s", e)
            return False

        repository.insert_graph(graph)
        logger.debug("Imported %d scratchpad(s)", len(graph))

        pads = service.list_scratchpads()
        if pads:
            self.select_scratchpad(pads[0].id)
        return True

    def export_to_file(self, path: Union[str, Path], now: Optional[datetime] = None) -> bool:
        """
        Write an export document to path.

        Returns:
            False if the file could not be written
        """
        data = self.export_all(now)
        try:
            _write_file(path, data)
        except StorageIOError as e:
            logger.warning("Export to %s failed: %s", path, e)
            return False
        return True

    def import_from_file(self, path: Union[str, Path]) -> bool:
        """
        Read an export document from path and import it.

        Returns:
            False if the file could not be read or is malformed
        """
        try:
            data = _read_file(path)
        except StorageIOError as e:
            logger.warning("Import from %s failed: %s", path, e)
            return False
        return self.import_all(data)
