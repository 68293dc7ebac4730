"""
FILE: scratchpad/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - ScratchpadError (base exception)
  - ScratchpadNotFoundError
  - TaskNotFoundError
  - SubtaskNotFoundError
  - InvalidInputError
  - InvalidColorError
  - MalformedDocumentError
  - StorageIOError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from ScratchpadError for easy catching
  - Service layer raises these, the store and CLI catch and report them
  - MalformedDocumentError and StorageIOError never escape TaskStore's
    import/export helpers; they become a False result there
"""

from typing import List


class ScratchpadError(Exception):
    """Base exception for all scratchpad errors."""
    pass


class ScratchpadNotFoundError(ScratchpadError):
    """Scratchpad with given ID doesn't exist."""

    def __init__(self, scratchpad_id: str):
        self.scratchpad_id = scratchpad_id
        super().__init__(f"Scratchpad {scratchpad_id} not found")


class TaskNotFoundError(ScratchpadError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class SubtaskNotFoundError(ScratchpadError):
    """Subtask with given ID doesn't exist."""

    def __init__(self, subtask_id: str):
        self.subtask_id = subtask_id
        super().__init__(f"Subtask {subtask_id} not found")


class InvalidInputError(ScratchpadError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidColorError(InvalidInputError):
    """Hex color string is not 6 hex digits."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid color '{value}'. Expected 6 hex digits, e.g. #6EA8FE")


class MalformedDocumentError(ScratchpadError):
    """Import payload doesn't match the export document shape."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        summary = "; ".join(self.problems[:5])
        if len(self.problems) > 5:
            summary += f" (+{len(self.problems) - 5} more)"
        super().__init__(f"Malformed export document: {summary}")


class StorageIOError(ScratchpadError):
    """Reading or writing a file failed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Could not access {path}: {reason}")
