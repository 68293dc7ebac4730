"""
FILE: scratchpad/core/settings.py
PURPOSE: Key-value settings store for process-wide UI state
EXPORTS:
  - SETTINGS_FILE
  - Settings (class)
DEPENDENCIES:
  - json (stdlib)
  - pathlib (stdlib)
  - logging (stdlib)
  - scratchpad.core.repository (DB_DIR)
NOTES:
  - Persisted as a small JSON object next to the database
  - Every write rewrites the whole file
  - A missing or unreadable file reads as empty settings
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from . import repository

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


class Settings:
    """
    JSON-file backed key-value store.

    Injected into TaskStore; tests pass their own path.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else repository.DB_DIR / SETTINGS_FILE
        self._values: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8"
        )

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._values.get(key, default)
        return value if isinstance(value, bool) else default

    def get_string(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if key in self._values:
            del self._values[key]
            self._save()
