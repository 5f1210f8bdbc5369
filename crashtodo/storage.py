from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import StorageError
from .models import Task

logger = logging.getLogger(__name__)

DEFAULT_KEY = "todos@crash"


class LocalStorage:
    """
    String key/value slots kept in one JSON object file.

    Reads never fail: a missing, unreadable or non-object file is an empty
    store. Writes rewrite the whole file through a temp file and os.replace.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as e:
            logger.warning("Unreadable storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not a JSON object, ignoring it", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, slots: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(slots, f, ensure_ascii=False, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        slots = self._read_all()
        slots[key] = value
        self._write_all(slots)

    def remove_item(self, key: str) -> None:
        slots = self._read_all()
        if slots.pop(key, None) is not None:
            self._write_all(slots)


class TaskStorage:
    """The task sequence, serialized as a JSON array in a single slot."""

    def __init__(self, backend: LocalStorage, key: str = DEFAULT_KEY) -> None:
        self.backend = backend
        self.key = key

    def load(self) -> List[Task]:
        raw = self.backend.get_item(self.key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            return [Task.from_dict(item) for item in data]
        except (ValueError, TypeError, KeyError, OverflowError, RecursionError) as e:
            logger.warning("Discarding malformed data in slot %r: %s", self.key, e)
            return []

    def save(self, tasks: List[Task]) -> None:
        try:
            payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"cannot serialize tasks: {e}") from e
        self.backend.set_item(self.key, payload)

    def write_raw(self, data: List[Any]) -> None:
        self.backend.set_item(self.key, json.dumps(data, ensure_ascii=False))

    def clear(self) -> None:
        self.backend.remove_item(self.key)
