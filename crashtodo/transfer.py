from __future__ import annotations

import json
import logging
from typing import Iterable

from .errors import ImportRejected
from .models import Task
from .storage import TaskStorage

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "todos-export.json"


def export_json(tasks: Iterable[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)


def import_json(raw: bytes | str, storage: TaskStorage) -> int:
    """
    Replace the persisted slot with an imported JSON array.

    Anything that does not parse as a JSON array raises ImportRejected and
    leaves the slot as it was. Returns the number of imported entries.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        data = json.loads(text)
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise ImportRejected(f"not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise ImportRejected(f"expected a JSON array, got {type(data).__name__}")
    storage.write_raw(data)
    logger.info("Imported %d entries into slot %r", len(data), storage.key)
    return len(data)
