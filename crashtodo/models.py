from __future__ import annotations

import math
import random
import string
import time
from dataclasses import dataclass
from typing import Any, Mapping

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 7


def new_id() -> str:
    return "".join(random.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Task:
    id: str
    text: str
    done: bool = False
    created_at: int = 0

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "done": self.done, "createdAt": self.created_at}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a Task from its JSON form; raises on anything that isn't one."""
        if not isinstance(raw, Mapping):
            raise TypeError(f"task record must be an object, got {type(raw).__name__}")
        task_id, text, done, created_at = raw["id"], raw["text"], raw["done"], raw["createdAt"]
        if not isinstance(task_id, str) or not isinstance(text, str):
            raise TypeError("task id and text must be strings")
        if not isinstance(done, bool):
            raise TypeError("task done flag must be a boolean")
        # bool is an int subclass; reject it as a timestamp
        if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
            raise TypeError("task createdAt must be a number")
        if isinstance(created_at, float) and not math.isfinite(created_at):
            raise ValueError("task createdAt must be finite")
        return cls(id=task_id, text=text, done=done, created_at=int(created_at))
