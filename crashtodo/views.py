from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .models import Task

FILTER_MODES = ("all", "active", "done")


@dataclass(frozen=True)
class CompletionStats:
    total: int
    done: int
    active: int
    done_percent: int

    def to_dict(self) -> dict:
        return {"total": self.total, "done": self.done, "active": self.active, "donePercent": self.done_percent}


def filtered(tasks: Iterable[Task], mode: str = "all") -> List[Task]:
    """Tasks matching `mode`, in their original order. Unknown modes mean "all"."""
    if mode == "active":
        return [t for t in tasks if not t.done]
    if mode == "done":
        return [t for t in tasks if t.done]
    return list(tasks)


def remaining_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if not t.done)


def completion_stats(tasks: Iterable[Task]) -> CompletionStats:
    tasks = list(tasks)
    total = len(tasks)
    done = sum(1 for t in tasks if t.done)
    # half-up, not round()'s half-to-even
    percent = math.floor(100 * done / total + 0.5) if total else 0
    return CompletionStats(total=total, done=done, active=total - done, done_percent=percent)


def earliest_created(tasks: Iterable[Task]) -> Optional[Task]:
    return min(tasks, key=lambda t: t.created_at, default=None)
