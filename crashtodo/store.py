"""Task state transitions and the store that owns the current sequence.

``transition`` is the pure part: given the current tasks and an action it
returns the next tasks, or the very same list object when the action changes
nothing. ``TodoStore.apply`` is the only way the application mutates state;
it runs the transition and rewrites the persisted slot before returning.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, List, Sequence, Union

from .errors import StorageError
from .models import Task, new_id, now_ms
from .storage import TaskStorage
from .transfer import import_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Initialize:
    tasks: Sequence[Task] = field(default_factory=tuple)


@dataclass(frozen=True)
class Add:
    text: str


@dataclass(frozen=True)
class Toggle:
    id: str


@dataclass(frozen=True)
class Delete:
    id: str


@dataclass(frozen=True)
class Edit:
    id: str
    text: str


@dataclass(frozen=True)
class ClearDone:
    pass


Action = Union[Initialize, Add, Toggle, Delete, Edit, ClearDone]


def _fresh_id(tasks: List[Task], id_factory: Callable[[], str]) -> str:
    taken = {t.id for t in tasks}
    while True:
        candidate = id_factory()
        if candidate not in taken:
            return candidate


def transition(
    tasks: List[Task],
    action: Action,
    *,
    id_factory: Callable[[], str] = new_id,
    clock: Callable[[], int] = now_ms,
) -> List[Task]:
    if isinstance(action, Initialize):
        return list(action.tasks)

    if isinstance(action, Add):
        text = action.text.strip()
        if not text:
            return tasks
        task = Task(id=_fresh_id(tasks, id_factory), text=text, done=False, created_at=clock())
        return [task, *tasks]

    if isinstance(action, ClearDone):
        if not any(t.done for t in tasks):
            return tasks
        return [t for t in tasks if not t.done]

    if isinstance(action, (Toggle, Delete, Edit)):
        if not any(t.id == action.id for t in tasks):
            return tasks
        if isinstance(action, Toggle):
            return [replace(t, done=not t.done) if t.id == action.id else t for t in tasks]
        if isinstance(action, Delete):
            return [t for t in tasks if t.id != action.id]
        # Stored as given; only an empty edit is refused.
        if not action.text.strip():
            return tasks
        return [replace(t, text=action.text) if t.id == action.id else t for t in tasks]

    raise TypeError(f"unknown action: {action!r}")


class TodoStore:
    """Single owner of the task sequence; persists after every change."""

    def __init__(
        self,
        storage: TaskStorage,
        *,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.storage = storage
        self._id_factory = id_factory
        self._clock = clock
        self._tasks: List[Task] = []
        self._lock = threading.RLock()

    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    def hydrate(self) -> List[Task]:
        with self._lock:
            tasks = self.storage.load()
            logger.info("Loaded %d task(s) from slot %r", len(tasks), self.storage.key)
            return self.apply(Initialize(tasks))

    def apply(self, action: Action) -> List[Task]:
        with self._lock:
            current = self._tasks
            nxt = transition(current, action, id_factory=self._id_factory, clock=self._clock)
            if nxt is current:
                logger.debug("No-op %r", action)
                return list(current)
            self._tasks = nxt
            if not isinstance(action, Initialize):
                logger.debug("Applied %r, %d task(s)", action, len(nxt))
                try:
                    self.storage.save(nxt)
                except StorageError:
                    logger.exception("Failed to persist tasks after %r", action)
            return list(nxt)

    def replace_from_import(self, raw: bytes | str) -> int:
        """Overwrite the slot with an imported JSON array and reload from it.

        Raises ImportRejected (nothing changes) or StorageError.
        """
        with self._lock:
            count = import_json(raw, self.storage)
            self.hydrate()
            return count

    def clear(self) -> None:
        """Remove the persisted slot and reset to an empty sequence."""
        with self._lock:
            self.storage.clear()
            self.apply(Initialize([]))
