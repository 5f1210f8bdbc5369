# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from crashtodo import create_app
from crashtodo.storage import LocalStorage, TaskStorage
from crashtodo.store import TodoStore


class CountingIds:
    """Deterministic id factory: t1, t2, ..."""

    def __init__(self) -> None:
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"t{self.n}"


class TickingClock:
    """Clock that advances one millisecond per call."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture()
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "todos.json"


@pytest.fixture()
def storage(storage_path: Path) -> TaskStorage:
    return TaskStorage(LocalStorage(storage_path))


@pytest.fixture()
def store(storage: TaskStorage) -> TodoStore:
    s = TodoStore(storage, id_factory=CountingIds(), clock=TickingClock())
    s.hydrate()
    return s


@pytest.fixture()
def app(storage_path: Path) -> Iterator[Flask]:
    app = create_app({"TESTING": True, "STORAGE_PATH": storage_path, "SECRET_KEY": "test"})
    yield app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
