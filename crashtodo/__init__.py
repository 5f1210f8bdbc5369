from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from flask import Flask

from . import config
from .storage import LocalStorage, TaskStorage
from .store import TodoStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = "crashtodo"


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config)
    app.config.from_prefixed_env("CRASHTODO")
    if overrides:
        app.config.update(overrides)

    storage = TaskStorage(LocalStorage(app.config["STORAGE_PATH"]), key=app.config["STORAGE_KEY"])
    store = TodoStore(storage)
    store.hydrate()
    app.extensions[EXTENSION_KEY] = store

    from .web import bp

    app.register_blueprint(bp)
    logger.info("crashtodo ready, storage=%s", app.config["STORAGE_PATH"])
    return app
