from __future__ import annotations

from datetime import datetime
from typing import Optional

from flask import (
    Blueprint,
    Response,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from .errors import ImportRejected, StorageError
from .models import Task
from .store import Add, ClearDone, Delete, Edit, Toggle, TodoStore
from .transfer import EXPORT_FILENAME, export_json
from .views import FILTER_MODES, completion_stats, earliest_created, filtered, remaining_count

bp = Blueprint("todos", __name__)


def get_store() -> TodoStore:
    return current_app.extensions["crashtodo"]


def _format_timestamp(ms: Optional[int]) -> Optional[str]:
    if ms is None:
        return None
    try:
        return datetime.fromtimestamp(ms / 1000).strftime("%d/%m/%Y %H:%M")
    except (ValueError, OverflowError, OSError):
        return str(ms)


def _back_home():
    mode = request.args.get("filter")
    if mode in FILTER_MODES and mode != "all":
        return redirect(url_for("todos.index", filter=mode))
    return redirect(url_for("todos.index"))


@bp.get("/")
def index():
    todos = get_store().tasks
    current_filter = request.args.get("filter", "all")
    if current_filter not in FILTER_MODES:
        current_filter = "all"

    def view_model(t: Task) -> dict:
        return {**t.to_dict(), "created_at_fmt": _format_timestamp(t.created_at)}

    return render_template(
        "index.html",
        filtered=[view_model(t) for t in filtered(todos, current_filter)],
        remaining=remaining_count(todos),
        current_filter=current_filter,
        modes=FILTER_MODES,
    )


@bp.post("/add")
def add():
    get_store().apply(Add(request.form.get("text") or ""))
    return _back_home()


@bp.post("/toggle/<todo_id>")
def toggle(todo_id: str):
    get_store().apply(Toggle(todo_id))
    return _back_home()


@bp.post("/delete/<todo_id>")
def delete(todo_id: str):
    get_store().apply(Delete(todo_id))
    return _back_home()


@bp.post("/edit/<todo_id>")
def edit(todo_id: str):
    text = (request.form.get("text") or "").strip()
    if text:
        get_store().apply(Edit(todo_id, text))
    return _back_home()


@bp.post("/clear/completed")
def clear_completed():
    get_store().apply(ClearDone())
    return _back_home()


@bp.get("/stats")
def stats():
    todos = get_store().tasks
    first = earliest_created(todos)
    return render_template(
        "stats.html",
        stats=completion_stats(todos),
        first_created=_format_timestamp(first.created_at) if first else None,
    )


@bp.get("/settings")
def settings():
    return render_template("settings.html")


@bp.get("/export")
def export():
    return Response(
        export_json(get_store().tasks),
        mimetype="application/json",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )


@bp.post("/import")
def import_file():
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return redirect(url_for("todos.settings"))
    store = get_store()
    try:
        count = store.replace_from_import(upload.read())
    except ImportRejected as e:
        current_app.logger.warning("Rejected import of %s: %s", upload.filename, e)
        flash("Invalid file", "error")
        return redirect(url_for("todos.settings"))
    except StorageError:
        current_app.logger.exception("Failed to store imported tasks")
        flash("Could not save imported tasks", "error")
        return redirect(url_for("todos.settings"))
    flash(f"Imported {count} task(s)", "info")
    return redirect(url_for("todos.index"))


@bp.post("/clear/all")
def clear_all():
    if request.form.get("confirm") != "yes":
        return redirect(url_for("todos.settings"))
    store = get_store()
    try:
        store.clear()
    except StorageError:
        current_app.logger.exception("Failed to clear storage")
        flash("Could not clear stored tasks", "error")
        return redirect(url_for("todos.settings"))
    return redirect(url_for("todos.index"))


@bp.get("/api/todos")
def api_list():
    return jsonify([t.to_dict() for t in get_store().tasks])


@bp.get("/api/stats")
def api_stats():
    todos = get_store().tasks
    first = earliest_created(todos)
    return jsonify(
        {
            **completion_stats(todos).to_dict(),
            "remaining": remaining_count(todos),
            "firstCreated": first.created_at if first else None,
        }
    )
