from __future__ import annotations

import json
import logging

from pydantic import BaseModel, Field, ValidationError

from mastery.errors import MalformedImportError
from mastery.models import Task, TaskEntry

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    tasks: list[Task]
    entries: list[TaskEntry] = Field(default_factory=list)


def export_snapshot(store) -> str:
    payload = {
        "tasks": [task.to_json_dict() for task in store.list_tasks()],
        "entries": [entry.to_json_dict() for entry in store.list_entries()],
    }
    return json.dumps(payload, indent=2)


def parse_snapshot(raw) -> Snapshot:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedImportError("Import file is not UTF-8 text") from exc
    try:
        snapshot = Snapshot.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedImportError(f"Import file is not a valid backup: {exc.error_count()} problem(s)") from exc

    task_ids = set()
    for task in snapshot.tasks:
        if task.id in task_ids:
            raise MalformedImportError(f"Duplicate task id {task.id!r}")
        task_ids.add(task.id)
    seen = set()
    for entry in snapshot.entries:
        if entry.key in seen:
            raise MalformedImportError(f"Duplicate entry for task {entry.task_id!r} on {entry.date.isoformat()}")
        seen.add(entry.key)
    return snapshot


def import_snapshot(store, raw) -> Snapshot:
    """Replace tasks and entries with a backup; nothing is written unless it all validates."""
    snapshot = parse_snapshot(raw)
    store.replace_all(snapshot.tasks, snapshot.entries)
    logger.info("Imported %d tasks and %d entries", len(snapshot.tasks), len(snapshot.entries))
    return snapshot


def clear_entries(store) -> None:
    store.clear_entries()
    logger.info("Cleared tracking data")
