from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError

from mastery.catalog import DEFAULT_TASKS, TaskCatalog, new_task_id
from mastery.dates import as_date
from mastery.errors import StorageUnavailableError
from mastery.kvstore import KeyValueBackend
from mastery.models import Task, TaskEntry

logger = logging.getLogger(__name__)

TASKS_KEY = "mastery_tasks"
ENTRIES_KEY = "mastery_task_entries"

_TASK_LIST = TypeAdapter(list[Task])
_ENTRY_LIST = TypeAdapter(list[TaskEntry])


def dump_collection(items) -> str:
    return json.dumps([item.to_json_dict() for item in items])


class EntryStore:
    """Tasks and task entries persisted as two JSON arrays.

    Each write reads the whole collection, changes it and writes it back with
    the version it read, so an interleaved writer causes ``StaleWriteError``
    instead of a silently lost update.
    """

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    def _load(self, key: str, adapter: TypeAdapter) -> tuple[list, int]:
        stored = self.backend.read(key)
        if stored is None:
            return [], 0
        try:
            items = adapter.validate_python(json.loads(stored.value))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.error("Stored collection %s is unreadable: %s", key, exc)
            raise StorageUnavailableError(f"Stored collection '{key}' is unreadable") from exc
        return items, stored.version

    def _version(self, key: str) -> int:
        stored = self.backend.read(key)
        return stored.version if stored else 0

    def _save(self, key: str, items, version: int) -> int:
        return self.backend.write(key, dump_collection(items), expected_version=version)

    # Tasks

    def list_tasks(self) -> list[Task]:
        tasks, version = self._load(TASKS_KEY, _TASK_LIST)
        if version == 0:
            logger.info("Seeding default task catalog (%d tasks)", len(DEFAULT_TASKS))
            tasks = list(DEFAULT_TASKS)
            self._save(TASKS_KEY, tasks, version)
        return tasks

    def catalog(self) -> TaskCatalog:
        return TaskCatalog(self.list_tasks())

    def get_task(self, task_id: str) -> Task | None:
        return self.catalog().get(task_id)

    def add_task(self, name: str, category: str, value_kind: str = "boolean", description: str | None = None) -> Task:
        self.list_tasks()
        tasks, version = self._load(TASKS_KEY, _TASK_LIST)
        task = Task(
            id=new_task_id(task.id for task in tasks),
            name=name.strip(),
            category=category,
            value_kind=value_kind,
            description=description,
        )
        self._save(TASKS_KEY, [*tasks, task], version)
        return task

    # Entries

    def list_entries(self) -> list[TaskEntry]:
        entries, _ = self._load(ENTRIES_KEY, _ENTRY_LIST)
        return entries

    def list_entries_for_date(self, day) -> list[TaskEntry]:
        target = as_date(day)
        return [entry for entry in self.list_entries() if entry.date == target]

    def get_entry(self, task_id: str, day) -> TaskEntry | None:
        target = as_date(day)
        for entry in self.list_entries():
            if entry.task_id == task_id and entry.date == target:
                return entry
        return None

    def upsert_entry(self, entry: TaskEntry) -> None:
        entries, version = self._load(ENTRIES_KEY, _ENTRY_LIST)
        for index, existing in enumerate(entries):
            if existing.key == entry.key:
                entries[index] = entry
                break
        else:
            entries.append(entry)
        self._save(ENTRIES_KEY, entries, version)

    def set_completed(self, task_id: str, day, completed: bool) -> TaskEntry:
        existing = self.get_entry(task_id, day)
        if existing is None:
            entry = TaskEntry(task_id=task_id, date=as_date(day), completed=completed)
        else:
            entry = existing.model_copy(update={"completed": completed})
        self.upsert_entry(entry)
        return entry

    def toggle_entry(self, task_id: str, day) -> TaskEntry:
        existing = self.get_entry(task_id, day)
        return self.set_completed(task_id, day, not existing.completed if existing else True)

    def record_value(self, task_id: str, day, value: str | None) -> TaskEntry:
        clean = (value or "").strip()
        existing = self.get_entry(task_id, day)
        entry = TaskEntry(
            task_id=task_id,
            date=as_date(day),
            completed=bool(clean),
            value=clean,
            notes=existing.notes if existing else None,
        )
        self.upsert_entry(entry)
        return entry

    def clear_entries(self) -> None:
        self._save(ENTRIES_KEY, [], self._version(ENTRIES_KEY))

    def replace_all(self, tasks: list[Task], entries: list[TaskEntry]) -> None:
        """Swap in both collections together, or leave both as they were."""
        self.backend.write_many(
            {
                TASKS_KEY: (dump_collection(tasks), self._version(TASKS_KEY)),
                ENTRIES_KEY: (dump_collection(entries), self._version(ENTRIES_KEY)),
            }
        )
