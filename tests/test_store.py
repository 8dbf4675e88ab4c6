# tests/test_store.py

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from mastery.db import build_engine
from mastery.errors import StaleWriteError, StorageUnavailableError
from mastery.kvstore import MemoryKeyValueStore, SqlKeyValueStore
from mastery.models import TaskEntry
from mastery.store import ENTRIES_KEY, TASKS_KEY, EntryStore

from .fakes import InterleavingBackend


def test_list_tasks_seeds_default_catalog_once(store: EntryStore, backend: MemoryKeyValueStore) -> None:
    tasks = store.list_tasks()
    assert len(tasks) == 15
    assert tasks[0].id == "task1"
    assert backend.read(TASKS_KEY).version == 1

    store.list_tasks()
    assert backend.read(TASKS_KEY).version == 1


def test_screen_time_is_tagged_as_duration(store: EntryStore) -> None:
    catalog = store.catalog()
    value_task = catalog.value_task()
    assert value_task is not None
    assert value_task.name == "SCREEN TIME"
    assert [task.id for task in catalog if task.tracks_value] == ["task15"]


def test_stored_empty_catalog_is_not_reseeded() -> None:
    store = EntryStore(MemoryKeyValueStore({TASKS_KEY: "[]"}))
    assert store.list_tasks() == []


def test_upsert_overwrites_same_task_and_date(store: EntryStore) -> None:
    first = TaskEntry(task_id="task1", date=date(2024, 1, 1), completed=False)
    second = TaskEntry(task_id="task1", date=date(2024, 1, 1), completed=True, notes="done early")

    store.upsert_entry(first)
    store.upsert_entry(second)

    entries = store.list_entries()
    assert entries == [second]


def test_upsert_replaces_in_place(store: EntryStore) -> None:
    store.upsert_entry(TaskEntry(task_id="task1", date=date(2024, 1, 1), completed=True))
    store.upsert_entry(TaskEntry(task_id="task2", date=date(2024, 1, 1), completed=True))
    store.upsert_entry(TaskEntry(task_id="task1", date=date(2024, 1, 1), completed=False))

    assert [(e.task_id, e.completed) for e in store.list_entries()] == [("task1", False), ("task2", True)]


def test_entries_for_date_round_trip(store: EntryStore) -> None:
    entry = TaskEntry(task_id="task3", date=date(2024, 1, 5), completed=True)
    store.upsert_entry(entry)
    store.upsert_entry(TaskEntry(task_id="task3", date=date(2024, 1, 6), completed=True))

    matching = [e for e in store.list_entries_for_date("2024-01-05") if e.task_id == "task3"]
    assert matching == [entry]


def test_entries_serialize_with_camel_case_keys(store: EntryStore, backend: MemoryKeyValueStore) -> None:
    store.upsert_entry(TaskEntry(task_id="task1", date=date(2024, 1, 1), completed=True))

    raw = json.loads(backend.read(ENTRIES_KEY).value)
    assert raw == [{"taskId": "task1", "date": "2024-01-01", "completed": True}]


def test_toggle_entry_creates_then_flips(store: EntryStore) -> None:
    created = store.toggle_entry("task2", date(2024, 1, 1))
    assert created.completed is True

    flipped = store.toggle_entry("task2", date(2024, 1, 1))
    assert flipped.completed is False
    assert len(store.list_entries()) == 1


def test_record_value_marks_completion_from_value(store: EntryStore) -> None:
    store.upsert_entry(TaskEntry(task_id="task15", date=date(2024, 1, 1), notes="phone only"))

    logged = store.record_value("task15", date(2024, 1, 1), " 02:15 ")
    assert logged.value == "02:15"
    assert logged.completed is True
    assert logged.notes == "phone only"

    cleared = store.record_value("task15", date(2024, 1, 1), "")
    assert cleared.completed is False


def test_add_task_appends_with_unique_id(store: EntryStore) -> None:
    task = store.add_task("  COLD SHOWER ", "wellness")

    tasks = store.list_tasks()
    assert len(tasks) == 16
    assert tasks[-1] == task
    assert task.name == "COLD SHOWER"
    assert task.id.startswith("task")
    assert len({t.id for t in tasks}) == 16


def test_concurrent_write_is_rejected_not_lost() -> None:
    backend = InterleavingBackend()
    store = EntryStore(backend)
    store.upsert_entry(TaskEntry(task_id="task1", date=date(2024, 1, 1), completed=True))

    other_tab = json.dumps([{"taskId": "task9", "date": "2024-01-01", "completed": True}])
    backend.interleave(ENTRIES_KEY, other_tab)

    with pytest.raises(StaleWriteError):
        store.upsert_entry(TaskEntry(task_id="task2", date=date(2024, 1, 1), completed=True))

    assert [e.task_id for e in store.list_entries()] == ["task9"]


def test_unreadable_collection_raises_storage_error() -> None:
    store = EntryStore(MemoryKeyValueStore({ENTRIES_KEY: "{not json"}))
    with pytest.raises(StorageUnavailableError):
        store.list_entries()


def test_memory_backend_versions() -> None:
    backend = MemoryKeyValueStore()
    assert backend.write("k", "a", expected_version=0) == 1
    assert backend.write("k", "b") == 2
    with pytest.raises(StaleWriteError):
        backend.write("k", "c", expected_version=1)
    assert backend.read("k").value == "b"


def test_sql_backend_round_trip(tmp_path: Path) -> None:
    engine = build_engine(f"sqlite:///{tmp_path / 'tracker.db'}")
    backend = SqlKeyValueStore(engine)

    assert backend.read("k") is None
    assert backend.write("k", "a", expected_version=0) == 1
    assert backend.write("k", "b", expected_version=1) == 2
    with pytest.raises(StaleWriteError):
        backend.write("k", "c", expected_version=1)

    stored = backend.read("k")
    assert (stored.value, stored.version) == ("b", 2)

    backend.delete("k")
    assert backend.read("k") is None


def test_sql_backed_store_persists_across_instances(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'tracker.db'}"
    first = EntryStore(SqlKeyValueStore(build_engine(url)))
    first.upsert_entry(TaskEntry(task_id="task4", date=date(2024, 2, 2), completed=True, value="x"))

    second = EntryStore(SqlKeyValueStore(build_engine(url)))
    assert len(second.list_tasks()) == 15
    assert second.list_entries_for_date(date(2024, 2, 2))[0].value == "x"


def test_sql_backend_unreachable_database(tmp_path: Path) -> None:
    missing = tmp_path / "missing-dir" / "tracker.db"
    backend = SqlKeyValueStore(build_engine(f"sqlite:///{missing}"))
    with pytest.raises(StorageUnavailableError):
        backend.read("k")


def test_sql_write_many_is_all_or_nothing(tmp_path: Path) -> None:
    backend = SqlKeyValueStore(build_engine(f"sqlite:///{tmp_path / 'tracker.db'}"))
    backend.write("a", "a1", expected_version=0)
    backend.write("b", "b1", expected_version=0)

    with pytest.raises(StaleWriteError):
        backend.write_many({"a": ("a2", 1), "b": ("b2", 0)})
    assert (backend.read("a").value, backend.read("a").version) == ("a1", 1)

    assert backend.write_many({"a": ("a2", 1), "b": ("b2", 1)}) == {"a": 2, "b": 2}
    assert backend.read("b").value == "b2"


def test_memory_write_many_checks_every_version_first() -> None:
    backend = MemoryKeyValueStore({"a": "a1"})
    with pytest.raises(StaleWriteError):
        backend.write_many({"a": ("a2", 1), "b": ("b2", 3)})
    assert backend.read("a").value == "a1"
    assert backend.read("b") is None
