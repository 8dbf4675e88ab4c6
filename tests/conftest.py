# tests/conftest.py

from __future__ import annotations

from datetime import date

import pytest

from mastery.kvstore import MemoryKeyValueStore
from mastery.progress import ProgressAggregator
from mastery.reports import ReportGenerator
from mastery.services import Services, build_services
from mastery.settings import reset_settings
from mastery.store import EntryStore

TODAY = date(2024, 3, 14)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Settings come from the environment; keep every test on the defaults."""
    for name in (
        "BACKEND_SESSION_SECRET",
        "STREAK_THRESHOLD",
        "RANKING_WINDOW_DAYS",
        "TREND_WINDOW_DAYS",
        "WEEK_STARTS_ON",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture()
def backend() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def store(backend: MemoryKeyValueStore) -> EntryStore:
    return EntryStore(backend)


@pytest.fixture()
def aggregator(store: EntryStore) -> ProgressAggregator:
    return ProgressAggregator(store)


@pytest.fixture()
def reports(store: EntryStore) -> ReportGenerator:
    return ReportGenerator(store, today=lambda: TODAY)


@pytest.fixture()
def services(backend: MemoryKeyValueStore) -> Services:
    return build_services(backend, today=lambda: TODAY)
