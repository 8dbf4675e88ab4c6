from __future__ import annotations

from dataclasses import dataclass

from mastery.db import get_engine
from mastery.kvstore import KeyValueBackend, SqlKeyValueStore
from mastery.progress import ProgressAggregator
from mastery.reports import ReportGenerator
from mastery.session import SessionHolder
from mastery.store import EntryStore


@dataclass
class Services:
    backend: KeyValueBackend
    store: EntryStore
    progress: ProgressAggregator
    reports: ReportGenerator
    sessions: SessionHolder


def build_services(backend: KeyValueBackend, today=None) -> Services:
    store = EntryStore(backend)
    return Services(
        backend=backend,
        store=store,
        progress=ProgressAggregator(store),
        reports=ReportGenerator(store, today=today),
        sessions=SessionHolder(backend),
    )


_services: Services | None = None


def get_services() -> Services:
    global _services
    if _services is None:
        _services = build_services(SqlKeyValueStore(get_engine()))
    return _services
