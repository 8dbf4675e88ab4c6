"""Versioned key-value backends holding the serialized collections.

Every stored key carries an integer version that starts at 1 and grows by one
on each write. Callers pass the version they read as ``expected_version``
(0 meaning "the key must not exist yet", ``None`` meaning "write
unconditionally"); a mismatch raises ``StaleWriteError``.
``write_many`` applies several such writes together: either every key is
written or none is.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from mastery.errors import StaleWriteError, StorageUnavailableError

logger = logging.getLogger(__name__)

KV_TABLE = "kv_store"


@dataclass(frozen=True)
class StoredValue:
    value: str
    version: int


class KeyValueBackend(Protocol):
    def read(self, key: str) -> StoredValue | None: ...

    def write(self, key: str, value: str, expected_version: int | None = None) -> int: ...

    def write_many(self, items: dict[str, tuple[str, int | None]]) -> dict[str, int]: ...

    def delete(self, key: str) -> None: ...


def _check_version(key: str, expected_version: int | None, current_version: int) -> None:
    if expected_version is not None and expected_version != current_version:
        raise StaleWriteError(key, expected_version, current_version)


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, StoredValue] = {}
        for key, value in (initial or {}).items():
            self._items[key] = StoredValue(value, 1)

    def read(self, key: str) -> StoredValue | None:
        return self._items.get(key)

    def write(self, key: str, value: str, expected_version: int | None = None) -> int:
        current = self._items.get(key)
        current_version = current.version if current else 0
        _check_version(key, expected_version, current_version)
        self._items[key] = StoredValue(value, current_version + 1)
        return current_version + 1

    def write_many(self, items: dict[str, tuple[str, int | None]]) -> dict[str, int]:
        new_versions = {}
        for key, (_, expected_version) in items.items():
            current = self._items.get(key)
            current_version = current.version if current else 0
            _check_version(key, expected_version, current_version)
            new_versions[key] = current_version + 1
        for key, (value, _) in items.items():
            self._items[key] = StoredValue(value, new_versions[key])
        return new_versions

    def delete(self, key: str) -> None:
        self._items.pop(key, None)


class SqlKeyValueStore:
    """Key-value rows in a single SQL table, created on first use."""

    def __init__(self, engine: Engine):
        self._engine = engine
        self._ready = False

    def _ensure_table(self) -> None:
        if self._ready:
            return
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    sql_text(
                        f"""
                        CREATE TABLE IF NOT EXISTS {KV_TABLE} (
                            key TEXT PRIMARY KEY,
                            value TEXT NOT NULL,
                            version INTEGER NOT NULL DEFAULT 1,
                            updated_at TEXT
                        )
                        """
                    )
                )
        except SQLAlchemyError as exc:
            logger.exception("Failed to initialize %s", KV_TABLE)
            raise StorageUnavailableError(f"Storage unavailable: {exc}") from exc
        self._ready = True

    def read(self, key: str) -> StoredValue | None:
        self._ensure_table()
        try:
            with self._engine.connect() as conn:
                row = conn.execute(
                    sql_text(f"SELECT value, version FROM {KV_TABLE} WHERE key = :key"),
                    {"key": key},
                ).fetchone()
        except SQLAlchemyError as exc:
            logger.exception("Failed to read key %s", key)
            raise StorageUnavailableError(f"Storage unavailable: {exc}") from exc
        if row is None:
            return None
        return StoredValue(row[0], int(row[1]))

    def _write_row(self, conn, key: str, value: str, expected_version: int | None, updated_at: str) -> int:
        row = conn.execute(
            sql_text(f"SELECT version FROM {KV_TABLE} WHERE key = :key"),
            {"key": key},
        ).fetchone()
        current_version = int(row[0]) if row else 0
        _check_version(key, expected_version, current_version)
        if row is None:
            conn.execute(
                sql_text(
                    f"INSERT INTO {KV_TABLE} (key, value, version, updated_at) "
                    "VALUES (:key, :value, 1, :updated_at)"
                ),
                {"key": key, "value": value, "updated_at": updated_at},
            )
            return 1
        result = conn.execute(
            sql_text(
                f"UPDATE {KV_TABLE} SET value = :value, version = :new_version, updated_at = :updated_at "
                "WHERE key = :key AND version = :current_version"
            ),
            {
                "key": key,
                "value": value,
                "new_version": current_version + 1,
                "current_version": current_version,
                "updated_at": updated_at,
            },
        )
        if result.rowcount != 1:
            raise StaleWriteError(key, expected_version, None)
        return current_version + 1

    def write(self, key: str, value: str, expected_version: int | None = None) -> int:
        return self.write_many({key: (value, expected_version)})[key]

    def write_many(self, items: dict[str, tuple[str, int | None]]) -> dict[str, int]:
        """Write every key in one transaction; a failure on any key rolls back all of them."""
        self._ensure_table()
        updated_at = datetime.now(timezone.utc).isoformat()
        keys = ", ".join(items)
        try:
            with self._engine.begin() as conn:
                return {
                    key: self._write_row(conn, key, value, expected_version, updated_at)
                    for key, (value, expected_version) in items.items()
                }
        except IntegrityError as exc:
            raise StaleWriteError(keys, None, None) from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to write keys %s", keys)
            raise StorageUnavailableError(f"Storage unavailable: {exc}") from exc

    def delete(self, key: str) -> None:
        self._ensure_table()
        try:
            with self._engine.begin() as conn:
                conn.execute(sql_text(f"DELETE FROM {KV_TABLE} WHERE key = :key"), {"key": key})
        except SQLAlchemyError as exc:
            logger.exception("Failed to delete key %s", key)
            raise StorageUnavailableError(f"Storage unavailable: {exc}") from exc
