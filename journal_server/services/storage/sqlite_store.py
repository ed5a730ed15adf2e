from __future__ import annotations

import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from ...logging_config import logger
from .base import StorageFailure


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteKeyValueStore:
    """Namespaced key-value persistence backed by SQLite."""

    def __init__(self, db_path: Path, namespace: str):
        if not namespace:
            raise ValueError("namespace must be a non-empty string")
        self._db_path = db_path
        self._namespace = namespace
        self._lock = threading.Lock()
        self._ensure_directory()
        self._ensure_schema()

    def _ensure_directory(self) -> None:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:  # pragma: no cover - defensive
            logger.warning(
                "key-value store directory creation failed",
                extra={"error": str(exc), "path": str(self._db_path)},
            )

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=30, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_sql = """
        CREATE TABLE IF NOT EXISTS kv_entries (
            namespace TEXT NOT NULL,
            key TEXT NOT NULL,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            PRIMARY KEY (namespace, key)
        );
        """
        try:
            with self._lock, self._connect() as conn:
                conn.execute("PRAGMA journal_mode=WAL;")
                conn.execute(schema_sql)
        except sqlite3.Error as exc:
            raise StorageFailure(f"schema setup failed: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        try:
            with self._lock, self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_entries WHERE namespace = ? AND key = ?",
                    (self._namespace, key),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageFailure(f"read failed for {key!r}: {exc}") from exc
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.apply({key: value})

    def delete(self, key: str) -> None:
        self.apply({}, [key])

    def keys_with_prefix(self, prefix: str) -> List[str]:
        sql = "SELECT key FROM kv_entries WHERE namespace = ?"
        params: List[object] = [self._namespace]
        if prefix:
            sql += " AND substr(key, 1, ?) = ?"
            params.extend([len(prefix), prefix])
        sql += " ORDER BY key"
        try:
            with self._lock, self._connect() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StorageFailure(f"prefix scan failed for {prefix!r}: {exc}") from exc
        return [row["key"] for row in rows]

    def apply(self, sets: Mapping[str, str], deletes: Iterable[str] = ()) -> None:
        """Write ``sets`` and remove ``deletes`` in a single transaction."""
        delete_keys = list(deletes)
        if not sets and not delete_keys:
            return
        updated_at = _timestamp()
        with self._lock:
            try:
                conn = self._connect()
            except sqlite3.Error as exc:
                raise StorageFailure(f"connection failed: {exc}") from exc
            try:
                conn.execute("BEGIN")
                for key in delete_keys:
                    conn.execute(
                        "DELETE FROM kv_entries WHERE namespace = ? AND key = ?",
                        (self._namespace, key),
                    )
                for key, value in sets.items():
                    conn.execute(
                        "INSERT INTO kv_entries (namespace, key, value, updated_at)"
                        " VALUES (?, ?, ?, ?)"
                        " ON CONFLICT(namespace, key) DO UPDATE SET"
                        " value = excluded.value, updated_at = excluded.updated_at",
                        (self._namespace, key, value, updated_at),
                    )
                conn.execute("COMMIT")
            except sqlite3.Error as exc:
                try:
                    conn.execute("ROLLBACK")
                except sqlite3.Error:  # pragma: no cover - rollback after failed begin
                    pass
                logger.error(
                    "key-value write failed",
                    extra={"error": str(exc), "namespace": self._namespace},
                )
                raise StorageFailure(f"write failed: {exc}") from exc
            finally:
                conn.close()

    def clear_all(self) -> None:
        try:
            with self._lock, self._connect() as conn:
                conn.execute("DELETE FROM kv_entries WHERE namespace = ?", (self._namespace,))
        except sqlite3.Error as exc:
            raise StorageFailure(f"clear failed: {exc}") from exc


__all__ = ["SqliteKeyValueStore"]
