"""Durable key-value storage backends."""

from .base import KeyValueStore, StorageFailure
from .memory_store import InMemoryKeyValueStore
from .sqlite_store import SqliteKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SqliteKeyValueStore",
    "StorageFailure",
]
