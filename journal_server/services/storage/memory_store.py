from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Mapping, Optional


class InMemoryKeyValueStore:
    """Dict-backed store with the same contract as the SQLite store."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys_with_prefix(self, prefix: str) -> List[str]:
        with self._lock:
            return sorted(key for key in self._data if key.startswith(prefix))

    def apply(self, sets: Mapping[str, str], deletes: Iterable[str] = ()) -> None:
        with self._lock:
            staged = dict(self._data)
            for key in deletes:
                staged.pop(key, None)
            staged.update(sets)
            self._data = staged

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._data)


__all__ = ["InMemoryKeyValueStore"]
