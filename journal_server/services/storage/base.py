from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Protocol


class StorageFailure(RuntimeError):
    """Raised when the durable key-value store cannot complete an operation."""


class KeyValueStore(Protocol):
    """Durable string-to-string store the summary cache and chronicle write through."""

    def get(self, key: str) -> Optional[str]:  # pragma: no cover - typing protocol
        ...

    def set(self, key: str, value: str) -> None:  # pragma: no cover - typing protocol
        ...

    def delete(self, key: str) -> None:  # pragma: no cover - typing protocol
        ...

    def keys_with_prefix(self, prefix: str) -> List[str]:  # pragma: no cover - typing protocol
        ...

    def apply(
        self, sets: Mapping[str, str], deletes: Iterable[str] = ()
    ) -> None:  # pragma: no cover - typing protocol
        ...


__all__ = ["KeyValueStore", "StorageFailure"]
