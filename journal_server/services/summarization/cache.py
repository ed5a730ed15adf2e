"""Summary cache backed by an injected key-value store.

Regular summaries live under ``<kind>:<id>`` keys and meta-summaries under
``<kind>-meta`` keys in the same store. Every call reads or writes the store
directly; nothing is memoized here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Union

from pydantic import ValidationError

from ...logging_config import logger
from ..storage import KeyValueStore, StorageFailure
from .kinds import ContentKind, kind_of_key, meta_key_for
from .records import MetaSummary, Summary, dump_record, load_record

Record = Union[Summary, MetaSummary]


@dataclass(frozen=True)
class CacheStats:
    total_summaries: int
    total_meta_summaries: int
    total_summary_words: int
    total_original_words: int
    total_meta_summary_words: int
    average_compression_ratio: float
    storage_efficiency: float

    @property
    def total_stored_items(self) -> int:
        return self.total_summaries + self.total_meta_summaries


class SummaryCache:
    def __init__(self, store: KeyValueStore):
        self._store = store

    # ------------------------------------------------------------------
    # Point operations
    # ------------------------------------------------------------------
    def get(self, key: str) -> Optional[Record]:
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return load_record(raw)
        except ValidationError as exc:
            logger.warning(
                "discarding unreadable summary record",
                extra={"key": key, "error": str(exc)},
            )
            return None

    def set(self, key: str, summary: Record) -> None:
        if summary.key != key:
            summary = summary.model_copy(update={"key": key})
        self._store.set(key, dump_record(summary))

    def delete(self, key: str) -> None:
        self._store.delete(key)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def _load_all(self, prefix: str = "") -> Dict[str, Record]:
        records: Dict[str, Record] = {}
        for key in self._store.keys_with_prefix(prefix):
            record = self.get(key)
            if record is not None:
                records[key] = record
        return records

    def get_by_prefix(self, prefix: str) -> Dict[str, Record]:
        return self._load_all(prefix)

    def get_by_pattern(self, pattern: str) -> Dict[str, Record]:
        regex = re.compile(pattern)
        return {key: record for key, record in self._load_all().items() if regex.search(key)}

    def get_by_kind(self) -> Dict[str, List[Summary]]:
        """Group regular summaries by the key segment before the first separator."""
        grouped: Dict[str, List[Summary]] = {}
        for key, record in self._load_all().items():
            if record.is_meta:
                continue
            grouped.setdefault(kind_of_key(key), []).append(record)
        return grouped

    def all_meta_summaries(self) -> Dict[str, MetaSummary]:
        return {key: record for key, record in self._load_all().items() if record.is_meta}

    def stats(self) -> CacheStats:
        records = self._load_all().values()
        summaries = [record for record in records if not record.is_meta]
        metas = [record for record in records if record.is_meta]

        total_summary_words = sum(item.summary_word_count for item in summaries)
        total_original_words = sum(item.original_word_count for item in summaries)
        average_ratio = (
            sum(item.compression_ratio for item in summaries) / len(summaries) if summaries else 0.0
        )
        return CacheStats(
            total_summaries=len(summaries),
            total_meta_summaries=len(metas),
            total_summary_words=total_summary_words,
            total_original_words=total_original_words,
            total_meta_summary_words=sum(item.summary_word_count for item in metas),
            average_compression_ratio=average_ratio,
            storage_efficiency=(
                total_summary_words / total_original_words if total_original_words > 0 else 0.0
            ),
        )

    # ------------------------------------------------------------------
    # Consolidation support
    # ------------------------------------------------------------------
    def next_meta_key(self, kind: Union[ContentKind, str]) -> str:
        base = meta_key_for(kind)
        if self._store.get(base) is None:
            return base
        suffix = 2
        while self._store.get(f"{base}-{suffix}") is not None:
            suffix += 1
        return f"{base}-{suffix}"

    def replace_with_meta(self, meta: MetaSummary, keys: Sequence[str]) -> None:
        """Store ``meta`` and delete ``keys`` together.

        Every key must be present when this is called; otherwise nothing is
        written and ``StorageFailure`` is raised.
        """
        missing = [key for key in keys if self._store.get(key) is None]
        if missing:
            raise StorageFailure(f"cannot consolidate; keys no longer cached: {missing}")
        self._store.apply({meta.key: dump_record(meta)}, list(keys))

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------
    def find_orphans(self, valid_keys: Iterable[str]) -> List[str]:
        valid = set(valid_keys)
        return sorted(
            key
            for key, record in self._load_all().items()
            if not record.is_meta and key not in valid
        )

    def cleanup_orphans(self, valid_keys: Iterable[str]) -> List[str]:
        orphans = self.find_orphans(valid_keys)
        if orphans:
            self._store.apply({}, orphans)
            logger.info("removed orphaned summaries", extra={"count": len(orphans)})
        return orphans

    def clear(self) -> None:
        keys = self._store.keys_with_prefix("")
        if keys:
            self._store.apply({}, keys)


__all__ = ["CacheStats", "Record", "SummaryCache"]
