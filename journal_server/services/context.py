from __future__ import annotations

from dataclasses import dataclass

from .chronicle.store import ChronicleStore
from .storage import KeyValueStore
from .summarization.cache import SummaryCache

DEFAULT_JOURNAL_ID = "default"


@dataclass(frozen=True)
class JournalContext:
    """Handles for one journal's summary cache and chronicle records."""

    cache: SummaryCache
    chronicle: ChronicleStore
    journal_id: str = DEFAULT_JOURNAL_ID

    @classmethod
    def from_stores(
        cls,
        summaries: KeyValueStore,
        chronicle: KeyValueStore,
        journal_id: str = DEFAULT_JOURNAL_ID,
    ) -> "JournalContext":
        return cls(
            cache=SummaryCache(summaries),
            chronicle=ChronicleStore(chronicle),
            journal_id=journal_id,
        )


__all__ = ["DEFAULT_JOURNAL_ID", "JournalContext"]
