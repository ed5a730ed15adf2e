"""Service layer components."""

from .chronicle import ChronicleAggregator, ChronicleRefreshScheduler, ChronicleState, ChronicleStore
from .context import JournalContext
from .journal import Entry, EntryLog, JournalLog
from .storage import InMemoryKeyValueStore, KeyValueStore, SqliteKeyValueStore, StorageFailure
from .summarization import SummaryCache, SummaryEngine, SummaryManager

__all__ = [
    "ChronicleAggregator",
    "ChronicleRefreshScheduler",
    "ChronicleState",
    "ChronicleStore",
    "Entry",
    "EntryLog",
    "InMemoryKeyValueStore",
    "JournalContext",
    "JournalLog",
    "KeyValueStore",
    "SqliteKeyValueStore",
    "StorageFailure",
    "SummaryCache",
    "SummaryEngine",
    "SummaryManager",
]
