"""Journal entry log provider."""

from .log import Entry, EntryLog, JournalLog

__all__ = ["Entry", "EntryLog", "JournalLog"]
