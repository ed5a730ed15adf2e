"""Journal partitioning and the chronicle rollup."""

from .aggregator import BackfillResult, ChronicleAggregator
from .keys import (
    PARTS_LATEST_KEY,
    RECENT_SUMMARY_KEY,
    SO_FAR_LATEST_KEY,
    part_entries_key,
    part_summary_key,
    part_title_key,
)
from .partition import PART_SIZE_DEFAULT, Partition, partition
from .scheduler import ChronicleRefreshScheduler
from .state import ChronicleState, Part
from .store import ChronicleStore

__all__ = [
    "BackfillResult",
    "ChronicleAggregator",
    "ChronicleRefreshScheduler",
    "ChronicleState",
    "ChronicleStore",
    "PART_SIZE_DEFAULT",
    "PARTS_LATEST_KEY",
    "Part",
    "Partition",
    "RECENT_SUMMARY_KEY",
    "SO_FAR_LATEST_KEY",
    "part_entries_key",
    "part_summary_key",
    "part_title_key",
    "partition",
]
