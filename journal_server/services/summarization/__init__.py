"""Summary generation, caching and consolidation."""

from .cache import CacheStats, SummaryCache
from .engine import EngineResult, FailureReason, SummaryEngine, SummaryLimits, target_words
from .errors import SummarizerError, SummarizerFailure, SummarizerUnavailable
from .fingerprint import fingerprint
from .kinds import ContentKind, SummaryKey
from .manager import (
    BatchOutcome,
    ContentItem,
    ContentView,
    ProcessResult,
    ProcessStatus,
    RebalanceResult,
    RejectReason,
    SummaryHealth,
    SummaryManager,
    SummaryOverview,
)
from .records import MetaSummary, Summary
from .summarizer import ChatCompletionSummarizer, Summarizer, TimeoutSummarizer

__all__ = [
    "BatchOutcome",
    "CacheStats",
    "ChatCompletionSummarizer",
    "ContentItem",
    "ContentKind",
    "ContentView",
    "EngineResult",
    "FailureReason",
    "MetaSummary",
    "ProcessResult",
    "ProcessStatus",
    "RebalanceResult",
    "RejectReason",
    "Summarizer",
    "SummarizerError",
    "SummarizerFailure",
    "SummarizerUnavailable",
    "Summary",
    "SummaryCache",
    "SummaryEngine",
    "SummaryHealth",
    "SummaryKey",
    "SummaryLimits",
    "SummaryManager",
    "SummaryOverview",
    "TimeoutSummarizer",
    "fingerprint",
    "target_words",
]
