"""Process wiring for the HTTP app: builds the stores, services and context once."""

from __future__ import annotations

from functools import lru_cache

from ..config import get_settings
from .chronicle import ChronicleAggregator, ChronicleRefreshScheduler
from .context import JournalContext
from .journal import JournalLog
from .storage import SqliteKeyValueStore
from .summarization import (
    ChatCompletionSummarizer,
    SummaryEngine,
    SummaryLimits,
    SummaryManager,
    TimeoutSummarizer,
)

SUMMARIES_NAMESPACE = "summaries"
CHRONICLE_NAMESPACE = "chronicle"


@lru_cache(maxsize=1)
def get_summary_limits() -> SummaryLimits:
    return SummaryLimits.from_settings(get_settings())


@lru_cache(maxsize=1)
def get_journal_context() -> JournalContext:
    settings = get_settings()
    return JournalContext.from_stores(
        SqliteKeyValueStore(settings.database_path, SUMMARIES_NAMESPACE),
        SqliteKeyValueStore(settings.database_path, CHRONICLE_NAMESPACE),
    )


@lru_cache(maxsize=1)
def get_summary_engine() -> SummaryEngine:
    settings = get_settings()
    summarizer = TimeoutSummarizer(
        ChatCompletionSummarizer.from_settings(settings),
        timeout=settings.summarizer_timeout_seconds,
    )
    return SummaryEngine(summarizer, get_summary_limits())


@lru_cache(maxsize=1)
def get_summary_manager() -> SummaryManager:
    return SummaryManager(get_summary_engine())


@lru_cache(maxsize=1)
def get_chronicle_aggregator() -> ChronicleAggregator:
    return ChronicleAggregator(get_summary_engine())


@lru_cache(maxsize=1)
def get_journal_log() -> JournalLog:
    return JournalLog(get_settings().journal_log_path)


@lru_cache(maxsize=1)
def get_refresh_scheduler() -> ChronicleRefreshScheduler:
    return ChronicleRefreshScheduler(
        get_chronicle_aggregator(),
        get_journal_context,
        get_journal_log(),
    )


__all__ = [
    "CHRONICLE_NAMESPACE",
    "SUMMARIES_NAMESPACE",
    "get_chronicle_aggregator",
    "get_journal_context",
    "get_journal_log",
    "get_refresh_scheduler",
    "get_summary_engine",
    "get_summary_limits",
    "get_summary_manager",
]
