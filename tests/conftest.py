"""
Shared fixtures: a scripted summarizer, in-memory stores and a journal context.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from journal_server.services.chronicle import ChronicleAggregator
from journal_server.services.context import JournalContext
from journal_server.services.journal import Entry
from journal_server.services.storage import InMemoryKeyValueStore
from journal_server.services.summarization import (
    Summary,
    SummaryEngine,
    SummaryLimits,
    SummaryManager,
    fingerprint,
)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeSummarizer:
    """Records every call and answers from a script of responses or exceptions."""

    def __init__(self, responses: Optional[list] = None):
        self.calls: List[dict] = []
        self.responses = list(responses or [])
        self.fail_with: Optional[Exception] = None

    async def summarize(self, text, target_words, *, instructions=None):
        self.calls.append({"text": text, "target_words": target_words, "instructions": instructions})
        if self.fail_with is not None:
            raise self.fail_with
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return f"condensed {len(text.split())} words to {target_words}"

    @property
    def call_count(self) -> int:
        return len(self.calls)


def make_text(words: int, token: str = "word") -> str:
    return " ".join(f"{token}{index}" for index in range(words))


def make_entries(count: int, words: int = 5) -> List[Entry]:
    return [
        Entry(
            id=f"e{index + 1}",
            content=make_text(words, token=f"e{index + 1}w"),
            created_at=BASE_TIME + timedelta(minutes=index),
        )
        for index in range(count)
    ]


def make_summary(key: str, summary_words: int = 60, original_words: int = 300, minutes: int = 0) -> Summary:
    return Summary(
        key=key,
        content=make_text(summary_words, token="s"),
        original_word_count=original_words,
        summary_word_count=summary_words,
        compression_ratio=summary_words / original_words,
        content_fingerprint=fingerprint(key),
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def summarizer():
    return FakeSummarizer()


@pytest.fixture
def limits():
    return SummaryLimits()


@pytest.fixture
def engine(summarizer, limits):
    return SummaryEngine(summarizer, limits, clock=lambda: BASE_TIME)


@pytest.fixture
def manager(engine):
    return SummaryManager(engine)


@pytest.fixture
def aggregator(engine):
    return ChronicleAggregator(engine)


@pytest.fixture
def summary_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def chronicle_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def context(summary_store, chronicle_store):
    return JournalContext.from_stores(summary_store, chronicle_store)
