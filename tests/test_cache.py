"""
Tests for the summary cache.
"""

import pytest

from journal_server.services.storage import InMemoryKeyValueStore, StorageFailure
from journal_server.services.summarization import MetaSummary, SummaryCache

from .conftest import BASE_TIME, make_summary


def _meta(key: str, included) -> MetaSummary:
    return MetaSummary(
        key=key,
        content="combined account",
        original_word_count=600,
        summary_word_count=2,
        compression_ratio=2 / 600,
        content_fingerprint="ff",
        created_at=BASE_TIME,
        included_keys=list(included),
        source_count=len(included),
    )


@pytest.fixture
def cache():
    return SummaryCache(InMemoryKeyValueStore())


def test_get_set_delete(cache):
    assert cache.get("entry:1") is None

    cache.set("entry:1", make_summary("entry:1"))
    stored = cache.get("entry:1")
    assert stored is not None
    assert stored.key == "entry:1"
    assert stored.summary_word_count == 60

    cache.delete("entry:1")
    assert cache.get("entry:1") is None


def test_set_aligns_record_key(cache):
    cache.set("entry:2", make_summary("entry:1"))
    assert cache.get("entry:2").key == "entry:2"


def test_unreadable_record_reads_as_missing():
    cache = SummaryCache(InMemoryKeyValueStore({"entry:1": "{not json"}))
    assert cache.get("entry:1") is None
    assert cache.get_by_prefix("entry:") == {}


def test_meta_round_trip_keeps_type(cache):
    cache.set("entry-meta", _meta("entry-meta", ["entry:1", "entry:2"]))
    stored = cache.get("entry-meta")
    assert isinstance(stored, MetaSummary)
    assert stored.included_keys == ["entry:1", "entry:2"]


def test_prefix_and_pattern_queries(cache):
    for key in ["entry:1", "entry:2", "character:ava"]:
        cache.set(key, make_summary(key))

    assert sorted(cache.get_by_prefix("entry:")) == ["entry:1", "entry:2"]
    assert sorted(cache.get_by_pattern(r"^character:")) == ["character:ava"]
    assert sorted(cache.get_by_pattern(r":\d$")) == ["entry:1", "entry:2"]


def test_get_by_kind_groups_and_excludes_meta(cache):
    for key in ["entry:1", "entry:2", "character:ava"]:
        cache.set(key, make_summary(key))
    cache.set("entry-meta", _meta("entry-meta", ["entry:0"]))

    groups = cache.get_by_kind()

    assert sorted(groups) == ["character", "entry"]
    assert sorted(item.key for item in groups["entry"]) == ["entry:1", "entry:2"]


def test_stats_on_empty_cache(cache):
    stats = cache.stats()
    assert stats.total_summaries == 0
    assert stats.total_stored_items == 0
    assert stats.storage_efficiency == 0
    assert stats.average_compression_ratio == 0


def test_stats_counts_regular_summaries_only(cache):
    cache.set("entry:1", make_summary("entry:1", summary_words=60, original_words=300))
    cache.set("entry:2", make_summary("entry:2", summary_words=40, original_words=200))
    cache.set("entry-meta", _meta("entry-meta", ["entry:0"]))

    stats = cache.stats()

    assert stats.total_summaries == 2
    assert stats.total_meta_summaries == 1
    assert stats.total_stored_items == 3
    assert stats.total_summary_words == 100
    assert stats.total_original_words == 500
    assert stats.total_meta_summary_words == 2
    assert stats.storage_efficiency == pytest.approx(0.2)
    assert stats.average_compression_ratio == pytest.approx(0.2)


def test_next_meta_key_avoids_collisions(cache):
    assert cache.next_meta_key("entry") == "entry-meta"
    cache.set("entry-meta", _meta("entry-meta", ["entry:0"]))
    assert cache.next_meta_key("entry") == "entry-meta-2"
    cache.set("entry-meta-2", _meta("entry-meta-2", ["entry:9"]))
    assert cache.next_meta_key("entry") == "entry-meta-3"


def test_replace_with_meta_swaps_records(cache):
    for key in ["entry:1", "entry:2", "entry:3"]:
        cache.set(key, make_summary(key))

    cache.replace_with_meta(_meta("entry-meta", ["entry:1", "entry:2"]), ["entry:1", "entry:2"])

    assert cache.get("entry:1") is None
    assert cache.get("entry:2") is None
    assert cache.get("entry:3") is not None
    assert cache.get("entry-meta").source_count == 2


def test_replace_with_meta_requires_all_sources(cache):
    cache.set("entry:1", make_summary("entry:1"))

    with pytest.raises(StorageFailure):
        cache.replace_with_meta(_meta("entry-meta", ["entry:1", "entry:2"]), ["entry:1", "entry:2"])

    assert cache.get("entry:1") is not None
    assert cache.get("entry-meta") is None


def test_orphan_cleanup(cache):
    for key in ["entry:1", "entry:2", "entry:3"]:
        cache.set(key, make_summary(key))
    cache.set("entry-meta", _meta("entry-meta", ["entry:0"]))

    assert cache.find_orphans(["entry:1"]) == ["entry:2", "entry:3"]
    assert cache.cleanup_orphans(["entry:1"]) == ["entry:2", "entry:3"]
    assert sorted(cache.get_by_prefix("")) == ["entry-meta", "entry:1"]


def test_clear(cache):
    cache.set("entry:1", make_summary("entry:1"))
    cache.set("entry-meta", _meta("entry-meta", ["entry:0"]))
    cache.clear()
    assert cache.get_by_prefix("") == {}
