"""
HTTP tests for the journal API with in-memory stores and a scripted summarizer.
"""

import pytest
from fastapi.testclient import TestClient

from journal_server.app import create_app
from journal_server.services import runtime
from journal_server.services.context import JournalContext
from journal_server.services.journal import JournalLog
from journal_server.services.storage import InMemoryKeyValueStore, StorageFailure

from .conftest import make_summary, make_text

API = "/api/v1"


class OfflineStore(InMemoryKeyValueStore):
    def keys_with_prefix(self, prefix):
        raise StorageFailure("database is locked")


@pytest.fixture
def journal_log(tmp_path):
    return JournalLog(tmp_path / "entries.log")


@pytest.fixture
def app(context, manager, aggregator, limits, journal_log):
    application = create_app()
    application.dependency_overrides[runtime.get_journal_context] = lambda: context
    application.dependency_overrides[runtime.get_summary_manager] = lambda: manager
    application.dependency_overrides[runtime.get_chronicle_aggregator] = lambda: aggregator
    application.dependency_overrides[runtime.get_summary_limits] = lambda: limits
    application.dependency_overrides[runtime.get_journal_log] = lambda: journal_log
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


def test_health(client):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["service"] == "journal-summaries"


def test_meta_lists_endpoints(client):
    endpoints = client.get(f"{API}/meta").json()["endpoints"]

    assert f"{API}/summaries/{{kind}}/{{item_id}}" in endpoints
    assert f"{API}/chronicle/backfill" in endpoints


def test_create_and_list_entries(client):
    created = client.post(f"{API}/entries", json={"content": "Walked to the harbour.", "id": "e1"})

    assert created.status_code == 201
    assert created.json()["id"] == "e1"

    listing = client.get(f"{API}/entries").json()
    assert listing["total"] == 1
    assert listing["entries"][0]["content"] == "Walked to the harbour."


def test_invalid_entry_uses_error_envelope(client):
    response = client.post(f"{API}/entries", json={"content": ""})

    assert response.status_code == 422
    body = response.json()
    assert body["ok"] is False
    assert body["error"] == "Invalid request"
    assert body["detail"]


def test_process_and_fetch_summary(client, summarizer):
    text = make_text(250)

    first = client.post(f"{API}/summaries/entry/1", json={"content": text})
    second = client.post(f"{API}/summaries/entry/1", json={"content": text})

    assert first.json()["status"] == "created"
    assert first.json()["summary"]["key"] == "entry:1"
    assert second.json()["status"] == "unchanged"
    assert summarizer.call_count == 1

    fetched = client.get(f"{API}/summaries/entry/1")
    assert fetched.status_code == 200
    assert fetched.json()["original_word_count"] == 250


def test_process_short_content(client):
    body = client.post(f"{API}/summaries/character/ava", json={"content": "Brave."}).json()

    assert body["ok"] is False
    assert body["status"] == "rejected"
    assert body["reason"] == "too-short"


def test_missing_summary_and_unknown_kind(client):
    assert client.get(f"{API}/summaries/entry/404").status_code == 404

    response = client.post(f"{API}/summaries/recipe/1", json={"content": make_text(250)})
    assert response.status_code == 404
    assert response.json()["ok"] is False


def test_list_summaries_by_prefix_and_pattern(client, context):
    for key in ["entry:1", "entry:2", "character:ava"]:
        context.cache.set(key, make_summary(key))

    by_prefix = client.get(f"{API}/summaries", params={"prefix": "entry:"}).json()
    by_pattern = client.get(f"{API}/summaries", params={"pattern": "ava$"}).json()

    assert sorted(by_prefix["summaries"]) == ["entry:1", "entry:2"]
    assert list(by_pattern["summaries"]) == ["character:ava"]
    assert client.get(f"{API}/summaries", params={"pattern": "("}).status_code == 400


def test_stats_health_and_rebalance(client, context):
    for index in range(15):
        key = f"entry:{index:02d}"
        context.cache.set(key, make_summary(key, minutes=index))

    stats = client.get(f"{API}/summaries/stats").json()
    assert stats["total_summaries"] == 15
    assert stats["total_summary_words"] == 900

    health = client.get(f"{API}/summaries/health").json()
    assert health["healthy"] is False
    assert health["summaries_by_kind"] == {"entry": 15}

    rebalance = client.post(f"{API}/summaries/rebalance").json()
    assert rebalance["action"] == "meta-created"
    assert rebalance["batches"][0]["meta_key"] == "entry-meta"
    assert rebalance["batches"][0]["ok"] is True

    metas = client.get(f"{API}/summaries", params={"prefix": "entry-meta"}).json()["summaries"]
    assert metas["entry-meta"]["type"] == "meta-summary"
    assert metas["entry-meta"]["source_count"] == 10


def test_chronicle_backfill_and_parts(client, journal_log):
    for index in range(45):
        journal_log.append_entry(make_text(5, token=f"e{index + 1}w"), entry_id=f"e{index + 1}")

    backfill = client.post(f"{API}/chronicle/backfill").json()
    assert backfill["closed_parts"] is True
    assert backfill["latest_closed_part_index"] == 2

    overview = client.get(f"{API}/chronicle").json()
    assert overview["latest_closed_part_index"] == 2
    assert overview["open_entry_count"] == 5
    assert [part["index"] for part in overview["parts"]] == [1, 2]
    assert overview["so_far_summary"]
    assert overview["recent_summary"]

    part = client.get(f"{API}/chronicle/parts/2").json()
    assert part["member_entry_ids"][0] == "e21"
    assert len(part["entries"]) == 20

    assert client.get(f"{API}/chronicle/parts/3").status_code == 404
    assert client.get(f"{API}/chronicle/parts/0").status_code == 404


def test_regenerate_recent_summary(client, journal_log):
    journal_log.append_entry("A quiet day at the lighthouse.", entry_id="e1")

    body = client.post(f"{API}/chronicle/recent").json()

    assert body["ok"] is True
    assert body["recent_summary"]


def test_storage_failure_maps_to_503(app, client):
    offline = JournalContext.from_stores(OfflineStore(), InMemoryKeyValueStore())
    app.dependency_overrides[runtime.get_journal_context] = lambda: offline

    response = client.get(f"{API}/summaries/stats")

    assert response.status_code == 503
    assert response.json() == {"ok": False, "error": "Storage unavailable"}
