"""
Tests for the on-disk journal entry log.
"""

from datetime import datetime, timezone

import pytest

from journal_server.services.journal import JournalLog


@pytest.fixture
def log(tmp_path):
    return JournalLog(tmp_path / "logs" / "entries.log")


def test_entries_are_listed_in_append_order(log):
    first = log.append_entry("first entry")
    second = log.append_entry("second entry")

    entries = log.list_entries()

    assert [entry.id for entry in entries] == [first.id, second.id]
    assert [entry.content for entry in entries] == ["first entry", "second entry"]


def test_empty_log(log):
    assert log.list_entries() == []
    assert log.get_entry("missing") is None


def test_multiline_and_markup_content_round_trips(log):
    content = 'Line one\nLine "two" with <tags> & a back\\slash\r\nend'

    entry = log.append_entry(content, entry_id="e1")

    stored = log.get_entry("e1")
    assert stored is not None
    assert stored.content == content.replace("\r\n", "\n")
    assert entry.id == "e1"


def test_explicit_timestamp_is_preserved(log):
    created = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    log.append_entry("dated", entry_id="e1", created_at=created)

    assert log.get_entry("e1").created_at == created


def test_unparseable_lines_are_skipped(log, tmp_path):
    log.append_entry("kept", entry_id="e1")
    path = tmp_path / "logs" / "entries.log"
    with path.open("a", encoding="utf-8") as handle:
        handle.write("garbage line\n<other>not an entry</other>\n")
    log.append_entry("also kept", entry_id="e2")

    assert [entry.id for entry in log.list_entries()] == ["e1", "e2"]


def test_append_listener_is_notified(log):
    seen = []
    log.set_append_listener(seen.append)

    entry = log.append_entry("hello")

    assert seen == [entry]


def test_listener_errors_do_not_block_appends(log):
    def explode(_entry):
        raise RuntimeError("listener broke")

    log.set_append_listener(explode)
    log.append_entry("still written", entry_id="e1")

    assert log.get_entry("e1") is not None


def test_clear(log):
    log.append_entry("gone")
    log.clear()
    assert log.list_entries() == []
    log.append_entry("fresh", entry_id="e2")
    assert [entry.id for entry in log.list_entries()] == ["e2"]


def test_hand_written_lines_accept_zulu_timestamps(log, tmp_path):
    path = tmp_path / "logs" / "entries.log"
    path.write_text(
        '<entry id="e1" timestamp="2024-05-01T12:30:00Z">imported</entry>\n'
        '<entry id="e2" timestamp="not a date">undated</entry>\n',
        encoding="utf-8",
    )

    first, second = log.list_entries()

    assert first.created_at == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    assert second.created_at == datetime.fromtimestamp(0, tz=timezone.utc)
