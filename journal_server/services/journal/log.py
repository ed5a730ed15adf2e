from __future__ import annotations

import re
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape, unescape
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Protocol, Tuple

from dateutil import parser as date_parser

from ...logging_config import logger

ENTRY_TAG = "entry"


@dataclass(frozen=True)
class Entry:
    """Immutable journal entry."""

    id: str
    content: str
    created_at: datetime


class EntryLog(Protocol):
    def list_entries(self) -> List[Entry]:  # pragma: no cover - typing protocol
        ...


def _encode_payload(payload: str) -> str:
    normalized = payload.replace("\r\n", "\n").replace("\r", "\n")
    collapsed = normalized.replace("\\", "\\\\").replace("\n", "\\n")
    return escape(collapsed, quote=False)


def _decode_payload(payload: str) -> str:
    raw = unescape(payload)
    out: List[str] = []
    index = 0
    while index < len(raw):
        char = raw[index]
        if char == "\\" and index + 1 < len(raw):
            following = raw[index + 1]
            out.append("\n" if following == "n" else following)
            index += 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


def _format_line(entry: Entry) -> str:
    encoded = _encode_payload(entry.content)
    entry_id = escape(entry.id, quote=True)
    timestamp = entry.created_at.isoformat()
    return f"<{ENTRY_TAG} id=\"{entry_id}\" timestamp=\"{timestamp}\">{encoded}</{ENTRY_TAG}>\n"


_ATTR_PATTERN = re.compile(r"(\w+)\s*=\s*\"([^\"]*)\"")


def _parse_timestamp(raw: str) -> datetime:
    """Parse an ISO timestamp, defaulting to UTC when timezone is absent."""
    try:
        parsed = date_parser.isoparse(raw)
    except (TypeError, ValueError):
        return datetime.fromtimestamp(0, tz=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class JournalLog:
    """Append-only journal entry log persisted to disk, read back oldest-first."""

    def __init__(self, path: Path, on_append: Optional[Callable[[Entry], None]] = None):
        self._path = path
        self._on_append = on_append
        self._lock = threading.Lock()
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:  # pragma: no cover - defensive
            logger.warning("journal log directory creation failed", extra={"error": str(exc)})

    def set_append_listener(self, listener: Optional[Callable[[Entry], None]]) -> None:
        self._on_append = listener

    def append_entry(
        self,
        content: str,
        *,
        entry_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Entry:
        entry = Entry(
            id=(entry_id or uuid.uuid4().hex),
            content=str(content),
            created_at=created_at or datetime.now(timezone.utc),
        )
        line = _format_line(entry)
        with self._lock:
            try:
                with self._path.open("a", encoding="utf-8") as handle:
                    handle.write(line)
            except OSError as exc:
                logger.error(
                    "journal log append failed",
                    extra={"error": str(exc), "path": str(self._path)},
                )
                raise
        self._notify(entry)
        return entry

    def _notify(self, entry: Entry) -> None:
        if self._on_append is None:
            return
        try:
            self._on_append(entry)
        except Exception as exc:  # pragma: no cover - listener errors never block appends
            logger.warning("journal append listener failed", extra={"error": str(exc)})

    def _parse_line(self, line: str) -> Optional[Tuple[Dict[str, str], str]]:
        stripped = line.strip()
        if not stripped.startswith("<") or "</" not in stripped:
            return None
        open_end = stripped.find(">")
        if open_end == -1:
            return None
        open_tag_content = stripped[1:open_end]
        if " " in open_tag_content:
            tag, attr_string = open_tag_content.split(" ", 1)
        else:
            tag, attr_string = open_tag_content, ""
        if tag != ENTRY_TAG:
            return None
        close_start = stripped.rfind("</")
        close_end = stripped.rfind(">")
        if close_start == -1 or close_end == -1:
            return None
        if stripped[close_start + 2 : close_end] != tag:
            return None
        attributes = {
            match.group(1): unescape(match.group(2)) for match in _ATTR_PATTERN.finditer(attr_string)
        }
        return attributes, _decode_payload(stripped[open_end + 1 : close_start])

    def iter_entries(self) -> Iterator[Entry]:
        with self._lock:
            try:
                lines = self._path.read_text(encoding="utf-8").splitlines()
            except FileNotFoundError:
                lines = []
            except OSError as exc:
                logger.error(
                    "journal log read failed", extra={"error": str(exc), "path": str(self._path)}
                )
                raise
        for position, line in enumerate(lines):
            parsed = self._parse_line(line)
            if parsed is None:
                continue
            attributes, payload = parsed
            yield Entry(
                id=attributes.get("id") or f"line-{position}",
                content=payload,
                created_at=_parse_timestamp(attributes.get("timestamp", "")),
            )

    def list_entries(self) -> List[Entry]:
        """Snapshot of all entries, oldest first (append order)."""
        return list(self.iter_entries())

    def get_entry(self, entry_id: str) -> Optional[Entry]:
        for entry in self.iter_entries():
            if entry.id == entry_id:
                return entry
        return None

    def clear(self) -> None:
        with self._lock:
            try:
                if self._path.exists():
                    self._path.unlink()
            except OSError as exc:  # pragma: no cover - defensive
                logger.warning(
                    "journal log clear failed", extra={"error": str(exc), "path": str(self._path)}
                )
            finally:
                self._ensure_directory()


__all__ = ["Entry", "EntryLog", "JournalLog"]
