from __future__ import annotations

import json
from typing import List, Optional, Sequence

from ...logging_config import logger
from ..storage import KeyValueStore
from .keys import (
    PARTS_LATEST_KEY,
    RECENT_SUMMARY_KEY,
    SO_FAR_LATEST_KEY,
    part_entries_key,
    part_summary_key,
    part_title_key,
)
from .state import ChronicleState, Part


def _parse_index(raw: Optional[str]) -> int:
    try:
        parsed = int(str(raw if raw is not None else "0").strip())
    except ValueError:
        return 0
    return parsed if parsed > 0 else 0


class ChronicleStore:
    """Reads and writes chronicle records under the fixed ``journal:*`` keys."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    # ------------------------------------------------------------------
    # Chronicle state
    # ------------------------------------------------------------------
    def load_state(self) -> ChronicleState:
        return ChronicleState(
            latest_closed_part_index=_parse_index(self._store.get(PARTS_LATEST_KEY)),
            so_far_summary=self._store.get(SO_FAR_LATEST_KEY) or "",
            recent_summary=self._store.get(RECENT_SUMMARY_KEY) or "",
        )

    def so_far_summary(self) -> str:
        return self._store.get(SO_FAR_LATEST_KEY) or ""

    def save_so_far_summary(self, summary: str) -> None:
        self._store.set(SO_FAR_LATEST_KEY, summary or "")

    def recent_summary(self) -> str:
        return self._store.get(RECENT_SUMMARY_KEY) or ""

    def save_recent_summary(self, summary: str) -> None:
        self._store.set(RECENT_SUMMARY_KEY, summary or "")

    def latest_closed_part_index(self) -> int:
        return _parse_index(self._store.get(PARTS_LATEST_KEY))

    def save_latest_closed_part_index(self, index: int) -> None:
        if index > self.latest_closed_part_index():
            self._store.set(PARTS_LATEST_KEY, str(int(index)))

    # ------------------------------------------------------------------
    # Parts
    # ------------------------------------------------------------------
    def part_entries(self, part_index: int) -> List[str]:
        raw = self._store.get(part_entries_key(part_index))
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("part membership unreadable", extra={"part": part_index})
            return []
        if not isinstance(data, list):
            return []
        return [str(item) for item in data]

    def set_part_entries(self, part_index: int, entry_ids: Sequence[str]) -> bool:
        """Record part membership once; later calls leave the first value in place."""
        if self.part_entries(part_index):
            return False
        self._store.set(part_entries_key(part_index), json.dumps([str(item) for item in entry_ids]))
        return True

    def part_summary(self, part_index: int) -> str:
        return self._store.get(part_summary_key(part_index)) or ""

    def set_part_summary(self, part_index: int, summary: str) -> None:
        self._store.set(part_summary_key(part_index), summary)

    def part_title(self, part_index: int) -> str:
        return self._store.get(part_title_key(part_index)) or ""

    def set_part_title(self, part_index: int, title: str) -> None:
        self._store.set(part_title_key(part_index), title)

    def get_part(self, part_index: int) -> Optional[Part]:
        entries = self.part_entries(part_index)
        summary = self.part_summary(part_index)
        title = self.part_title(part_index)
        if not (entries or summary or title):
            return None
        return Part(
            index=part_index,
            title=title or None,
            summary=summary or None,
            member_entry_ids=entries,
        )

    def list_parts(self, up_to: Optional[int] = None) -> List[Part]:
        last = self.latest_closed_part_index() if up_to is None else up_to
        parts: List[Part] = []
        for index in range(1, last + 1):
            part = self.get_part(index)
            parts.append(part if part is not None else Part(index=index))
        return parts


__all__ = ["ChronicleStore"]
