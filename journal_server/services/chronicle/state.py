from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ChronicleState:
    """Rollup progress for one journal.

    ``latest_closed_part_index`` only ever moves forward; it records how much
    of the entry log has been rolled up into parts.
    """

    latest_closed_part_index: int = 0
    so_far_summary: str = ""
    recent_summary: str = ""

    def advance_to(self, index: int) -> None:
        if index > self.latest_closed_part_index:
            self.latest_closed_part_index = index


@dataclass(frozen=True)
class Part:
    index: int
    title: Optional[str] = None
    summary: Optional[str] = None
    member_entry_ids: List[str] = field(default_factory=list)

    @property
    def display_title(self) -> str:
        return self.title or f"Part {self.index}"

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.summary and self.member_entry_ids)


__all__ = ["ChronicleState", "Part"]
