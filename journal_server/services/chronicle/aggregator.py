"""Hierarchical rollup of the journal into parts.

Every ``part_size`` entries form a closed part with its own summary and
title. A "so far" summary is rebuilt from the part summaries whenever a part
closes, and a "recent" summary covers the still-open remainder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

from ...logging_config import logger
from ..summarization.engine import SummaryEngine, SummaryLimits
from ..summarization.kinds import ContentKind, SummaryKey
from .keys import RECENT_SUMMARY_KEY, SO_FAR_LATEST_KEY
from .partition import part_window, partition
from .state import ChronicleState

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..context import JournalContext
    from ..journal import Entry


def _join_contents(entries: Sequence["Entry"]) -> str:
    return "\n\n".join(entry.content.strip() for entry in entries if entry.content and entry.content.strip())


@dataclass(frozen=True)
class BackfillResult:
    repaired_parts: List[int]
    closed_parts: bool
    so_far_updated: bool
    recent_updated: bool
    latest_closed_part_index: int

    @property
    def changed(self) -> bool:
        return bool(self.repaired_parts) or self.closed_parts or self.so_far_updated or self.recent_updated


class ChronicleAggregator:
    def __init__(self, engine: SummaryEngine, limits: Optional[SummaryLimits] = None) -> None:
        self._engine = engine
        self._limits = limits or engine.limits

    def _part_size(self, part_size: Optional[int]) -> int:
        size = part_size or self._limits.part_size
        if size <= 0:
            raise ValueError("part_size must be positive")
        return size

    def _sync_from_store(self, context: "JournalContext", state: ChronicleState) -> None:
        stored = context.chronicle.load_state()
        state.advance_to(stored.latest_closed_part_index)
        state.so_far_summary = state.so_far_summary or stored.so_far_summary
        state.recent_summary = state.recent_summary or stored.recent_summary

    async def _fill_part(
        self, context: "JournalContext", entries: Sequence["Entry"], index: int, part_size: int
    ) -> bool:
        """Populate whatever is missing for part ``index``; returns True if anything was written."""
        chronicle = context.chronicle
        window = part_window(entries, index, part_size)
        wrote = chronicle.set_part_entries(index, [entry.id for entry in window])

        text = _join_contents(window)
        if not text:
            logger.debug("part has no text to summarize", extra={"part": index})
            return wrote

        if not chronicle.part_summary(index):
            summary = await self._engine.summarize(
                SummaryKey(ContentKind.JOURNAL, f"part:{index}"),
                text,
                self._limits.part_summary_target_words,
            )
            if summary is not None:
                chronicle.set_part_summary(index, summary.content)
                wrote = True
            else:
                logger.warning("part summary unavailable; will retry on backfill", extra={"part": index})

        if not chronicle.part_title(index):
            title = await self._engine.title(text, label=f"journal:part:{index}:title")
            if title:
                chronicle.set_part_title(index, title)
                wrote = True
        return wrote

    async def maybe_close_parts(
        self,
        context: "JournalContext",
        state: ChronicleState,
        entries: Sequence["Entry"],
        part_size: Optional[int] = None,
    ) -> bool:
        size = self._part_size(part_size)
        self._sync_from_store(context, state)
        expected = len(entries) // size
        if expected <= state.latest_closed_part_index:
            return False

        first = state.latest_closed_part_index + 1
        for index in range(first, expected + 1):
            await self._fill_part(context, entries, index, size)
            state.advance_to(index)
            context.chronicle.save_latest_closed_part_index(index)
            logger.info("journal part closed", extra={"part": index, "journal": context.journal_id})

        await self._recompute_so_far(context, state, expected)
        return True

    async def _recompute_so_far(self, context: "JournalContext", state: ChronicleState, last: int) -> bool:
        summaries = [context.chronicle.part_summary(index) for index in range(1, last + 1)]
        combined = "\n\n".join(text for text in summaries if text)
        if not combined:
            return False
        summary = await self._engine.summarize(
            SO_FAR_LATEST_KEY, combined, self._limits.part_summary_target_words, kind=ContentKind.JOURNAL
        )
        if summary is None:
            return False
        state.so_far_summary = summary.content
        context.chronicle.save_so_far_summary(summary.content)
        return True

    async def recompute_recent_summary(
        self,
        context: "JournalContext",
        state: ChronicleState,
        entries: Sequence["Entry"],
        part_size: Optional[int] = None,
    ) -> bool:
        """Rebuild the summary of the open part; returns True if the stored value changed.

        Only ``journal:recent-summary`` is written, so a stale ``state`` never
        clobbers the stored "so far" summary or part pointer.
        """
        chronicle = context.chronicle
        open_part = partition(entries, self._part_size(part_size)).open_part
        text = _join_contents(open_part)
        if not text:
            if not state.recent_summary and not chronicle.recent_summary():
                return False
            state.recent_summary = ""
            chronicle.save_recent_summary("")
            return True

        summary = await self._engine.summarize(
            RECENT_SUMMARY_KEY, text, self._limits.part_summary_target_words, kind=ContentKind.JOURNAL
        )
        if summary is None:
            return False
        state.recent_summary = summary.content
        chronicle.save_recent_summary(summary.content)
        return True

    async def backfill(
        self,
        context: "JournalContext",
        state: ChronicleState,
        entries: Sequence["Entry"],
        part_size: Optional[int] = None,
    ) -> BackfillResult:
        """Catch up on parts that should exist and repair ones left incomplete."""
        size = self._part_size(part_size)
        self._sync_from_store(context, state)
        expected = len(entries) // size
        chronicle = context.chronicle

        repaired: List[int] = []
        for index in range(1, min(state.latest_closed_part_index, expected) + 1):
            part = chronicle.get_part(index)
            if part is not None and part.is_complete:
                continue
            if await self._fill_part(context, entries, index, size):
                repaired.append(index)

        closed = await self.maybe_close_parts(context, state, entries, size)

        so_far_updated = False
        recent_updated = False
        if expected > 0:
            # closing parts already rebuilt "so far" over every part, repaired ones included
            if (repaired and not closed) or not state.so_far_summary:
                so_far_updated = await self._recompute_so_far(context, state, expected)
            if not state.recent_summary:
                recent_updated = await self.recompute_recent_summary(context, state, entries, size)

        if repaired or closed:
            logger.info(
                "chronicle backfill finished",
                extra={"repaired": repaired, "latest": state.latest_closed_part_index},
            )
        return BackfillResult(
            repaired_parts=repaired,
            closed_parts=closed,
            so_far_updated=so_far_updated,
            recent_updated=recent_updated,
            latest_closed_part_index=state.latest_closed_part_index,
        )


__all__ = ["BackfillResult", "ChronicleAggregator"]
