"""Per-item summary orchestration and cache consolidation.

``SummaryManager.process`` moves one ``(kind, id)`` pair through
NoSummary -> Cached -> Stale -> Cached. A successful write is followed by
``rebalance``, which folds full batches of old summaries into meta-summaries
once the cache outgrows its word budget.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Union

from ...logging_config import logger
from ...utils.text import is_blank, word_count
from ..storage import StorageFailure
from .cache import CacheStats, SummaryCache
from .engine import SummaryEngine, SummaryLimits
from .fingerprint import fingerprint
from .kinds import ContentKind, SummaryKey
from .records import MetaSummary, Summary

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..context import JournalContext
    from ..journal import Entry


class ProcessStatus(str, Enum):
    UNCHANGED = "unchanged"
    CREATED = "created"
    UPDATED = "updated"
    REJECTED = "rejected"
    FAILED = "failed"


class RejectReason(str, Enum):
    EMPTY = "empty"
    TOO_SHORT = "too-short"


@dataclass(frozen=True)
class BatchOutcome:
    kind: str
    keys: List[str]
    meta_key: Optional[str] = None
    ok: bool = False
    reason: Optional[str] = None


@dataclass(frozen=True)
class RebalanceResult:
    action: str
    reason: Optional[str] = None
    batches: List[BatchOutcome] = field(default_factory=list)

    @property
    def meta_created(self) -> int:
        return sum(1 for batch in self.batches if batch.ok)


@dataclass(frozen=True)
class ProcessResult:
    status: ProcessStatus
    key: str
    summary: Optional[Summary] = None
    reason: Optional[str] = None
    rebalance: Optional[RebalanceResult] = None

    @property
    def ok(self) -> bool:
        return self.status in (ProcessStatus.UNCHANGED, ProcessStatus.CREATED, ProcessStatus.UPDATED)


@dataclass(frozen=True)
class ContentItem:
    kind: Union[ContentKind, str]
    item_id: str
    content: str
    force: bool = False


@dataclass(frozen=True)
class ContentView:
    """One item prepared for downstream consumption: full text, summary or meta-summary."""

    key: str
    type: str
    content: str
    created_at: Optional[datetime] = None
    original_word_count: Optional[int] = None
    source_count: Optional[int] = None


@dataclass(frozen=True)
class SummaryOverview:
    stats: CacheStats
    summaries_by_kind: Dict[str, int]
    within_target_length: bool
    needs_optimization: bool
    target_total_words: int


@dataclass(frozen=True)
class SummaryHealth:
    healthy: bool
    issues: List[str]
    overview: SummaryOverview

    @property
    def stats(self) -> CacheStats:
        return self.overview.stats


class SummaryManager:
    def __init__(self, engine: SummaryEngine, limits: Optional[SummaryLimits] = None) -> None:
        self._engine = engine
        self._limits = limits or engine.limits

    @property
    def limits(self) -> SummaryLimits:
        return self._limits

    # ------------------------------------------------------------------
    # Single item
    # ------------------------------------------------------------------
    async def process(
        self,
        context: "JournalContext",
        kind: Union[ContentKind, str],
        item_id: str,
        content: str,
        force: bool = False,
    ) -> ProcessResult:
        summary_key = SummaryKey.build(kind, item_id)
        key = str(summary_key)
        cache = context.cache

        try:
            existing = cache.get(key)
        except StorageFailure as exc:
            logger.error("summary lookup failed", extra={"key": key, "error": str(exc)})
            return ProcessResult(status=ProcessStatus.FAILED, key=key, reason="storage-failure")

        if existing is not None and not force and existing.content_fingerprint == fingerprint(content or ""):
            return ProcessResult(status=ProcessStatus.UNCHANGED, key=key, summary=existing)

        if is_blank(content):
            return ProcessResult(status=ProcessStatus.REJECTED, key=key, reason=RejectReason.EMPTY.value)

        if word_count(content) < self._limits.min_words_for_summary:
            logger.debug(
                "content too short for summary",
                extra={"key": key, "words": word_count(content)},
            )
            return ProcessResult(
                status=ProcessStatus.REJECTED, key=key, reason=RejectReason.TOO_SHORT.value
            )

        result = await self._engine.attempt(summary_key, content)
        if not result.ok:
            return ProcessResult(
                status=ProcessStatus.FAILED,
                key=key,
                reason=result.reason.value if result.reason else None,
            )

        try:
            cache.set(key, result.value)
        except StorageFailure as exc:
            logger.error("summary write failed", extra={"key": key, "error": str(exc)})
            return ProcessResult(status=ProcessStatus.FAILED, key=key, reason="storage-failure")

        status = ProcessStatus.UPDATED if existing is not None else ProcessStatus.CREATED
        logger.info("summary stored", extra={"key": key, "status": status.value})
        rebalance = await self.rebalance(context)
        return ProcessResult(status=status, key=key, summary=result.value, rebalance=rebalance)

    async def process_batch(
        self, context: "JournalContext", items: Iterable[ContentItem]
    ) -> List[ProcessResult]:
        results: List[ProcessResult] = []
        for item in items:
            results.append(
                await self.process(context, item.kind, item.item_id, item.content, item.force)
            )
        return results

    async def auto_process(
        self, context: "JournalContext", kind: Union[ContentKind, str], entries: Sequence["Entry"]
    ) -> List[ProcessResult]:
        """Summarize older entries, leaving the newest few in full."""
        newest_first = sorted(entries, key=lambda entry: entry.created_at, reverse=True)
        candidates = newest_first[self._limits.recent_entries_to_preserve :]
        results: List[ProcessResult] = []
        for entry in candidates:
            if word_count(entry.content) < self._limits.min_words_for_summary:
                continue
            result = await self.process(context, kind, entry.id, entry.content)
            if result.ok:
                results.append(result)
        return results

    # ------------------------------------------------------------------
    # Consolidation
    # ------------------------------------------------------------------
    async def rebalance(self, context: "JournalContext") -> RebalanceResult:
        try:
            stats = context.cache.stats()
        except StorageFailure as exc:
            logger.error("rebalance skipped; stats unavailable", extra={"error": str(exc)})
            return RebalanceResult(action="none", reason="storage-failure")

        if stats.total_summary_words <= self._limits.target_total_words:
            return RebalanceResult(action="none", reason="within-target")
        if stats.total_summaries < self._limits.max_summaries_before_meta:
            return RebalanceResult(action="none", reason="below-summary-count")
        return await self._consolidate(context)

    async def _consolidate(self, context: "JournalContext") -> RebalanceResult:
        cache = context.cache
        trigger = self._limits.meta_trigger_count
        try:
            groups = cache.get_by_kind()
        except StorageFailure as exc:
            logger.error("consolidation skipped; cache unreadable", extra={"error": str(exc)})
            return RebalanceResult(action="none", reason="storage-failure")

        outcomes: List[BatchOutcome] = []
        for kind in sorted(groups):
            group = groups[kind]
            if len(group) < trigger:
                continue
            ordered = sorted(group, key=lambda item: (item.created_at, item.key))
            for start in range(0, len(ordered), trigger):
                batch = ordered[start : start + trigger]
                if len(batch) < trigger:
                    continue
                outcomes.append(await self._consolidate_batch(cache, kind, batch))

        logger.info(
            "summary consolidation finished",
            extra={"batches": len(outcomes), "created": sum(1 for item in outcomes if item.ok)},
        )
        return RebalanceResult(action="meta-created", batches=outcomes)

    async def _consolidate_batch(
        self, cache: SummaryCache, kind: str, batch: List[Summary]
    ) -> BatchOutcome:
        keys = [item.key for item in batch]
        try:
            meta_key = cache.next_meta_key(kind)
        except StorageFailure as exc:
            logger.warning("meta key allocation failed", extra={"kind": kind, "error": str(exc)})
            return BatchOutcome(kind=kind, keys=keys, reason="storage-failure")

        result = await self._engine.attempt_many(batch, meta_key, kind)
        if not result.ok:
            return BatchOutcome(
                kind=kind,
                keys=keys,
                meta_key=meta_key,
                reason=result.reason.value if result.reason else None,
            )

        meta: MetaSummary = result.value
        try:
            cache.replace_with_meta(meta, keys)
        except StorageFailure as exc:
            logger.warning(
                "meta-summary write failed",
                extra={"kind": kind, "meta_key": meta_key, "error": str(exc)},
            )
            return BatchOutcome(kind=kind, keys=keys, meta_key=meta_key, reason="storage-failure")

        logger.info(
            "meta-summary created",
            extra={"kind": kind, "meta_key": meta_key, "sources": meta.source_count},
        )
        return BatchOutcome(kind=kind, keys=keys, meta_key=meta_key, ok=True)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------
    def formatted_content(
        self,
        context: "JournalContext",
        kind: Union[ContentKind, str],
        entries: Sequence["Entry"],
        max_items: int = 10,
    ) -> List[ContentView]:
        """Newest entries in full, older ones summarized when cached, then meta-summaries."""
        content_kind = ContentKind.coerce(kind)
        cache = context.cache
        newest_first = sorted(entries, key=lambda entry: entry.created_at, reverse=True)
        preserve = self._limits.recent_entries_to_preserve

        views: List[ContentView] = []
        for position, entry in enumerate(newest_first):
            key = str(SummaryKey.build(content_kind, entry.id))
            summary = cache.get(key) if position >= preserve else None
            if summary is not None and not summary.is_meta:
                views.append(
                    ContentView(
                        key=key,
                        type="summary",
                        content=summary.content,
                        created_at=entry.created_at,
                        original_word_count=summary.original_word_count,
                    )
                )
            else:
                views.append(
                    ContentView(key=key, type="full", content=entry.content, created_at=entry.created_at)
                )

        prefix = f"{content_kind.value}-meta"
        metas = sorted(cache.all_meta_summaries().items(), key=lambda item: (item[1].created_at, item[0]))
        for key, meta in metas:
            if key.startswith(prefix):
                views.append(
                    ContentView(
                        key=key,
                        type="meta-summary",
                        content=meta.content,
                        created_at=meta.created_at,
                        source_count=meta.source_count,
                    )
                )
        return views[:max_items]

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------
    def overview(self, context: "JournalContext") -> SummaryOverview:
        stats = context.cache.stats()
        by_kind = {kind: len(items) for kind, items in context.cache.get_by_kind().items()}
        within_target = stats.total_summary_words <= self._limits.target_total_words
        return SummaryOverview(
            stats=stats,
            summaries_by_kind=by_kind,
            within_target_length=within_target,
            needs_optimization=(
                not within_target or stats.total_summaries > self._limits.max_summaries_before_meta
            ),
            target_total_words=self._limits.target_total_words,
        )

    def health(self, context: "JournalContext") -> SummaryHealth:
        overview = self.overview(context)
        stats = overview.stats

        issues: List[str] = []
        if not overview.within_target_length:
            issues.append(
                f"Total summary length ({stats.total_summary_words}) exceeds target "
                f"({overview.target_total_words})"
            )
        if overview.needs_optimization:
            issues.append(
                f"Too many individual summaries ({stats.total_summaries}), consider meta-summarization"
            )
        # an empty cache has no ratio to judge
        if stats.total_summaries and stats.average_compression_ratio < 0.1:
            issues.append("Poor compression efficiency, summaries may be too long")

        return SummaryHealth(healthy=not issues, issues=issues, overview=overview)

    async def optimize(self, context: "JournalContext") -> RebalanceResult:
        """Consolidate regardless of the summary-count threshold when the cache is unhealthy."""
        if self.health(context).healthy:
            return RebalanceResult(action="none", reason="healthy")
        return await self._consolidate(context)


__all__ = [
    "BatchOutcome",
    "ContentItem",
    "ContentView",
    "ProcessResult",
    "ProcessStatus",
    "RebalanceResult",
    "RejectReason",
    "SummaryHealth",
    "SummaryManager",
    "SummaryOverview",
]
