from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..models import (
    BackfillResponse,
    ChronicleResponse,
    EntryPayload,
    PartDetailResponse,
    PartPayload,
    RecentSummaryResponse,
)
from ..services.chronicle import ChronicleAggregator, partition
from ..services.context import JournalContext
from ..services.journal import JournalLog
from ..services.runtime import (
    get_chronicle_aggregator,
    get_journal_context,
    get_journal_log,
    get_summary_limits,
)
from ..services.summarization import SummaryLimits

router = APIRouter(prefix="/chronicle", tags=["chronicle"])


@router.get("", response_model=ChronicleResponse)
# Return the rollup: so-far and recent summaries plus every closed part
def chronicle_overview(
    context: JournalContext = Depends(get_journal_context),
    log: JournalLog = Depends(get_journal_log),
    limits: SummaryLimits = Depends(get_summary_limits),
) -> ChronicleResponse:
    state = context.chronicle.load_state()
    entries = log.list_entries()
    return ChronicleResponse(
        latest_closed_part_index=state.latest_closed_part_index,
        so_far_summary=state.so_far_summary,
        recent_summary=state.recent_summary,
        open_entry_count=len(partition(entries, limits.part_size).open_part),
        parts=[PartPayload.model_validate(part) for part in context.chronicle.list_parts()],
    )


@router.get("/parts/{index}", response_model=PartDetailResponse)
def chronicle_part(
    index: int,
    context: JournalContext = Depends(get_journal_context),
    log: JournalLog = Depends(get_journal_log),
) -> PartDetailResponse:
    part = context.chronicle.get_part(index) if index > 0 else None
    if part is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"part {index} not found")
    by_id = {entry.id: entry for entry in log.list_entries()}
    members = [by_id[entry_id] for entry_id in part.member_entry_ids if entry_id in by_id]
    return PartDetailResponse(
        index=part.index,
        title=part.display_title,
        summary=part.summary,
        member_entry_ids=part.member_entry_ids,
        entries=[EntryPayload.model_validate(entry) for entry in members],
    )


@router.post("/backfill", response_model=BackfillResponse)
# Catch up on missing parts and repair any left incomplete by earlier failures
async def chronicle_backfill(
    context: JournalContext = Depends(get_journal_context),
    log: JournalLog = Depends(get_journal_log),
    aggregator: ChronicleAggregator = Depends(get_chronicle_aggregator),
) -> BackfillResponse:
    state = context.chronicle.load_state()
    result = await aggregator.backfill(context, state, log.list_entries())
    return BackfillResponse.model_validate(result)


@router.post("/recent", response_model=RecentSummaryResponse)
async def regenerate_recent(
    context: JournalContext = Depends(get_journal_context),
    log: JournalLog = Depends(get_journal_log),
    aggregator: ChronicleAggregator = Depends(get_chronicle_aggregator),
) -> RecentSummaryResponse:
    state = context.chronicle.load_state()
    ok = await aggregator.recompute_recent_summary(context, state, log.list_entries())
    return RecentSummaryResponse(ok=ok, recent_summary=state.recent_summary)


__all__ = ["router"]
