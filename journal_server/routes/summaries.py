from __future__ import annotations

import re
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..models import (
    HealthReportResponse,
    ProcessRequest,
    ProcessResponse,
    RebalancePayload,
    StatsResponse,
    SummaryListResponse,
    SummaryPayload,
)
from ..services.context import JournalContext
from ..services.runtime import get_journal_context, get_summary_manager
from ..services.summarization import (
    ContentKind,
    MetaSummary,
    ProcessResult,
    Summary,
    SummaryKey,
    SummaryManager,
)

router = APIRouter(prefix="/summaries", tags=["summaries"])


def _summary_payload(record: Union[Summary, MetaSummary]) -> SummaryPayload:
    return SummaryPayload.model_validate(record.model_dump())


def _process_response(result: ProcessResult) -> ProcessResponse:
    return ProcessResponse(
        ok=result.ok,
        status=result.status.value,
        key=result.key,
        reason=result.reason,
        summary=_summary_payload(result.summary) if result.summary else None,
        rebalance=RebalancePayload.model_validate(result.rebalance) if result.rebalance else None,
    )


def _parse_kind(kind: str) -> ContentKind:
    try:
        return ContentKind.coerce(kind)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("", response_model=SummaryListResponse)
# List cached summaries, optionally narrowed by key prefix or regex pattern
def list_summaries(
    prefix: Optional[str] = Query(default=None),
    pattern: Optional[str] = Query(default=None),
    context: JournalContext = Depends(get_journal_context),
) -> SummaryListResponse:
    if pattern:
        try:
            records = context.cache.get_by_pattern(pattern)
        except re.error as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"invalid pattern: {exc}")
    else:
        records = context.cache.get_by_prefix(prefix or "")
    return SummaryListResponse(summaries={key: _summary_payload(record) for key, record in records.items()})


@router.get("/stats", response_model=StatsResponse)
def summary_stats(context: JournalContext = Depends(get_journal_context)) -> StatsResponse:
    return StatsResponse.model_validate(context.cache.stats())


@router.get("/health", response_model=HealthReportResponse)
def summary_health(
    context: JournalContext = Depends(get_journal_context),
    manager: SummaryManager = Depends(get_summary_manager),
) -> HealthReportResponse:
    report = manager.health(context)
    overview = report.overview
    return HealthReportResponse(
        healthy=report.healthy,
        issues=report.issues,
        stats=StatsResponse.model_validate(overview.stats),
        summaries_by_kind=overview.summaries_by_kind,
        within_target_length=overview.within_target_length,
        needs_optimization=overview.needs_optimization,
        target_total_words=overview.target_total_words,
    )


@router.post("/rebalance", response_model=RebalancePayload)
async def rebalance(
    context: JournalContext = Depends(get_journal_context),
    manager: SummaryManager = Depends(get_summary_manager),
) -> RebalancePayload:
    return RebalancePayload.model_validate(await manager.rebalance(context))


@router.post("/optimize", response_model=RebalancePayload)
async def optimize(
    context: JournalContext = Depends(get_journal_context),
    manager: SummaryManager = Depends(get_summary_manager),
) -> RebalancePayload:
    return RebalancePayload.model_validate(await manager.optimize(context))


@router.post("/{kind}/{item_id}", response_model=ProcessResponse)
# Summarize one content item, reusing the cached summary when the content is unchanged
async def process_item(
    kind: str,
    item_id: str,
    payload: ProcessRequest,
    context: JournalContext = Depends(get_journal_context),
    manager: SummaryManager = Depends(get_summary_manager),
) -> ProcessResponse:
    result = await manager.process(context, _parse_kind(kind), item_id, payload.content, payload.force)
    return _process_response(result)


@router.get("/{kind}/{item_id}", response_model=SummaryPayload)
def get_item_summary(
    kind: str,
    item_id: str,
    context: JournalContext = Depends(get_journal_context),
) -> SummaryPayload:
    key = str(SummaryKey.build(_parse_kind(kind), item_id))
    record = context.cache.get(key)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"no summary for {key}")
    return _summary_payload(record)


__all__ = ["router"]
