from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProcessRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: str = ""
    force: bool = False


class SummaryPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    key: str
    content: str
    original_word_count: int
    summary_word_count: int
    compression_ratio: float
    content_fingerprint: str
    created_at: datetime
    included_keys: Optional[List[str]] = None
    source_count: Optional[int] = None


class BatchOutcomePayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: str
    keys: List[str]
    meta_key: Optional[str] = None
    ok: bool
    reason: Optional[str] = None


class RebalancePayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    action: str
    reason: Optional[str] = None
    batches: List[BatchOutcomePayload] = Field(default_factory=list)


class ProcessResponse(BaseModel):
    ok: bool
    status: str
    key: str
    reason: Optional[str] = None
    summary: Optional[SummaryPayload] = None
    rebalance: Optional[RebalancePayload] = None


class SummaryListResponse(BaseModel):
    summaries: Dict[str, SummaryPayload] = Field(default_factory=dict)


class StatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_summaries: int
    total_meta_summaries: int
    total_summary_words: int
    total_original_words: int
    total_meta_summary_words: int
    average_compression_ratio: float
    storage_efficiency: float


class HealthReportResponse(BaseModel):
    healthy: bool
    issues: List[str]
    stats: StatsResponse
    summaries_by_kind: Dict[str, int]
    within_target_length: bool
    needs_optimization: bool
    target_total_words: int
