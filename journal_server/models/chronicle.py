from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .entries import EntryPayload


class PartPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    index: int
    title: Optional[str] = None
    summary: Optional[str] = None
    member_entry_ids: List[str] = Field(default_factory=list)


class PartDetailResponse(PartPayload):
    entries: List[EntryPayload] = Field(default_factory=list)


class ChronicleResponse(BaseModel):
    latest_closed_part_index: int
    so_far_summary: str
    recent_summary: str
    open_entry_count: int
    parts: List[PartPayload] = Field(default_factory=list)


class BackfillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    repaired_parts: List[int]
    closed_parts: bool
    so_far_updated: bool
    recent_updated: bool
    latest_closed_part_index: int


class RecentSummaryResponse(BaseModel):
    ok: bool
    recent_summary: str
