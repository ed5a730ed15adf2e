from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntryCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: str = Field(..., min_length=1)
    id: Optional[str] = None


class EntryPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content: str
    created_at: datetime


class EntryListResponse(BaseModel):
    entries: List[EntryPayload] = Field(default_factory=list)
    total: int = 0
