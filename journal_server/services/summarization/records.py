from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Summary(BaseModel):
    """Condensed text for one content item plus the metadata used to judge staleness."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["summary"] = "summary"
    key: str
    content: str
    original_word_count: int = Field(ge=0)
    summary_word_count: int = Field(ge=0)
    compression_ratio: float = Field(ge=0)
    content_fingerprint: str
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_meta(self) -> bool:
        return False


class MetaSummary(BaseModel):
    """Summary generated over a batch of summaries that it replaces in the cache."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["meta-summary"] = "meta-summary"
    key: str
    content: str
    original_word_count: int = Field(ge=0)
    summary_word_count: int = Field(ge=0)
    compression_ratio: float = Field(ge=0)
    content_fingerprint: str
    created_at: datetime = Field(default_factory=utc_now)
    included_keys: List[str] = Field(default_factory=list)
    source_count: int = Field(ge=0)

    @property
    def is_meta(self) -> bool:
        return True


AnySummary = Annotated[Union[Summary, MetaSummary], Field(discriminator="type")]

_RECORD_ADAPTER: TypeAdapter = TypeAdapter(AnySummary)


def dump_record(record: Union[Summary, MetaSummary]) -> str:
    return record.model_dump_json()


def load_record(raw: Optional[str]) -> Optional[Union[Summary, MetaSummary]]:
    if raw is None:
        return None
    return _RECORD_ADAPTER.validate_json(raw)


__all__ = [
    "AnySummary",
    "MetaSummary",
    "Summary",
    "dump_record",
    "load_record",
    "utc_now",
]
