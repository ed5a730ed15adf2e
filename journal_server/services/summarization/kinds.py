from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, NamedTuple, Union

KEY_SEPARATOR = ":"
META_SUFFIX = "-meta"

# Fractions of the original word count used as summary targets.
COMPRESSION_MODERATE = 0.2
COMPRESSION_GENEROUS = 0.3


class ContentKind(str, Enum):
    """Closed set of content kinds that may be summarized."""

    ENTRY = "entry"
    CHARACTER = "character"
    JOURNAL = "journal"

    @classmethod
    def coerce(cls, value: Union["ContentKind", str]) -> "ContentKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(kind.value for kind in cls)
            raise ValueError(f"unknown content kind {value!r}; expected one of: {allowed}") from None


@dataclass(frozen=True)
class KindPolicy:
    ratio: float
    instructions: str
    meta_instructions: str


_POLICIES: Dict[ContentKind, KindPolicy] = {
    ContentKind.ENTRY: KindPolicy(
        ratio=COMPRESSION_MODERATE,
        instructions=(
            "Summarize this journal entry. Keep the key events, decisions and the "
            "people and places involved, in chronological order."
        ),
        meta_instructions=(
            "Combine these journal entry summaries into one account. Identify common "
            "themes and key developments, earliest first."
        ),
    ),
    ContentKind.CHARACTER: KindPolicy(
        ratio=COMPRESSION_GENEROUS,
        instructions=(
            "Summarize this character detail. Preserve names, traits, motivations "
            "and relationships."
        ),
        meta_instructions=(
            "Combine these character summaries into one profile. Keep stable traits "
            "and note how the character developed."
        ),
    ),
    ContentKind.JOURNAL: KindPolicy(
        ratio=COMPRESSION_MODERATE,
        instructions=(
            "Summarize this stretch of the journal as a narrative. Use past tense and "
            "third person, keep chronological order, and preserve important names, "
            "locations and plot points. Do not add commentary."
        ),
        meta_instructions=(
            "Combine these summaries of consecutive journal parts into one continuous "
            "narrative of the story so far."
        ),
    ),
}


def policy_for(kind: Union[ContentKind, str]) -> KindPolicy:
    return _POLICIES[ContentKind.coerce(kind)]


class SummaryKey(NamedTuple):
    """Cache key for a single summarized item, rendered as ``<kind>:<id>``."""

    kind: ContentKind
    item_id: str

    @classmethod
    def build(cls, kind: Union[ContentKind, str], item_id: object) -> "SummaryKey":
        normalized = str(item_id).strip()
        if not normalized:
            raise ValueError("item id must be a non-empty string")
        return cls(ContentKind.coerce(kind), normalized)

    def __str__(self) -> str:
        return f"{self.kind.value}{KEY_SEPARATOR}{self.item_id}"


def kind_of_key(key: str) -> str:
    """Return the substring of ``key`` before its first separator."""
    if KEY_SEPARATOR in key:
        return key.split(KEY_SEPARATOR, 1)[0]
    return "unknown"


def meta_key_for(kind: Union[ContentKind, str]) -> str:
    value = kind.value if isinstance(kind, ContentKind) else str(kind)
    return f"{value}{META_SUFFIX}"


__all__ = [
    "COMPRESSION_GENEROUS",
    "COMPRESSION_MODERATE",
    "ContentKind",
    "KEY_SEPARATOR",
    "KindPolicy",
    "META_SUFFIX",
    "SummaryKey",
    "kind_of_key",
    "meta_key_for",
    "policy_for",
]
