"""Summary generation: target lengths, metadata and the calls into the summarizer.

The engine is the boundary where summarizer exceptions stop. Callers always
get a value back: a ``Summary``/``MetaSummary`` on success, ``None`` (or an
``EngineResult`` carrying the reason) otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Generic, Optional, Sequence, TypeVar, Union

from ...config import Settings
from ...logging_config import logger
from ...utils.text import is_blank, truncate_words, word_count
from .errors import SummarizerError, SummarizerUnavailable
from .fingerprint import fingerprint
from .kinds import COMPRESSION_MODERATE, ContentKind, SummaryKey, policy_for
from .prompt_builder import TITLE_INSTRUCTIONS
from .records import MetaSummary, Summary, utc_now
from .summarizer import Summarizer

MIN_TARGET_WORDS = 10
DEFAULT_TARGET_WORDS = 50
META_TARGET_WORDS = 100


@dataclass(frozen=True)
class SummaryLimits:
    default_target_words: int = DEFAULT_TARGET_WORDS
    meta_target_words: int = META_TARGET_WORDS
    min_words_for_summary: int = 200
    meta_trigger_count: int = 10
    target_total_words: int = 500
    max_summaries_before_meta: int = 15
    recent_entries_to_preserve: int = 3
    part_size: int = 20
    part_summary_target_words: int = 1000
    part_title_max_words: int = 12

    @classmethod
    def from_settings(cls, settings: Settings) -> "SummaryLimits":
        return cls(
            default_target_words=settings.summary_default_target_words,
            meta_target_words=settings.meta_summary_target_words,
            min_words_for_summary=settings.min_words_for_summary,
            meta_trigger_count=settings.meta_trigger_count,
            target_total_words=settings.target_total_words,
            max_summaries_before_meta=settings.max_summaries_before_meta,
            recent_entries_to_preserve=settings.recent_entries_to_preserve,
            part_size=settings.part_size,
            part_summary_target_words=settings.part_summary_target_words,
            part_title_max_words=settings.part_title_max_words,
        )


class FailureReason(str, Enum):
    EMPTY_CONTENT = "empty-content"
    NO_SOURCES = "no-sources"
    SUMMARIZER_UNAVAILABLE = "summarizer-unavailable"
    SUMMARIZER_FAILURE = "summarizer-failure"
    EMPTY_RESPONSE = "empty-response"


T = TypeVar("T")


@dataclass(frozen=True)
class EngineResult(Generic[T]):
    value: Optional[T] = None
    reason: Optional[FailureReason] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def target_words(
    original_word_count: int,
    ratio: float = COMPRESSION_MODERATE,
    maximum: int = DEFAULT_TARGET_WORDS,
) -> int:
    """Clamp ``floor(original_word_count * ratio)`` into ``[10, maximum]``."""
    calculated = int(max(original_word_count, 0) * ratio)
    return max(MIN_TARGET_WORDS, min(calculated, maximum))


def build_summary(key: str, original: str, condensed: str, created_at: datetime) -> Summary:
    original_words = word_count(original)
    summary_words = word_count(condensed)
    return Summary(
        key=key,
        content=condensed,
        original_word_count=original_words,
        summary_word_count=summary_words,
        compression_ratio=(summary_words / original_words) if original_words else 0.0,
        content_fingerprint=fingerprint(original),
        created_at=created_at,
    )


class SummaryEngine:
    def __init__(
        self,
        summarizer: Summarizer,
        limits: Optional[SummaryLimits] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._summarizer = summarizer
        self._limits = limits or SummaryLimits()
        self._clock = clock

    @property
    def limits(self) -> SummaryLimits:
        return self._limits

    def target_words(self, original_word_count: int, ratio: float = COMPRESSION_MODERATE) -> int:
        return target_words(original_word_count, ratio, self._limits.default_target_words)

    async def _call(
        self, label: str, text: str, words: int, instructions: Optional[str]
    ) -> EngineResult[str]:
        try:
            condensed = await self._summarizer.summarize(text, words, instructions=instructions)
        except SummarizerUnavailable as exc:
            logger.info("summarizer unavailable", extra={"key": label, "error": str(exc)})
            return EngineResult(reason=FailureReason.SUMMARIZER_UNAVAILABLE, error=str(exc))
        except SummarizerError as exc:
            logger.warning("summary generation failed", extra={"key": label, "error": str(exc)})
            return EngineResult(reason=FailureReason.SUMMARIZER_FAILURE, error=str(exc))
        except Exception as exc:  # injected summarizers may raise anything
            logger.exception("summary generation raised unexpectedly", extra={"key": label})
            return EngineResult(reason=FailureReason.SUMMARIZER_FAILURE, error=str(exc))

        condensed = (condensed or "").strip()
        if not condensed:
            logger.warning("summarizer returned empty text", extra={"key": label})
            return EngineResult(reason=FailureReason.EMPTY_RESPONSE)
        return EngineResult(value=condensed)

    async def attempt(
        self,
        key: Union[SummaryKey, str],
        content: str,
        target: Optional[int] = None,
        *,
        kind: Optional[ContentKind] = None,
    ) -> EngineResult[Summary]:
        if is_blank(content):
            return EngineResult(reason=FailureReason.EMPTY_CONTENT)

        if isinstance(key, SummaryKey):
            kind = kind or key.kind
        policy = policy_for(kind) if kind is not None else None
        ratio = policy.ratio if policy else COMPRESSION_MODERATE
        words = target or self.target_words(word_count(content), ratio)
        label = str(key)

        result = await self._call(label, content, words, policy.instructions if policy else None)
        if not result.ok:
            return EngineResult(reason=result.reason, error=result.error)
        summary = build_summary(label, content, result.value, self._clock())
        logger.debug(
            "summary generated",
            extra={
                "key": label,
                "original_words": summary.original_word_count,
                "summary_words": summary.summary_word_count,
            },
        )
        return EngineResult(value=summary)

    async def summarize(
        self,
        key: Union[SummaryKey, str],
        content: str,
        target: Optional[int] = None,
        *,
        kind: Optional[ContentKind] = None,
    ) -> Optional[Summary]:
        return (await self.attempt(key, content, target, kind=kind)).value

    async def attempt_many(
        self,
        summaries: Sequence[Union[Summary, MetaSummary]],
        meta_key: str,
        kind: Optional[Union[ContentKind, str]] = None,
    ) -> EngineResult[MetaSummary]:
        if not summaries:
            return EngineResult(reason=FailureReason.NO_SOURCES)

        combined = "\n\n".join(item.content for item in summaries)
        instructions: Optional[str] = None
        if kind is not None:
            try:
                instructions = policy_for(kind).meta_instructions
            except ValueError:
                instructions = None

        result = await self._call(meta_key, combined, self._limits.meta_target_words, instructions)
        if not result.ok:
            return EngineResult(reason=result.reason, error=result.error)

        base = build_summary(meta_key, combined, result.value, self._clock())
        meta = MetaSummary(
            key=meta_key,
            content=base.content,
            original_word_count=base.original_word_count,
            summary_word_count=base.summary_word_count,
            compression_ratio=base.compression_ratio,
            content_fingerprint=base.content_fingerprint,
            created_at=base.created_at,
            included_keys=[item.key for item in summaries],
            source_count=len(summaries),
        )
        return EngineResult(value=meta)

    async def summarize_many(
        self,
        summaries: Sequence[Union[Summary, MetaSummary]],
        meta_key: str,
        kind: Optional[Union[ContentKind, str]] = None,
    ) -> Optional[MetaSummary]:
        return (await self.attempt_many(summaries, meta_key, kind)).value

    async def title(self, content: str, label: str = "title") -> Optional[str]:
        """Generate a short title for ``content``, capped at the configured word count."""
        if is_blank(content):
            return None
        max_words = self._limits.part_title_max_words
        result = await self._call(label, content, max_words, TITLE_INSTRUCTIONS)
        if not result.ok:
            return None
        cleaned = truncate_words(result.value.strip().strip("\"'"), max_words)
        return cleaned or None


__all__ = [
    "DEFAULT_TARGET_WORDS",
    "EngineResult",
    "FailureReason",
    "META_TARGET_WORDS",
    "MIN_TARGET_WORDS",
    "SummaryEngine",
    "SummaryLimits",
    "build_summary",
    "target_words",
]
