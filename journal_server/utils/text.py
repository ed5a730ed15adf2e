from __future__ import annotations

from typing import Optional


def word_count(text: Optional[str]) -> int:
    """Count whitespace-separated words."""
    if not text or not isinstance(text, str):
        return 0
    return len(text.split())


def truncate_words(text: str, max_words: int) -> str:
    words = text.split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words])


def is_blank(text: Optional[str]) -> bool:
    return not text or not text.strip()


__all__ = ["is_blank", "truncate_words", "word_count"]
