from __future__ import annotations

from dataclasses import dataclass
from textwrap import dedent
from typing import Dict, List, Optional


@dataclass(frozen=True)
class SummaryPrompt:
    system_prompt: str
    messages: List[Dict[str, str]]


DEFAULT_INSTRUCTIONS = "Focus on the key information and main points."

TITLE_INSTRUCTIONS = (
    "Write a short, evocative title for this stretch of the journal. "
    "Return only the title, without quotes or trailing punctuation."
)

_SYSTEM_TEMPLATE = dedent(
    """
    You condense personal journal material for its author. Follow these rules:

    1. Respond in approximately {target_words} words and never substantially more.
    2. {instructions}
    3. Do not invent facts; only use information present in the provided text.
    4. Return only the condensed text, with no headings, preamble or commentary.
    """
).strip()


def _format_body(text: str) -> str:
    body = (text or "").strip()
    return body if body else "(empty)"


def build_summary_prompt(
    text: str, target_words: int, instructions: Optional[str] = None
) -> SummaryPrompt:
    system_prompt = _SYSTEM_TEMPLATE.format(
        target_words=max(int(target_words), 1),
        instructions=(instructions or DEFAULT_INSTRUCTIONS).strip(),
    )
    content = f"Text to condense:\n\n{_format_body(text)}"
    return SummaryPrompt(system_prompt=system_prompt, messages=[{"role": "user", "content": content}])


__all__ = ["DEFAULT_INSTRUCTIONS", "SummaryPrompt", "TITLE_INSTRUCTIONS", "build_summary_prompt"]
