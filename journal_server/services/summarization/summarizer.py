from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from ...config import Settings
from ...llm_client import (
    ChatCompletionError,
    MissingCredentialsError,
    extract_message_content,
    request_chat_completion,
)
from ...logging_config import logger
from .errors import SummarizerFailure, SummarizerUnavailable
from .prompt_builder import build_summary_prompt


class Summarizer(Protocol):
    """Text-condensing capability injected into the summary engine."""

    async def summarize(
        self, text: str, target_words: int, *, instructions: Optional[str] = None
    ) -> str:  # pragma: no cover - typing protocol
        ...


class ChatCompletionSummarizer:
    """Summarizer backed by an OpenAI-compatible chat-completions endpoint."""

    def __init__(
        self,
        *,
        model: str,
        api_key: Optional[str],
        base_url: str,
        enabled: bool = True,
        attempts: int = 2,
        request_timeout: float = 60.0,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._enabled = enabled
        self._attempts = max(attempts, 1)
        self._request_timeout = request_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChatCompletionSummarizer":
        return cls(
            model=settings.summarizer_model,
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            enabled=settings.ai_enabled,
            request_timeout=settings.summarizer_timeout_seconds,
        )

    async def summarize(
        self, text: str, target_words: int, *, instructions: Optional[str] = None
    ) -> str:
        if not self._enabled:
            raise SummarizerUnavailable("AI features are disabled")
        if not (self._api_key or "").strip():
            raise SummarizerUnavailable("No LLM API key configured")

        prompt = build_summary_prompt(text, target_words, instructions)
        last_error: Optional[Exception] = None
        for attempt in range(self._attempts):
            try:
                response = await request_chat_completion(
                    model=self._model,
                    messages=prompt.messages,
                    system=prompt.system_prompt,
                    api_key=self._api_key,
                    base_url=self._base_url,
                    max_tokens=max(target_words, 1) * 2,
                    temperature=0.3,
                    timeout=self._request_timeout,
                )
                content = extract_message_content(response)
                if content:
                    return content
                raise ChatCompletionError("LLM response missing content")
            except MissingCredentialsError as exc:
                raise SummarizerUnavailable(str(exc)) from exc
            except ChatCompletionError as exc:
                last_error = exc
                if attempt + 1 < self._attempts:
                    logger.warning(
                        "summarizer attempt failed; retrying",
                        extra={"error": str(exc), "attempt": attempt + 1},
                    )
                    continue
                logger.error("summarizer request failed", extra={"error": str(exc)})

        raise SummarizerFailure(str(last_error) if last_error else "Summarization failed")


class TimeoutSummarizer:
    """Bounds each call of a wrapped summarizer by ``timeout`` seconds."""

    def __init__(self, inner: Summarizer, timeout: float) -> None:
        self._inner = inner
        self._timeout = timeout

    async def summarize(
        self, text: str, target_words: int, *, instructions: Optional[str] = None
    ) -> str:
        try:
            return await asyncio.wait_for(
                self._inner.summarize(text, target_words, instructions=instructions),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise SummarizerFailure(f"summarizer timed out after {self._timeout:.1f}s") from exc


__all__ = ["ChatCompletionSummarizer", "Summarizer", "TimeoutSummarizer"]
