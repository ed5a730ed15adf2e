"""
Tests for the chat-completions summarizer and its timeout wrapper.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from journal_server.llm_client import (
    ChatCompletionError,
    MissingCredentialsError,
    extract_message_content,
)
from journal_server.services.summarization import (
    ChatCompletionSummarizer,
    SummarizerFailure,
    SummarizerUnavailable,
    TimeoutSummarizer,
)
from journal_server.services.summarization.prompt_builder import build_summary_prompt

MODULE = "journal_server.services.summarization.summarizer"


def _completion(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def _summarizer(**overrides) -> ChatCompletionSummarizer:
    options = {"model": "test-model", "api_key": "sk-test", "base_url": "https://llm.invalid/v1"}
    options.update(overrides)
    return ChatCompletionSummarizer(**options)


@pytest.mark.asyncio
async def test_summarize_returns_completion_text(monkeypatch):
    request = AsyncMock(return_value=_completion("  A short account.  "))
    monkeypatch.setattr(f"{MODULE}.request_chat_completion", request)

    result = await _summarizer().summarize("long text", 40, instructions="Keep names.")

    assert result == "A short account."
    kwargs = request.await_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["api_key"] == "sk-test"
    assert "approximately 40 words" in kwargs["system"]
    assert "Keep names." in kwargs["system"]
    assert kwargs["messages"][0]["content"].endswith("long text")


@pytest.mark.asyncio
async def test_summarize_retries_once_then_fails(monkeypatch):
    request = AsyncMock(side_effect=ChatCompletionError("502 bad gateway"))
    monkeypatch.setattr(f"{MODULE}.request_chat_completion", request)

    with pytest.raises(SummarizerFailure):
        await _summarizer().summarize("text", 20)

    assert request.await_count == 2


@pytest.mark.asyncio
async def test_summarize_recovers_on_retry(monkeypatch):
    request = AsyncMock(side_effect=[ChatCompletionError("timeout"), _completion("ok")])
    monkeypatch.setattr(f"{MODULE}.request_chat_completion", request)

    assert await _summarizer().summarize("text", 20) == "ok"


@pytest.mark.asyncio
async def test_empty_completion_counts_as_failure(monkeypatch):
    request = AsyncMock(return_value=_completion("   "))
    monkeypatch.setattr(f"{MODULE}.request_chat_completion", request)

    with pytest.raises(SummarizerFailure):
        await _summarizer().summarize("text", 20)


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [{"enabled": False}, {"api_key": None}, {"api_key": "  "}])
async def test_unconfigured_summarizer_is_unavailable(monkeypatch, overrides):
    request = AsyncMock()
    monkeypatch.setattr(f"{MODULE}.request_chat_completion", request)

    with pytest.raises(SummarizerUnavailable):
        await _summarizer(**overrides).summarize("text", 20)

    request.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_credentials_from_client_is_unavailable(monkeypatch):
    request = AsyncMock(side_effect=MissingCredentialsError("Missing LLM API key"))
    monkeypatch.setattr(f"{MODULE}.request_chat_completion", request)

    with pytest.raises(SummarizerUnavailable):
        await _summarizer().summarize("text", 20)

    assert request.await_count == 1


class SlowSummarizer:
    async def summarize(self, text, target_words, *, instructions=None):
        await asyncio.sleep(1)
        return "too late"


class QuickSummarizer:
    async def summarize(self, text, target_words, *, instructions=None):
        return f"{target_words}:{instructions}"


@pytest.mark.asyncio
async def test_timeout_wrapper_raises_failure():
    with pytest.raises(SummarizerFailure):
        await TimeoutSummarizer(SlowSummarizer(), timeout=0.01).summarize("text", 10)


@pytest.mark.asyncio
async def test_timeout_wrapper_passes_through():
    wrapped = TimeoutSummarizer(QuickSummarizer(), timeout=1)
    assert await wrapped.summarize("text", 10, instructions="x") == "10:x"


def test_extract_message_content_requires_choices():
    with pytest.raises(ChatCompletionError):
        extract_message_content({"choices": []})
    assert extract_message_content(_completion(" hi ")) == "hi"


def test_prompt_uses_default_instructions():
    prompt = build_summary_prompt("", 0)
    assert "approximately 1 words" in prompt.system_prompt
    assert "key information" in prompt.system_prompt
    assert prompt.messages[0]["content"].endswith("(empty)")
