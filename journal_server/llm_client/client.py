from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT_SECONDS = 60.0


class ChatCompletionError(RuntimeError):
    """Raised when the chat-completions API returns an error response."""


class MissingCredentialsError(ChatCompletionError):
    """Raised when no API key is available for the request."""


def _headers(api_key: Optional[str]) -> Dict[str, str]:
    key = (api_key or "").strip()
    if not key:
        raise MissingCredentialsError("Missing LLM API key")

    return {
        "Authorization": f"Bearer {key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


def _build_messages(messages: List[Dict[str, str]], system: Optional[str]) -> List[Dict[str, str]]:
    if system:
        return [{"role": "system", "content": system}, *messages]
    return messages


def _handle_response_error(exc: httpx.HTTPStatusError) -> None:
    response = exc.response
    detail: str
    try:
        payload = response.json()
        detail = payload.get("error") or payload.get("message") or json.dumps(payload)
        if isinstance(detail, dict):
            detail = detail.get("message") or json.dumps(detail)
    except ValueError:
        detail = response.text
    raise ChatCompletionError(f"LLM request failed ({response.status_code}): {detail}") from exc


def extract_message_content(payload: Dict[str, Any]) -> str:
    choices = payload.get("choices") or []
    if not choices:
        raise ChatCompletionError("LLM response missing choices")
    message = choices[0].get("message") or {}
    return (message.get("content") or "").strip()


async def request_chat_completion(
    *,
    model: str,
    messages: List[Dict[str, str]],
    api_key: Optional[str],
    system: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Dict[str, Any]:
    """Request a chat completion and return the raw JSON payload."""

    payload: Dict[str, object] = {
        "model": model,
        "messages": _build_messages(messages, system),
        "stream": False,
    }
    if max_tokens:
        payload["max_tokens"] = max_tokens
    if temperature is not None:
        payload["temperature"] = temperature

    url = f"{base_url.rstrip('/')}/chat/completions"
    headers = _headers(api_key)

    async with httpx.AsyncClient() as client:
        try:
            response = await client.post(url, headers=headers, json=payload, timeout=timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            _handle_response_error(exc)
        except httpx.HTTPError as exc:
            raise ChatCompletionError(f"LLM request failed: {exc}") from exc
        except ValueError as exc:
            raise ChatCompletionError(f"LLM response was not valid JSON: {exc}") from exc

    raise ChatCompletionError("LLM request failed: unknown error")


__all__ = [
    "ChatCompletionError",
    "DEFAULT_BASE_URL",
    "MissingCredentialsError",
    "extract_message_content",
    "request_chat_completion",
]
