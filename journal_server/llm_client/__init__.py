from .client import (
    DEFAULT_BASE_URL,
    ChatCompletionError,
    MissingCredentialsError,
    extract_message_content,
    request_chat_completion,
)

__all__ = [
    "ChatCompletionError",
    "DEFAULT_BASE_URL",
    "MissingCredentialsError",
    "extract_message_content",
    "request_chat_completion",
]
