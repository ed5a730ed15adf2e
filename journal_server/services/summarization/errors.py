from __future__ import annotations


class SummarizerError(RuntimeError):
    """Base class for failures raised by a summarizer implementation."""


class SummarizerUnavailable(SummarizerError):
    """Raised when summarization is disabled or no credentials are configured."""


class SummarizerFailure(SummarizerError):
    """Raised on transport, quota, timeout or malformed-response failures."""


__all__ = ["SummarizerError", "SummarizerFailure", "SummarizerUnavailable"]
