from __future__ import annotations

import logging
import os
from typing import Optional

logger = logging.getLogger("journal.server")

DEFAULT_LOG_LEVEL = "INFO"


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging once; the level comes from ``JOURNAL_LOG_LEVEL`` unless given."""
    if logger.handlers or logging.getLogger().handlers:
        return

    logging.basicConfig(
        level=_resolve_level(level or os.getenv("JOURNAL_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # summarizer requests would otherwise log every call
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
