"""Simplified configuration management."""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


_ROOT_DIR = Path(__file__).resolve().parent.parent


def _load_env_file() -> None:
    """Load .env from root directory if present."""
    env_path = _ROOT_DIR / ".env"
    if not env_path.is_file():
        return
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if stripped and not stripped.startswith("#") and "=" in stripped:
                key, value = stripped.split("=", 1)
                key, value = key.strip(), value.strip().strip("'\"")
                if key and value and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        pass


_load_env_file()


DEFAULT_APP_NAME = "Journal Summary Server"
DEFAULT_APP_VERSION = "0.1.0"
DEFAULT_DATA_DIR = _ROOT_DIR / "data"


def _env_int(name: str, fallback: int) -> int:
    try:
        return int(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _env_float(name: str, fallback: float) -> float:
    try:
        return float(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _get_port() -> int:
    """Get server port, checking PORT first, then JOURNAL_PORT."""
    port = os.getenv("PORT") or os.getenv("JOURNAL_PORT")
    if port:
        try:
            return int(port)
        except ValueError:
            pass
    return 8001


def _data_dir() -> Path:
    raw = os.getenv("JOURNAL_DATA_DIR")
    return Path(raw) if raw else DEFAULT_DATA_DIR


class Settings(BaseModel):
    """Application settings with lightweight env fallbacks."""

    # App metadata
    app_name: str = Field(default=DEFAULT_APP_NAME)
    app_version: str = Field(default=DEFAULT_APP_VERSION)

    # Server runtime
    server_host: str = Field(default=os.getenv("JOURNAL_HOST", "0.0.0.0"))
    server_port: int = Field(default_factory=_get_port)

    # Persistence
    data_dir: Path = Field(default_factory=_data_dir)
    database_filename: str = Field(default=os.getenv("JOURNAL_DATABASE", "journal.sqlite3"))
    journal_log_filename: str = Field(default=os.getenv("JOURNAL_LOG_FILE", "journal_entries.log"))

    # Summarizer
    ai_enabled: bool = Field(default=os.getenv("JOURNAL_AI_ENABLED", "1") != "0")
    llm_api_key: Optional[str] = Field(default=os.getenv("JOURNAL_LLM_API_KEY"))
    llm_base_url: str = Field(default=os.getenv("JOURNAL_LLM_BASE_URL", "https://api.openai.com/v1"))
    summarizer_model: str = Field(default=os.getenv("SUMMARIZER_MODEL", "gpt-4.1-mini"))
    summarizer_timeout_seconds: float = Field(
        default_factory=lambda: _env_float("SUMMARIZER_TIMEOUT_SECONDS", 90.0)
    )

    # HTTP behaviour
    cors_allow_origins_raw: str = Field(default=os.getenv("JOURNAL_CORS_ALLOW_ORIGINS", "*"))
    enable_docs: bool = Field(default=os.getenv("JOURNAL_ENABLE_DOCS", "1") != "0")
    docs_url: Optional[str] = Field(default=os.getenv("JOURNAL_DOCS_URL", "/docs"))

    # Summarisation controls
    summary_default_target_words: int = Field(default=50)
    meta_summary_target_words: int = Field(default=100)
    min_words_for_summary: int = Field(default_factory=lambda: _env_int("MIN_WORDS_FOR_SUMMARY", 200))
    meta_trigger_count: int = Field(default=10)
    target_total_words: int = Field(default_factory=lambda: _env_int("TARGET_TOTAL_WORDS", 500))
    max_summaries_before_meta: int = Field(default=15)
    recent_entries_to_preserve: int = Field(default=3)

    # Chronicle controls
    part_size: int = Field(default_factory=lambda: _env_int("JOURNAL_PART_SIZE", 20))
    part_summary_target_words: int = Field(default=1000)
    part_title_max_words: int = Field(default=12)

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_filename

    @property
    def journal_log_path(self) -> Path:
        return self.data_dir / self.journal_log_filename

    @property
    def cors_allow_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_allow_origins_raw.strip() in {"", "*"}:
            return ["*"]
        return [origin.strip() for origin in self.cors_allow_origins_raw.split(",") if origin.strip()]

    @property
    def resolved_docs_url(self) -> Optional[str]:
        """Return documentation URL when docs are enabled."""
        return (self.docs_url or "/docs") if self.enable_docs else None

    @property
    def summarization_enabled(self) -> bool:
        """Flag indicating the external summarizer may be called."""
        return self.ai_enabled and bool((self.llm_api_key or "").strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
