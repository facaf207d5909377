"""Application settings loaded from the environment.

Usage:
    settings = get_settings()
    store = ContentStore(settings.data_dir)

Every field can be overridden with a SOCIALS_STUDIO_ prefixed env var,
e.g. SOCIALS_STUDIO_DATA_DIR=/tmp/studio.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    ASSISTANT_MAX_TOKENS,
    CONTEXT_HISTORY_MESSAGES,
    CONTEXT_SOURCES_MAX_CHARS,
)

load_dotenv()


class StudioSettings(BaseSettings):
    """Runtime settings for the studio."""

    model_config = SettingsConfigDict(env_prefix="SOCIALS_STUDIO_", extra="ignore")

    data_dir: Path = Path("data")
    log_dir: Path = Path("logs")
    fonts_dir: Path | None = None
    providers_config: Path | None = None
    settings_ttl_seconds: float = 5.0
    context_char_limit: int = CONTEXT_SOURCES_MAX_CHARS
    history_limit: int = CONTEXT_HISTORY_MESSAGES
    max_tokens: int = ASSISTANT_MAX_TOKENS


_settings: StudioSettings | None = None


def get_settings() -> StudioSettings:
    """Get the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = StudioSettings()
    return _settings
