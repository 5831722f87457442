"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/lazylatex/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_OPENAI_ENDPOINT = "https://api.openai.com/v1/chat/completions"


class SaveMode(StrEnum):
    """What happens to markers when a document is saved."""

    NONE = "none"
    CONVERT_BEFORE_SAVE = "convert-save"
    SAVE_CONVERT_SAVE = "save-convert-save"


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class LlmConfig(BaseModel):
    """Text-generation backend configuration."""

    provider: Literal["openai", "anthropic", "mock"] = "openai"
    endpoint: str = DEFAULT_OPENAI_ENDPOINT
    api_key: SecretStr = SecretStr("")
    # None selects the provider's default model
    model: str | None = None
    timeout: float = 60.0
    max_tokens: int = 1024


class ConversionConfig(BaseModel):
    """Marker conversion behaviour."""

    context_lines: int = Field(default=5, ge=0)
    keep_original_comment: bool = False
    auto_replace: bool = True
    convert_on_save: SaveMode = SaveMode.NONE
    max_passes: int = Field(default=10, ge=1)


class OutputConfig(BaseModel):
    """Math delimiters written into LaTeX documents.

    Markdown documents always use ``$...$`` and ``$$...$$``.
    """

    inline_style: Literal["dollar", "paren"] = "dollar"
    display_style: Literal["brackets", "dollars"] = "brackets"


class AppConfig(BaseModel):
    """Application runtime configuration."""

    log_dir: Path = Path("logs")
    file_logging: bool = False


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``LLM__API_KEY``, ``CONVERSION__CONTEXT_LINES``,
    ``OUTPUT__INLINE_STYLE``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    llm: LlmConfig = LlmConfig()
    conversion: ConversionConfig = ConversionConfig()
    output: OutputConfig = OutputConfig()
    app: AppConfig = AppConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
