"""Backend factory.

Provides a factory function to get the backend selected by configuration
(OpenAI-compatible endpoint, Anthropic, or the mock used for dry runs).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lazylatex.config import get_settings
from lazylatex.errors import ConfigurationError

if TYPE_CHECKING:
    from lazylatex.config import Settings
    from lazylatex.llm.protocol import TextGenerationBackend


def get_backend(settings: Settings | None = None) -> TextGenerationBackend:
    """Build the backend named by ``settings.llm.provider``.

    Returns:
        A backend implementing TextGenerationBackend.

    Raises:
        ConfigurationError: If the provider is unknown or its credentials,
            endpoint or model are missing.
    """
    llm = (settings or get_settings()).llm

    if llm.provider == "mock":
        from lazylatex.llm.mock import MockBackend

        return MockBackend()

    if llm.provider == "anthropic":
        from lazylatex.llm.claude import DEFAULT_CLAUDE_MODEL, ClaudeBackend

        return ClaudeBackend(
            api_key=llm.api_key.get_secret_value() or None,
            model=DEFAULT_CLAUDE_MODEL if llm.model is None else llm.model,
            max_tokens=llm.max_tokens,
            timeout=llm.timeout,
        )

    if llm.provider == "openai":
        from lazylatex.llm.openai_compat import (
            DEFAULT_OPENAI_MODEL,
            OpenAICompatibleBackend,
        )

        return OpenAICompatibleBackend(
            endpoint=llm.endpoint,
            api_key=llm.api_key.get_secret_value(),
            model=DEFAULT_OPENAI_MODEL if llm.model is None else llm.model,
            timeout=llm.timeout,
            max_tokens=llm.max_tokens,
        )

    msg = f"Unknown LLM provider: {llm.provider!r}"
    raise ConfigurationError(msg)
