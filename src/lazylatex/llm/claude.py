"""Claude API backend."""

from __future__ import annotations

import logging
import os
from typing import cast

import anthropic

from lazylatex.errors import BackendError, ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"


class ClaudeBackend:
    """Backend for the Anthropic Messages API.

    Uses the async Anthropic client for non-blocking API calls.
    """

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_CLAUDE_MODEL,
        max_tokens: int = 1024,
        timeout: float = 60.0,
    ) -> None:
        """Initialize the Claude backend.

        Args:
            api_key: Anthropic API key. If not provided, reads from ANTHROPIC_API_KEY.
            model: Model identifier to use.
            max_tokens: Upper bound on reply length.
            timeout: Request timeout in seconds.

        Raises:
            ConfigurationError: If no API key is available or no model is set.
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self.api_key:
            msg = "API key required. Set LLM__API_KEY or ANTHROPIC_API_KEY"
            raise ConfigurationError(msg)
        if not model:
            msg = "LLM model is not configured"
            raise ConfigurationError(msg)

        self.model = model
        self.max_tokens = max_tokens
        self._client = anthropic.AsyncAnthropic(api_key=self.api_key, timeout=timeout)

    async def complete(self, system: str, user: str) -> str:
        """Send one message and return the reply text.

        Raises:
            BackendError: If the API call fails or returns no text.
        """
        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=0,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
        except anthropic.APIStatusError as exc:
            logger.error("Claude API error: %s %s", exc.status_code, exc.message)
            msg = f"LLM request failed: {exc.status_code} {exc.message}"
            raise BackendError(msg, status=exc.status_code, body=str(exc.body)) from exc
        except anthropic.APIError as exc:
            msg = f"LLM request failed: {exc}"
            raise BackendError(msg) from exc

        # Extract response text safely
        if not response.content:
            msg = "Empty response from Claude API"
            raise BackendError(msg)

        first_block = response.content[0]
        if first_block.type != "text":
            msg = f"Unexpected response type: {first_block.type}"
            raise BackendError(msg)

        # Type guard: we've verified it's a text block above
        text = cast("str", first_block.text)  # type: ignore[attr-defined]
        return text.strip()

    async def aclose(self) -> None:
        """Close the underlying Anthropic client."""
        await self._client.close()
