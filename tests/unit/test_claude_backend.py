"""Tests for the Claude API backend."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from lazylatex.errors import BackendError, ConfigurationError
from lazylatex.llm.claude import DEFAULT_CLAUDE_MODEL, ClaudeBackend


class TestInit:
    """Tests for ClaudeBackend construction."""

    def test_init_with_api_key(self) -> None:
        """Backend initializes with an explicit API key."""
        backend = ClaudeBackend(api_key="test-key")
        assert backend.api_key == "test-key"
        assert backend.model == DEFAULT_CLAUDE_MODEL

    def test_init_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Backend falls back to ANTHROPIC_API_KEY."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
        assert ClaudeBackend().api_key == "env-key"

    def test_init_no_key_raises(self) -> None:
        """Missing API key is a configuration error."""
        with pytest.raises(ConfigurationError, match="API key"):
            ClaudeBackend()

    def test_init_no_model_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="model"):
            ClaudeBackend(api_key="k", model="")


class TestComplete:
    """Tests for ClaudeBackend.complete."""

    @pytest.fixture
    def mock_anthropic(self):
        """Mock the anthropic module, keeping its real exception classes."""
        with patch("lazylatex.llm.claude.anthropic") as mock:
            mock.APIStatusError = anthropic.APIStatusError
            mock.APIError = anthropic.APIError
            mock.AsyncAnthropic.return_value.messages.create = AsyncMock()
            yield mock

    @pytest.mark.asyncio
    async def test_returns_stripped_text(self, mock_anthropic: MagicMock) -> None:
        """The first text block is returned without surrounding whitespace."""
        create = mock_anthropic.AsyncAnthropic.return_value.messages.create
        create.return_value = MagicMock(
            content=[MagicMock(text="  \\alpha \n", type="text")]
        )

        backend = ClaudeBackend(api_key="test-key", max_tokens=64)
        assert await backend.complete("system prompt", "user prompt") == "\\alpha"

        kwargs = create.call_args.kwargs
        assert kwargs["system"] == "system prompt"
        assert kwargs["messages"] == [{"role": "user", "content": "user prompt"}]
        assert kwargs["temperature"] == 0
        assert kwargs["max_tokens"] == 64
        assert kwargs["model"] == DEFAULT_CLAUDE_MODEL

    @pytest.mark.asyncio
    async def test_empty_content(self, mock_anthropic: MagicMock) -> None:
        create = mock_anthropic.AsyncAnthropic.return_value.messages.create
        create.return_value = MagicMock(content=[])

        with pytest.raises(BackendError, match="Empty response"):
            await ClaudeBackend(api_key="k").complete("s", "u")

    @pytest.mark.asyncio
    async def test_non_text_block(self, mock_anthropic: MagicMock) -> None:
        create = mock_anthropic.AsyncAnthropic.return_value.messages.create
        create.return_value = MagicMock(content=[MagicMock(type="tool_use")])

        with pytest.raises(BackendError, match="tool_use"):
            await ClaudeBackend(api_key="k").complete("s", "u")

    @pytest.mark.asyncio
    async def test_status_error(self, mock_anthropic: MagicMock) -> None:
        """HTTP failures keep their status code."""
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        response = httpx.Response(429, request=request)
        create = mock_anthropic.AsyncAnthropic.return_value.messages.create
        create.side_effect = anthropic.RateLimitError(
            "slow down", response=response, body={"error": "rate"}
        )

        with pytest.raises(BackendError) as exc_info:
            await ClaudeBackend(api_key="k").complete("s", "u")

        assert exc_info.value.status == 429

    @pytest.mark.asyncio
    async def test_connection_error(self, mock_anthropic: MagicMock) -> None:
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        create = mock_anthropic.AsyncAnthropic.return_value.messages.create
        create.side_effect = anthropic.APIConnectionError(request=request)

        with pytest.raises(BackendError) as exc_info:
            await ClaudeBackend(api_key="k").complete("s", "u")

        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_aclose_closes_client(self, mock_anthropic: MagicMock) -> None:
        close = mock_anthropic.AsyncAnthropic.return_value.close = AsyncMock()
        await ClaudeBackend(api_key="k").aclose()
        close.assert_awaited_once()
