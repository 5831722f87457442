"""Tests for the mock backend and the backend factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import SecretStr

from lazylatex.config import LlmConfig
from lazylatex.errors import BackendError, ConfigurationError
from lazylatex.llm.claude import DEFAULT_CLAUDE_MODEL, ClaudeBackend
from lazylatex.llm.factory import get_backend
from lazylatex.llm.mock import MockBackend, MockCall
from lazylatex.llm.openai_compat import DEFAULT_OPENAI_MODEL, OpenAICompatibleBackend
from lazylatex.llm.protocol import TextGenerationBackend

if TYPE_CHECKING:
    from collections.abc import Callable

    from lazylatex.config import Settings


class TestMockBackend:
    """Tests for MockBackend."""

    def test_implements_protocol(self) -> None:
        assert isinstance(MockBackend(), TextGenerationBackend)

    @pytest.mark.asyncio
    async def test_replies_in_order_then_default(self) -> None:
        backend = MockBackend(["one", " two "], default="rest")
        assert await backend.complete("s", "u1") == "one"
        assert await backend.complete("s", "u2") == "two"
        assert await backend.complete("s", "u3") == "rest"
        assert backend.calls[0] == MockCall(system="s", user="u1")

    @pytest.mark.asyncio
    async def test_queued_exception_raised(self) -> None:
        backend = MockBackend()
        backend.queue(BackendError("boom"), "after")
        with pytest.raises(BackendError):
            await backend.complete("s", "u")
        assert await backend.complete("s", "u") == "after"

    @pytest.mark.asyncio
    async def test_responder_takes_precedence(self) -> None:
        backend = MockBackend(["queued"], responder=lambda system, user: user.upper())
        assert await backend.complete("s", "abc") == "ABC"

    @pytest.mark.asyncio
    async def test_aclose_marks_closed(self) -> None:
        backend = MockBackend()
        await backend.aclose()
        assert backend.closed


class TestGetBackend:
    """Tests for get_backend."""

    def test_mock_provider(self, make_settings: Callable[..., Settings]) -> None:
        settings = make_settings(llm=LlmConfig(provider="mock"))
        assert isinstance(get_backend(settings), MockBackend)

    def test_openai_provider(self, make_settings: Callable[..., Settings]) -> None:
        settings = make_settings(
            llm=LlmConfig(provider="openai", api_key=SecretStr("sk-test"))
        )
        backend = get_backend(settings)
        assert isinstance(backend, OpenAICompatibleBackend)
        assert backend.model == DEFAULT_OPENAI_MODEL

    def test_openai_custom_model_and_endpoint(
        self, make_settings: Callable[..., Settings]
    ) -> None:
        settings = make_settings(
            llm=LlmConfig(
                provider="openai",
                api_key=SecretStr("k"),
                endpoint="http://localhost:11434/v1/chat/completions",
                model="llama3",
            )
        )
        backend = get_backend(settings)
        assert isinstance(backend, OpenAICompatibleBackend)
        assert backend.endpoint == "http://localhost:11434/v1/chat/completions"
        assert backend.model == "llama3"

    def test_openai_without_key(self, make_settings: Callable[..., Settings]) -> None:
        with pytest.raises(ConfigurationError):
            get_backend(make_settings())

    def test_anthropic_provider(self, make_settings: Callable[..., Settings]) -> None:
        settings = make_settings(
            llm=LlmConfig(provider="anthropic", api_key=SecretStr("sk-ant"))
        )
        backend = get_backend(settings)
        assert isinstance(backend, ClaudeBackend)
        assert backend.model == DEFAULT_CLAUDE_MODEL

    def test_anthropic_without_key(
        self, make_settings: Callable[..., Settings]
    ) -> None:
        settings = make_settings(llm=LlmConfig(provider="anthropic"))
        with pytest.raises(ConfigurationError):
            get_backend(settings)

    def test_explicit_empty_model_rejected(
        self, make_settings: Callable[..., Settings]
    ) -> None:
        """An empty model string is not the same as "use the default"."""
        settings = make_settings(
            llm=LlmConfig(provider="openai", api_key=SecretStr("k"), model="")
        )
        with pytest.raises(ConfigurationError):
            get_backend(settings)

    def test_reads_global_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without arguments the cached settings are used."""
        monkeypatch.setenv("LLM__PROVIDER", "mock")
        assert isinstance(get_backend(), MockBackend)
