"""Shared pytest fixtures for lazy-latex tests."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from lazylatex.config import ConversionConfig, Settings, get_settings
from lazylatex.editor.memory import InMemoryDocument, InMemoryEditor
from lazylatex.editor.notify import RecordingNotifier
from lazylatex.llm.mock import MockBackend
from lazylatex.models.document import DocumentKind
from lazylatex.session import EditSession

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from typing import Any


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep real environment variables and cached settings out of tests."""
    for name in list(os.environ):
        if name.startswith(("LLM__", "CONVERSION__", "OUTPUT__", "APP__")):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Factory for Settings that never reads a .env file.

    Keyword arguments are ConversionConfig fields; pass ``output=``/``llm=``
    sub-models directly.
    """

    def _make(**kwargs: Any) -> Settings:
        sub_models = {
            key: kwargs.pop(key) for key in ("llm", "output", "app") if key in kwargs
        }
        return Settings(
            _env_file=None,  # type: ignore[call-arg]
            conversion=ConversionConfig(**kwargs),
            **sub_models,
        )

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., Settings]) -> Settings:
    return make_settings()


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def session() -> EditSession:
    return EditSession()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def open_document() -> Callable[..., tuple[InMemoryDocument, InMemoryEditor]]:
    """Create a document and an editor that shows it."""

    def _open(
        text: str, kind: DocumentKind = DocumentKind.LATEX
    ) -> tuple[InMemoryDocument, InMemoryEditor]:
        document = InMemoryDocument(text, kind=kind)
        return document, InMemoryEditor(active_document=document)

    return _open
