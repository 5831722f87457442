"""Tests for the whole-document convergence loop."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from lazylatex.convert.convergence import converge
from lazylatex.convert.pipeline import MarkerConverter
from lazylatex.errors import BackendError
from lazylatex.llm.mock import MockBackend
from lazylatex.models.document import DocumentKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from lazylatex.config import Settings
    from lazylatex.editor.memory import InMemoryDocument, InMemoryEditor
    from lazylatex.session import EditSession


class TestConverge:
    """Tests for converge."""

    @pytest.mark.asyncio
    async def test_display_marker_shifts_later_lines(
        self,
        open_document: Callable[..., tuple[InMemoryDocument, InMemoryEditor]],
        session: EditSession,
        settings: Settings,
    ) -> None:
        """Lines are re-read after a display block inserts new lines."""
        document, editor = open_document("a ;;;x;;; b\nc ;;y;;")
        converter = MarkerConverter(
            MockBackend(['["X"]', '["Y"]']), editor, session, settings
        )

        outcome = await converge(converter, document, max_passes=10)

        assert document.text == "a \n\\[\nX\n\\]\n b\nc $Y$"
        assert outcome.converted
        assert outcome.passes == 3
        assert outcome.lines_converted == [0, 5]
        assert not outcome.hit_pass_limit

    @pytest.mark.asyncio
    async def test_stops_at_max_passes(
        self,
        open_document: Callable[..., tuple[InMemoryDocument, InMemoryEditor]],
        session: EditSession,
        settings: Settings,
    ) -> None:
        """A backend that keeps emitting markers is bounded."""
        document, editor = open_document(";;x;;")
        backend = MockBackend(default='[";;x;;"]')
        converter = MarkerConverter(backend, editor, session, settings)

        outcome = await converge(converter, document, max_passes=4)

        assert outcome.passes == 4
        assert outcome.hit_pass_limit
        assert len(backend.calls) == 4
        assert document.text == "$$$$;;x;;$$$$"

    @pytest.mark.asyncio
    async def test_failed_line_does_not_stop_the_pass(
        self,
        open_document: Callable[..., tuple[InMemoryDocument, InMemoryEditor]],
        session: EditSession,
        settings: Settings,
    ) -> None:
        """Later lines are still converted when an earlier one fails."""
        document, editor = open_document(";;a;;\n;;b;;")
        backend = MockBackend([BackendError("boom"), '["B"]'])
        converter = MarkerConverter(backend, editor, session, settings)

        outcome = await converge(converter, document, max_passes=10)

        assert document.text == ";;a;;\n$B$"
        assert outcome.lines_converted == [1]
        # The second pass retries line 0, whose empty reply is not valid JSON
        assert outcome.passes == 2
        assert len(outcome.errors) == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_on_one_line_is_isolated(
        self,
        open_document: Callable[..., tuple[InMemoryDocument, InMemoryEditor]],
        session: EditSession,
        settings: Settings,
    ) -> None:
        """An error outside the package's own errors does not abort the run."""
        document, editor = open_document(";;a;;\n;;b;;")
        backend = MockBackend([RuntimeError("boom"), '["B"]'])
        converter = MarkerConverter(backend, editor, session, settings)

        outcome = await converge(converter, document, max_passes=10)

        assert document.text == ";;a;;\n$B$"
        assert outcome.lines_converted == [1]
        assert "Failed to process line 1" in str(outcome.errors[0])

    @pytest.mark.asyncio
    async def test_nothing_to_convert(
        self,
        open_document: Callable[..., tuple[InMemoryDocument, InMemoryEditor]],
        backend: MockBackend,
        session: EditSession,
        settings: Settings,
    ) -> None:
        """A clean document takes one pass and makes no requests."""
        document, editor = open_document("no markers\n% ;;kept;;")
        converter = MarkerConverter(backend, editor, session, settings)

        outcome = await converge(converter, document, max_passes=10)

        assert not outcome.converted
        assert outcome.passes == 1
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_unsupported_kind(
        self,
        open_document: Callable[..., tuple[InMemoryDocument, InMemoryEditor]],
        backend: MockBackend,
        session: EditSession,
        settings: Settings,
    ) -> None:
        """Plain-text documents are left alone."""
        document, editor = open_document(";;x;;", DocumentKind.OTHER)
        converter = MarkerConverter(backend, editor, session, settings)

        outcome = await converge(converter, document, max_passes=10)

        assert outcome.passes == 0
        assert document.text == ";;x;;"

    @pytest.mark.asyncio
    async def test_process_document_uses_max_passes_setting(
        self,
        open_document: Callable[..., tuple[InMemoryDocument, InMemoryEditor]],
        session: EditSession,
        make_settings: Callable[..., Settings],
    ) -> None:
        """MarkerConverter.process_document reads the configured bound."""
        document, editor = open_document(";;x;;")
        converter = MarkerConverter(
            MockBackend(default='[";;x;;"]'),
            editor,
            session,
            make_settings(max_passes=2),
        )

        outcome = await converter.process_document(document)

        assert outcome.passes == 2
        assert outcome.hit_pass_limit
