"""Commands and editor event handlers.

This is the outermost layer: it decides *when* to convert (Enter key, explicit
commands, save hooks), and it is the only place that turns errors into
user-facing messages. Everything below it returns outcome records.

Triggers:
    - ``handle_text_change``: a newline typed in a LaTeX/Markdown document
      converts the line just completed (when ``conversion.auto_replace``).
    - ``convert_current_line``: explicit command for the cursor line.
    - ``convert_selection``: explicit command for free-form selected text.
    - ``handle_will_save``: ``convert-save`` mode, converts before writing.
    - ``handle_did_save``: ``save-convert-save`` mode, converts after writing
      and saves again if anything changed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lazylatex.config import SaveMode
from lazylatex.convert.pipeline import MarkerConverter
from lazylatex.errors import (
    ConfigurationError,
    EmptyResultError,
    LazyLatexError,
    friendly_error_message,
    log_backend_error,
)
from lazylatex.llm.factory import get_backend
from lazylatex.llm.generate import generate_latex_from_text
from lazylatex.markers.context import context_before_line
from lazylatex.markers.scanner import find_markers_in_line
from lazylatex.session import EditSession

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lazylatex.config import Settings
    from lazylatex.editor.memory import InMemoryDocument
    from lazylatex.editor.protocol import Editor, Notifier, TextDocument
    from lazylatex.llm.protocol import TextGenerationBackend
    from lazylatex.markers.scanner import MarkerRegion
    from lazylatex.models.document import ChangeEvent
    from lazylatex.models.results import DocumentOutcome, LineOutcome

logger = logging.getLogger(__name__)

UNSUPPORTED_KIND_MESSAGE = (
    "Lazy LaTeX: This command only works in LaTeX or Markdown files."
)


def _describe(regions: Iterable[MarkerRegion]) -> list[str]:
    return [f"{r.kind.name.lower()}:{r.inner}" for r in regions]


class LazyLatexController:
    """Wires conversion into one editor.

    The backend is built lazily from settings on first use, so a missing API
    key is reported by the command that needed it rather than at startup.
    """

    def __init__(
        self,
        editor: Editor,
        notifier: Notifier,
        settings: Settings,
        *,
        session: EditSession | None = None,
        backend: TextGenerationBackend | None = None,
    ) -> None:
        self.editor = editor
        self.notifier = notifier
        self.settings = settings
        self.session = session or EditSession()
        self._backend = backend
        self._owns_backend = backend is None

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _get_backend(self) -> TextGenerationBackend:
        """Return the backend, building it from settings on first use.

        Raises:
            ConfigurationError: If the backend settings are incomplete.
        """
        if self._backend is None:
            self._backend = get_backend(self.settings)
        return self._backend

    async def aclose(self) -> None:
        """Close the backend if this controller built it."""
        if self._owns_backend and self._backend is not None:
            await self._backend.aclose()
            self._backend = None

    def _converter(self) -> MarkerConverter:
        return MarkerConverter(
            self._get_backend(), self.editor, self.session, self.settings
        )

    def _report(self, errors: Iterable[LazyLatexError]) -> None:
        for err in errors:
            self.notifier.error(friendly_error_message(err))

    def attach(self, document: InMemoryDocument) -> None:
        """Register this controller's change and save listeners on a document."""
        document.on_did_change(self.handle_text_change)
        document.on_will_save(self.handle_will_save)
        document.on_did_save(self.handle_did_save)

    async def _convert_line(
        self,
        document: TextDocument,
        line_number: int,
        regions: list[MarkerRegion],
    ) -> LineOutcome:
        converter = self._converter()
        with self.notifier.status("Lazy LaTeX: auto-generating LaTeX for this line..."):
            outcome = await converter.process_line(document, line_number, regions)
        self._report(outcome.errors)
        return outcome

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def handle_text_change(self, event: ChangeEvent) -> None:
        """Convert the line just completed when the user presses Enter."""
        if self.session.applying_edit:
            return
        document = event.document
        if self.editor.active_document is not document:
            return
        if not document.kind.is_supported:
            return
        if not self.settings.conversion.auto_replace:
            return

        for change in event.changes:
            if "\n" not in change.text:
                continue
            line_number = change.start_line
            try:
                line_text = document.line_at(line_number)
            except IndexError:
                logger.exception("Failed to read line %d after Enter", line_number)
                continue

            regions = find_markers_in_line(line_text, document.kind)
            if not regions:
                logger.debug(
                    "Enter on line %d - no markers or comment line.", line_number
                )
                continue

            logger.info(
                "Enter on line %d - found markers: %s",
                line_number,
                _describe(regions),
            )
            try:
                await self._convert_line(document, line_number, regions)
            except ConfigurationError as exc:
                self.notifier.error(friendly_error_message(exc))
                return
            except Exception:
                logger.exception("Failed to process line %d after Enter", line_number)
                self.notifier.error(
                    "Lazy LaTeX: Failed to process line. See output for details."
                )

    def _save_hook_applies(self, document: TextDocument, mode: SaveMode) -> bool:
        if self.editor.active_document is not document:
            return False
        if self.session.applying_edit or self.session.save_in_progress:
            return False
        if not document.kind.is_supported:
            return False
        return self.settings.conversion.convert_on_save is mode

    async def handle_will_save(self, document: TextDocument) -> None:
        """Convert markers before the save is written (``convert-save``).

        The host must await this before it writes the document.
        """
        if not self._save_hook_applies(document, SaveMode.CONVERT_BEFORE_SAVE):
            return

        with self.session.save_pass():
            logger.info("Will save: converting markers before save...")
            try:
                outcome = await self.convert_document(document)
            except ConfigurationError as exc:
                self.notifier.error(friendly_error_message(exc))
                return
            except Exception:
                logger.exception("Error processing markers before save")
                self.notifier.error(
                    "Lazy LaTeX: Error processing markers before save. "
                    "See output for details."
                )
                return

        if outcome.converted:
            logger.info("Markers converted, save will proceed.")
        else:
            logger.info("No markers found in document.")

    async def handle_did_save(self, document: TextDocument) -> None:
        """Convert markers after a save, then save again (``save-convert-save``)."""
        if not self._save_hook_applies(document, SaveMode.SAVE_CONVERT_SAVE):
            return

        with self.session.save_pass():
            logger.info("Save detected, processing all markers in document...")
            try:
                outcome = await self.convert_document(document)
                if outcome.converted:
                    await document.save()
                    logger.info("Document saved again after marker conversions.")
                else:
                    logger.info("No markers found in document.")
            except ConfigurationError as exc:
                self.notifier.error(friendly_error_message(exc))
            except Exception:
                logger.exception("Error processing markers on save")
                self.notifier.error(
                    "Lazy LaTeX: Error processing markers on save. "
                    "See output for details."
                )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def convert_document(self, document: TextDocument) -> DocumentOutcome:
        """Run the convergence loop over a whole document.

        Raises:
            ConfigurationError: If the backend settings are incomplete.
        """
        converter = self._converter()
        with self.notifier.status("Lazy LaTeX: converting markers in document..."):
            outcome = await converter.process_document(document)
        self._report(outcome.errors)
        return outcome

    async def convert_current_line(self) -> LineOutcome | None:
        """Convert the markers on the cursor line."""
        document = self.editor.active_document
        if document is None:
            self.notifier.info("No active editor.")
            return None
        if not document.kind.is_supported:
            self.notifier.info(UNSUPPORTED_KIND_MESSAGE)
            return None

        line_number = self.editor.selection.active_line
        try:
            regions = find_markers_in_line(document.line_at(line_number), document.kind)
            if not regions:
                self.notifier.info("Lazy LaTeX: No markers found on the current line.")
                return None

            logger.info(
                "Convert current line command on line %d - found markers: %s",
                line_number,
                _describe(regions),
            )
            return await self._convert_line(document, line_number, regions)
        except ConfigurationError as exc:
            self.notifier.error(friendly_error_message(exc))
        except Exception:
            logger.exception("Failed to process current line")
            self.notifier.error(
                "Lazy LaTeX: Failed to process current line. See output for details."
            )
        return None

    async def convert_selection(self) -> str | None:
        """Replace the selected text with LaTeX generated from it.

        Returns:
            The LaTeX written into the document, or None if nothing changed.
        """
        document = self.editor.active_document
        if document is None:
            self.notifier.info("No active editor.")
            return None

        selection = self.editor.selection
        if selection.is_empty:
            self.notifier.info(
                "Lazy LaTeX: select some math or natural language math text first."
            )
            return None

        selected_text = document.get_text(selection)
        context = context_before_line(
            document, selection.start_line, self.settings.conversion.context_lines
        )

        try:
            backend = self._get_backend()
            with self.notifier.status("Lazy LaTeX: generating LaTeX with LLM..."):
                latex = await generate_latex_from_text(backend, selected_text, context)
            if not latex:
                msg = "LLM returned empty result"
                raise EmptyResultError(msg)
        except LazyLatexError as exc:
            log_backend_error(
                exc,
                "Error in manual conversion command "
                "(Lazy LaTeX: Convert selection to math).",
            )
            self.notifier.error(friendly_error_message(exc))
            return None

        with self.session.applying_own_edit():
            await document.replace_range(selection, latex)
        return latex
