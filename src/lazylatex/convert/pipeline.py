"""Per-line conversion pipeline.

scan -> context -> backend requests -> replacement building -> edit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lazylatex.convert.applier import apply_line_edit
from lazylatex.convert.batch import request_generations
from lazylatex.convert.convergence import converge
from lazylatex.convert.replacements import build_line_replacements
from lazylatex.delimiters import get_output_delimiters
from lazylatex.markers.context import assemble_context
from lazylatex.markers.scanner import find_markers_in_line
from lazylatex.models.results import DocumentOutcome, LineOutcome

if TYPE_CHECKING:
    from lazylatex.config import Settings
    from lazylatex.editor.protocol import Editor, TextDocument
    from lazylatex.llm.protocol import TextGenerationBackend
    from lazylatex.markers.scanner import MarkerRegion
    from lazylatex.session import EditSession

logger = logging.getLogger(__name__)


class MarkerConverter:
    """Converts marker regions in documents shown by one editor.

    Holds the collaborators every conversion needs so callers pass only the
    document and line.
    """

    def __init__(
        self,
        backend: TextGenerationBackend,
        editor: Editor,
        session: EditSession,
        settings: Settings,
    ) -> None:
        self.backend = backend
        self.editor = editor
        self.session = session
        self.settings = settings

    async def process_line(
        self,
        document: TextDocument,
        line_number: int,
        regions: list[MarkerRegion] | None = None,
    ) -> LineOutcome:
        """Convert every marker region on one line.

        Args:
            document: Document holding the line.
            line_number: Zero-based line to convert.
            regions: Regions already scanned from the current line text; the
                line is scanned when omitted.

        Returns:
            LineOutcome describing what was generated and whether the edit
            landed. Backend failures are recorded, not raised.
        """
        outcome = LineOutcome(line_number=line_number)
        if self.editor.active_document is not document:
            return outcome

        original_line = document.line_at(line_number)
        if regions is None:
            regions = find_markers_in_line(original_line, document.kind)
        outcome.regions = list(regions)
        if not regions:
            return outcome

        conversion = self.settings.conversion
        context = assemble_context(document, line_number, conversion.context_lines)
        batch = await request_generations(
            self.backend,
            outcome.regions,
            context,
            document.kind,
            line_number=line_number,
        )
        outcome.errors.extend(batch.errors)

        delimiters = get_output_delimiters(document.kind, self.settings.output)
        outcome.replacements = build_line_replacements(
            outcome.regions, batch.results, original_line, delimiters
        )
        outcome.applied = await apply_line_edit(
            self.editor,
            document,
            line_number,
            original_line,
            outcome.replacements,
            session=self.session,
            keep_original=conversion.keep_original_comment,
        )
        return outcome

    async def process_document(self, document: TextDocument) -> DocumentOutcome:
        """Convert every marker in ``document``; see ``converge``."""
        return await converge(
            self, document, max_passes=self.settings.conversion.max_passes
        )
