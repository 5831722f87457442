"""Whole-document convergence loop.

Converting a display marker inserts line breaks, which shifts every later line
number. So the loop never caches line numbers across an edit: each pass takes
a fresh look at the document, converts the first line that has markers, and
starts over from the top once an edit lands. A line whose conversion produced
no edit leaves the document untouched, so the same pass simply moves on to
the next line.

The loop stops when a pass lands no edit, or after ``max_passes`` passes, the
bound for a backend that keeps producing marker-like text. It does not wait
for a scan that finds no markers at all: a line whose conversion keeps failing
is retried once per pass and then left as it is for the next trigger. An
unexpected error on one line is logged and recorded, and the pass moves on to
the next line.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lazylatex.errors import ConfigurationError, LazyLatexError
from lazylatex.markers.scanner import find_markers_in_line
from lazylatex.models.results import DocumentOutcome

if TYPE_CHECKING:
    from lazylatex.convert.pipeline import MarkerConverter
    from lazylatex.editor.protocol import TextDocument

logger = logging.getLogger(__name__)


async def _run_pass(
    converter: MarkerConverter, document: TextDocument, outcome: DocumentOutcome
) -> bool:
    """Scan top to bottom; return True once one line has been converted."""
    line_number = 0
    while line_number < document.line_count:
        regions = find_markers_in_line(document.line_at(line_number), document.kind)
        if regions:
            try:
                line = await converter.process_line(document, line_number, regions)
            except ConfigurationError:
                raise
            except Exception:
                logger.exception("Failed to process line %d", line_number)
                msg = f"Failed to process line {line_number + 1}"
                outcome.errors.append(LazyLatexError(msg))
                line_number += 1
                continue
            outcome.errors.extend(line.errors)
            if line.applied:
                outcome.lines_converted.append(line_number)
                return True
        line_number += 1
    return False


async def converge(
    converter: MarkerConverter, document: TextDocument, *, max_passes: int
) -> DocumentOutcome:
    """Convert markers until a pass finds nothing left to convert.

    Args:
        converter: Per-line converter (backend, editor, session, settings).
        document: Document to convert. Only LaTeX and Markdown are handled.
        max_passes: Upper bound on the number of passes.

    Returns:
        DocumentOutcome; ``converted`` is True if at least one line changed.
    """
    outcome = DocumentOutcome()
    if not document.kind.is_supported:
        return outcome
    if converter.editor.active_document is not document:
        return outcome

    while outcome.passes < max_passes:
        outcome.passes += 1
        if not await _run_pass(converter, document, outcome):
            break
        if converter.editor.active_document is not document:
            logger.debug("Active document changed; stopping conversion")
            break
    else:
        outcome.hit_pass_limit = True
        logger.warning(
            "Reached max passes (%d) while processing document markers.", max_passes
        )

    outcome.converted = bool(outcome.lines_converted)
    return outcome
