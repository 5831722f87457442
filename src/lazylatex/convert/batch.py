"""Batch request orchestration for the markers of one line.

Math markers (inline and display) share one backend request so the
expressions on a line are generated consistently; if that request fails, no
math marker on the line is converted. Free-text markers are requested one by
one and fail independently. All requests are awaited in sequence.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lazylatex.errors import LazyLatexError, log_backend_error
from lazylatex.llm.generate import (
    generate_anything_from_instruction,
    generate_latex_for_batch,
)
from lazylatex.markers.scanner import MarkerKind
from lazylatex.models.results import GenerationBatch

if TYPE_CHECKING:
    from lazylatex.llm.protocol import TextGenerationBackend
    from lazylatex.markers.scanner import MarkerRegion
    from lazylatex.models.document import DocumentKind, LineContext

logger = logging.getLogger(__name__)


def partition_regions(
    regions: list[MarkerRegion],
) -> tuple[list[MarkerRegion], list[MarkerRegion]]:
    """Split regions into (math, free text), each in original order."""
    math = [r for r in regions if r.kind.is_math]
    free_text = [r for r in regions if r.kind is MarkerKind.FREE_TEXT]
    return math, free_text


async def request_generations(
    backend: TextGenerationBackend,
    regions: list[MarkerRegion],
    context: LineContext,
    kind: DocumentKind,
    *,
    line_number: int | None = None,
) -> GenerationBatch:
    """Ask the backend for the text of every region on a line.

    Args:
        backend: Text-generation backend.
        regions: Marker regions of one line, left to right.
        context: Prior-line context and the full line.
        kind: Document kind, passed on to free-text requests.
        line_number: Used only to make log messages line-accurate.

    Returns:
        GenerationBatch with the non-empty results and the tolerated errors.
    """
    batch = GenerationBatch()
    math_regions, free_text_regions = partition_regions(regions)

    if math_regions:
        descriptions = [r.inner.strip() for r in math_regions]
        try:
            latex_list = await generate_latex_for_batch(backend, descriptions, context)
        except LazyLatexError as exc:
            log_backend_error(
                exc, f"Error in auto math conversion on line {line_number}."
            )
            batch.errors.append(exc)
            latex_list = []

        for region, latex in zip(math_regions, latex_list, strict=False):
            latex = latex.strip()
            if latex:
                batch.results[region] = latex

    for region in free_text_regions:
        instruction = region.inner.strip()
        if not instruction:
            continue
        try:
            generated = await generate_anything_from_instruction(
                backend, instruction, context, kind
            )
        except LazyLatexError as exc:
            log_backend_error(
                exc,
                f"Error in insert-anything mode (;;;;...;;;;) on line {line_number}.",
            )
            batch.errors.append(exc)
            continue

        text = generated.strip()
        if text:
            batch.results[region] = text

    logger.debug(
        "Line %s: %d/%d regions generated, %d errors",
        line_number,
        len(batch.results),
        len(regions),
        len(batch.errors),
    )
    return batch
