"""Conversion requests built on top of a TextGenerationBackend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lazylatex.llm.prompt import (
    BATCH_SYSTEM_PROMPT,
    SINGLE_SYSTEM_PROMPT,
    build_batch_prompt,
    build_free_text_prompt,
    build_single_prompt,
    free_text_system_prompt,
    parse_batch_response,
    strip_code_fences,
)

if TYPE_CHECKING:
    from lazylatex.llm.protocol import TextGenerationBackend
    from lazylatex.models.document import DocumentKind, LineContext

logger = logging.getLogger(__name__)


async def generate_latex_from_text(
    backend: TextGenerationBackend, text: str, context: str = ""
) -> str:
    """Convert informal math text into a single LaTeX expression (no ``$``).

    Returns:
        The expression, possibly empty if the backend produced nothing.
    """
    reply = await backend.complete(
        SINGLE_SYSTEM_PROMPT, build_single_prompt(text, context)
    )
    return strip_code_fences(reply)


async def generate_latex_for_batch(
    backend: TextGenerationBackend,
    descriptions: list[str],
    context: LineContext,
) -> list[str]:
    """Convert every math description of one line in a single request.

    Returns:
        One string per description, index-aligned; ``""`` means "leave alone".

    Raises:
        BackendError: If the call fails or the reply does not have one entry
            per description.
    """
    if not descriptions:
        return []
    logger.debug("Batch request with %d math descriptions", len(descriptions))
    reply = await backend.complete(
        BATCH_SYSTEM_PROMPT, build_batch_prompt(descriptions, context)
    )
    return parse_batch_response(reply, len(descriptions))


async def generate_anything_from_instruction(
    backend: TextGenerationBackend,
    instruction: str,
    context: LineContext,
    kind: DocumentKind,
) -> str:
    """Produce free text for one ``;;;;instruction;;;;`` marker."""
    reply = await backend.complete(
        free_text_system_prompt(kind), build_free_text_prompt(instruction, context)
    )
    return strip_code_fences(reply)
