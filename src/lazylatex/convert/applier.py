"""Apply a line's replacement operations to the host document."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lazylatex.convert.replacements import sort_for_application
from lazylatex.models.document import DocumentKind

if TYPE_CHECKING:
    from lazylatex.convert.replacements import Replacement
    from lazylatex.editor.protocol import Editor, TextDocument
    from lazylatex.session import EditSession

logger = logging.getLogger(__name__)

COMMENT_TAG = "[lazy-latex input]"


def original_comment(line: str, kind: DocumentKind) -> str:
    """Comment line that preserves the original input above a converted line."""
    if kind is DocumentKind.MARKDOWN:
        return f"<!-- {COMMENT_TAG} {line} -->"
    return f"% {COMMENT_TAG} {line}"


async def apply_line_edit(
    editor: Editor,
    document: TextDocument,
    line_number: int,
    original_line: str,
    replacements: list[Replacement],
    *,
    session: EditSession,
    keep_original: bool = False,
) -> bool:
    """Apply every operation for one line as one atomic document edit.

    Args:
        editor: Host editor; the edit is abandoned if it no longer shows
            ``document``.
        document: Document being converted.
        line_number: Zero-based target line.
        original_line: Line text the replacements were computed against.
        replacements: Operations in original-line coordinates.
        session: Reentrancy guards; the edit runs inside
            ``session.applying_own_edit()``.
        keep_original: Insert the original line as a comment above it.

    Returns:
        True if the edit landed.
    """
    if not replacements:
        return False

    if editor.active_document is not document:
        logger.debug("Active document changed; dropping edit for line %d", line_number)
        return False

    comment = None
    if keep_original and original_line.strip():
        comment = original_comment(original_line, document.kind)

    ordered = sort_for_application(replacements)
    with session.applying_own_edit():
        applied = await document.apply_line_edit(line_number, ordered, comment=comment)

    if applied:
        logger.info(
            "Converted line %d (%d replacement(s)%s)",
            line_number,
            len(ordered),
            ", original kept as comment" if comment else "",
        )
    return applied
