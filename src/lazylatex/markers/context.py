"""Context assembly: the lines a backend sees around a marker."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lazylatex.models.document import LineContext

if TYPE_CHECKING:
    from lazylatex.editor.protocol import TextDocument


def context_before_line(
    document: TextDocument, line_number: int, max_lines: int
) -> str:
    """Return up to ``max_lines`` lines preceding ``line_number``.

    Clipped at the start of the document; ``max_lines == 0`` yields ``""``.
    """
    if max_lines <= 0 or line_number <= 0:
        return ""
    first = max(0, line_number - max_lines)
    return "\n".join(document.line_at(n) for n in range(first, line_number))


def assemble_context(
    document: TextDocument, line_number: int, max_lines: int
) -> LineContext:
    """Collect prior-line context plus the full target line.

    Args:
        document: Document to read from.
        line_number: Zero-based target line.
        max_lines: Maximum number of preceding lines to include.

    Returns:
        LineContext with ``previous`` and ``current`` text.
    """
    return LineContext(
        previous=context_before_line(document, line_number, max_lines),
        current=document.line_at(line_number),
    )
