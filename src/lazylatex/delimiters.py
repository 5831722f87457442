"""Output math delimiters per document kind.

LaTeX documents use the configured styles; Markdown always uses ``$`` and
``$$`` since that is what Markdown math renderers understand.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from lazylatex.models.document import DocumentKind

if TYPE_CHECKING:
    from lazylatex.config import OutputConfig


@dataclass(frozen=True)
class DelimiterPair:
    open: str
    close: str


@dataclass(frozen=True)
class OutputDelimiters:
    inline: DelimiterPair
    display: DelimiterPair


DOLLAR = DelimiterPair("$", "$")
PAREN = DelimiterPair("\\(", "\\)")
DOUBLE_DOLLAR = DelimiterPair("$$", "$$")
BRACKETS = DelimiterPair("\\[", "\\]")

MARKDOWN_DELIMITERS = OutputDelimiters(inline=DOLLAR, display=DOUBLE_DOLLAR)


def get_output_delimiters(kind: DocumentKind, output: OutputConfig) -> OutputDelimiters:
    """Return the delimiters to write into a document of ``kind``."""
    if kind is DocumentKind.MARKDOWN:
        return MARKDOWN_DELIMITERS

    inline = PAREN if output.inline_style == "paren" else DOLLAR
    display = DOUBLE_DOLLAR if output.display_style == "dollars" else BRACKETS
    return OutputDelimiters(inline=inline, display=display)
