"""Plain dataclasses describing documents, selections and buffer changes.

These mirror the small subset of a host editor's model that the converter
needs: a document kind, line-addressed positions and change notifications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lazylatex.editor.protocol import TextDocument

_SUFFIX_KINDS = {
    ".tex": "latex",
    ".ltx": "latex",
    ".sty": "latex",
    ".md": "markdown",
    ".markdown": "markdown",
    ".mdx": "markdown",
}


class DocumentKind(StrEnum):
    """Language of a document, as far as marker conversion cares."""

    LATEX = "latex"
    MARKDOWN = "markdown"
    OTHER = "plaintext"

    @classmethod
    def from_path(cls, path: str | PurePath) -> DocumentKind:
        """Guess the kind from a file suffix."""
        suffix = PurePath(path).suffix.lower()
        return cls(_SUFFIX_KINDS.get(suffix, cls.OTHER.value))

    @property
    def is_supported(self) -> bool:
        """Whether markers are converted in documents of this kind."""
        return self is not DocumentKind.OTHER


@dataclass(frozen=True)
class LineContext:
    """Context handed to the backend for one line.

    Attributes:
        previous: Up to N lines before the target line, joined by newlines.
        current: Full text of the target line.
    """

    previous: str
    current: str


@dataclass(frozen=True)
class Selection:
    """A character range in a document; the cursor sits at the end.

    Attributes:
        start_line: Zero-based line of the first selected character.
        start_char: Offset of the first selected character in its line.
        end_line: Zero-based line where the selection ends.
        end_char: Offset just past the last selected character.
    """

    start_line: int
    start_char: int
    end_line: int
    end_char: int

    @classmethod
    def cursor(cls, line: int, char: int = 0) -> Selection:
        """An empty selection (a plain cursor)."""
        return cls(line, char, line, char)

    @property
    def is_empty(self) -> bool:
        return self.start_line == self.end_line and self.start_char == self.end_char

    @property
    def active_line(self) -> int:
        """Line the cursor is on."""
        return self.end_line


@dataclass(frozen=True)
class TextChange:
    """One contiguous edit reported by the host.

    Attributes:
        start_line: Line where the replaced range started.
        start_char: Offset in that line where the replaced range started.
        text: Text inserted in place of the range.
    """

    start_line: int
    start_char: int
    text: str


@dataclass(frozen=True)
class ChangeEvent:
    """A change notification for one document."""

    document: TextDocument
    changes: list[TextChange] = field(default_factory=list)
