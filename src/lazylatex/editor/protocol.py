"""Protocols describing the host editor the converter runs inside.

The converter only needs a line-addressable text store with range replacement
and change notifications, an "active editor" view of it, and somewhere to
show messages. Any editor integration (or the in-memory host used by the CLI
and the tests) implements these.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from contextlib import AbstractContextManager

    from lazylatex.convert.replacements import Replacement
    from lazylatex.models.document import ChangeEvent, DocumentKind, Selection

    ChangeListener = Callable[[ChangeEvent], Awaitable[None]]
    SaveListener = Callable[["TextDocument"], Awaitable[None]]


class TextDocument(Protocol):
    """A line-addressable text buffer."""

    kind: DocumentKind

    @property
    def line_count(self) -> int:
        """Number of lines in the document."""
        ...

    def line_at(self, line_number: int) -> str:
        """Text of one line, without its line break.

        Raises:
            IndexError: If ``line_number`` is out of range.
        """
        ...

    def get_text(self, selection: Selection) -> str:
        """Text covered by ``selection``."""
        ...

    async def apply_line_edit(
        self,
        line_number: int,
        replacements: list[Replacement],
        *,
        comment: str | None = None,
    ) -> bool:
        """Apply all replacements to one line as a single atomic edit.

        Offsets in ``replacements`` refer to the line before the edit. When
        ``comment`` is given it is inserted as a new line above the target
        line in the same edit. Either everything lands or nothing does.

        Returns:
            True if the document changed.
        """
        ...

    async def replace_range(self, selection: Selection, text: str) -> bool:
        """Replace the text covered by ``selection``."""
        ...

    async def save(self) -> None:
        """Persist the document, running the host's save hooks."""
        ...


class Editor(Protocol):
    """The host's active editor: which document is focused, and where."""

    @property
    def active_document(self) -> TextDocument | None: ...

    @property
    def selection(self) -> Selection: ...


class Notifier(Protocol):
    """User-facing messages. Only command and event handlers use this."""

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def status(self, message: str) -> AbstractContextManager[object]:
        """Show a transient status message while the block runs."""
        ...
