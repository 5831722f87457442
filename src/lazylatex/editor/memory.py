"""In-memory host: a list-of-lines document and a single-document editor.

Used by the command line (one file at a time) and by the tests. Change and
save notifications are delivered by awaiting each registered listener, in
registration order, before the mutating call returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from lazylatex.convert.replacements import apply_replacements
from lazylatex.models.document import (
    ChangeEvent,
    DocumentKind,
    Selection,
    TextChange,
)

if TYPE_CHECKING:
    from lazylatex.convert.replacements import Replacement
    from lazylatex.editor.protocol import ChangeListener, SaveListener, TextDocument

logger = logging.getLogger(__name__)


class InMemoryDocument:
    """A text document held as a list of lines.

    Attributes:
        kind: Document kind (decides comment syntax and delimiters).
        path: File written by ``save()``; ``None`` keeps the text in memory.
        save_count: Number of completed saves.
    """

    def __init__(
        self,
        text: str = "",
        *,
        kind: DocumentKind = DocumentKind.LATEX,
        path: Path | None = None,
    ) -> None:
        self.kind = kind
        self.path = path
        self.save_count = 0
        self._lines = text.split("\n")
        self._change_listeners: list[ChangeListener] = []
        self._will_save_listeners: list[SaveListener] = []
        self._did_save_listeners: list[SaveListener] = []

    @classmethod
    def from_path(cls, path: Path) -> InMemoryDocument:
        """Load a UTF-8 file; the kind is guessed from its suffix."""
        return cls(
            path.read_text(encoding="utf-8"),
            kind=DocumentKind.from_path(path),
            path=path,
        )

    # -- reading -----------------------------------------------------------

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, line_number: int) -> str:
        if not 0 <= line_number < len(self._lines):
            msg = f"Line {line_number} out of range (0..{len(self._lines) - 1})"
            raise IndexError(msg)
        return self._lines[line_number]

    def _offset(self, line: int, char: int) -> int:
        """Absolute offset of a (line, char) position in ``text``."""
        self.line_at(line)
        return sum(len(prev) + 1 for prev in self._lines[:line]) + char

    def get_text(self, selection: Selection) -> str:
        start = self._offset(selection.start_line, selection.start_char)
        end = self._offset(selection.end_line, selection.end_char)
        return self.text[start:end]

    # -- listeners ---------------------------------------------------------

    def on_did_change(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    def on_will_save(self, listener: SaveListener) -> None:
        self._will_save_listeners.append(listener)

    def on_did_save(self, listener: SaveListener) -> None:
        self._did_save_listeners.append(listener)

    async def _notify(self, changes: list[TextChange]) -> None:
        event = ChangeEvent(document=self, changes=changes)
        for listener in list(self._change_listeners):
            await listener(event)

    # -- editing -----------------------------------------------------------

    async def insert(self, line: int, char: int, text: str) -> None:
        """Insert text as if typed by the user (e.g. ``"\\n"`` for Enter)."""
        offset = self._offset(line, char)
        full = self.text
        self._lines = (full[:offset] + text + full[offset:]).split("\n")
        await self._notify([TextChange(start_line=line, start_char=char, text=text)])

    async def apply_line_edit(
        self,
        line_number: int,
        replacements: list[Replacement],
        *,
        comment: str | None = None,
    ) -> bool:
        """Replace one line atomically; see ``TextDocument.apply_line_edit``."""
        original = self.line_at(line_number)
        # Raises before any mutation if the operations overlap
        new_lines = apply_replacements(original, replacements).split("\n")
        if comment is not None:
            new_lines.insert(0, comment)
        if new_lines == [original]:
            return False

        self._lines[line_number : line_number + 1] = new_lines

        changes: list[TextChange] = []
        if comment is not None:
            changes.append(TextChange(line_number, 0, comment + "\n"))
        target = line_number + (1 if comment is not None else 0)
        changes.extend(TextChange(target, rep.start, rep.text) for rep in replacements)
        await self._notify(changes)
        return True

    async def replace_range(self, selection: Selection, text: str) -> bool:
        start = self._offset(selection.start_line, selection.start_char)
        end = self._offset(selection.end_line, selection.end_char)
        full = self.text
        if full[start:end] == text:
            return False
        self._lines = (full[:start] + text + full[end:]).split("\n")
        await self._notify(
            [TextChange(selection.start_line, selection.start_char, text)]
        )
        return True

    async def save(self) -> None:
        """Run will-save hooks, write the file (if any), run did-save hooks."""
        for listener in list(self._will_save_listeners):
            await listener(self)
        if self.path is not None:
            self.path.write_text(self.text, encoding="utf-8")
            logger.debug("Saved %s", self.path)
        self.save_count += 1
        for listener in list(self._did_save_listeners):
            await listener(self)


@dataclass
class InMemoryEditor:
    """An editor showing at most one document at a time."""

    active_document: TextDocument | None = None
    selection: Selection = field(default_factory=lambda: Selection.cursor(0))
