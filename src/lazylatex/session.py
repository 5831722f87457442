"""Reentrancy guards for edits made by the converter itself.

One ``EditSession`` is created per host (editor window, CLI run) and passed to
everything that can mutate a buffer or react to a buffer event. The two flags
are set only through the context managers, which clear them on every exit
path.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass
class EditSession:
    """Process-wide conversion state, made explicit.

    Attributes:
        applying_edit: A converter edit is being applied; change listeners must
            ignore the events it produces.
        save_in_progress: A save-time conversion pass is running; the save
            hooks must not start another one.
    """

    applying_edit: bool = False
    save_in_progress: bool = False

    @contextmanager
    def applying_own_edit(self) -> Iterator[None]:
        """Mark the enclosed block as the converter's own buffer edit."""
        self.applying_edit = True
        try:
            yield
        finally:
            self.applying_edit = False

    @contextmanager
    def save_pass(self) -> Iterator[None]:
        """Mark the enclosed block as a save-triggered conversion pass."""
        self.save_in_progress = True
        try:
            yield
        finally:
            self.save_in_progress = False
