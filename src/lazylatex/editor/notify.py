"""Notifier implementations: rich console output and a recorder for tests."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from collections.abc import Iterator


class ConsoleNotifier:
    """Shows messages on a rich console; status messages use a spinner."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def info(self, message: str) -> None:
        self.console.print(escape(message))

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/]", highlight=False)

    @contextmanager
    def status(self, message: str) -> Iterator[object]:
        with self.console.status(message) as status:
            yield status


@dataclass
class RecordingNotifier:
    """Collects messages instead of showing them."""

    infos: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    statuses: list[str] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    @contextmanager
    def status(self, message: str) -> Iterator[object]:
        self.statuses.append(message)
        yield None
