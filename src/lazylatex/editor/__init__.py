"""Host editor interfaces and the in-memory host."""

from lazylatex.editor.memory import InMemoryDocument, InMemoryEditor
from lazylatex.editor.notify import ConsoleNotifier, RecordingNotifier
from lazylatex.editor.protocol import Editor, Notifier, TextDocument

__all__ = [
    "ConsoleNotifier",
    "Editor",
    "InMemoryDocument",
    "InMemoryEditor",
    "Notifier",
    "RecordingNotifier",
    "TextDocument",
]
