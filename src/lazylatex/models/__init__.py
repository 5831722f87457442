"""Data models shared by the scanner, converter and host adapters."""

from lazylatex.models.document import (
    ChangeEvent,
    DocumentKind,
    LineContext,
    Selection,
    TextChange,
)
from lazylatex.models.results import DocumentOutcome, GenerationBatch, LineOutcome

__all__ = [
    "ChangeEvent",
    "DocumentKind",
    "DocumentOutcome",
    "GenerationBatch",
    "LineContext",
    "LineOutcome",
    "Selection",
    "TextChange",
]
