"""Marker scanner: find ``;;...;;`` style regions in a single line.

A marker is a run of semicolons. The run length decides the kind:

======  ==============  =========================
Length  Kind            Example
======  ==============  =========================
2       inline math     ``;;x^2;;``
3       display math    ``;;;x^2;;;``
4       free text       ``;;;;insert a table;;;;``
======  ==============  =========================

An opener is closed by the next run of *exactly* the same length on the same
line. Runs of length 1 or longer than 4 never open a region, and an opener
without a closer is plain text. Regions never nest or overlap because the
scan resumes just after each closer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lazylatex.models.document import DocumentKind

MARKER_CHAR = ";"


class MarkerKind(Enum):
    """Region kind, determined solely by the delimiter run length."""

    INLINE = 2
    DISPLAY = 3
    FREE_TEXT = 4

    @property
    def is_math(self) -> bool:
        return self is not MarkerKind.FREE_TEXT


_RUN_KINDS = {kind.value: kind for kind in MarkerKind}


@dataclass(frozen=True, slots=True)
class MarkerRegion:
    """A balanced marker pair and the text between the two runs.

    Attributes:
        kind: INLINE, DISPLAY or FREE_TEXT.
        start: Offset of the first character of the opener.
        end: Offset just past the closer (exclusive).
        inner: Raw, untrimmed text between opener and closer.
    """

    kind: MarkerKind
    start: int
    end: int
    inner: str


def _run_length(line: str, pos: int) -> int:
    """Length of the maximal marker run starting at ``pos``."""
    end = pos
    while end < len(line) and line[end] == MARKER_CHAR:
        end += 1
    return end - pos


def _find_closer(line: str, pos: int, length: int) -> int | None:
    """Offset of the next run of exactly ``length`` markers at or after ``pos``."""
    while pos < len(line):
        if line[pos] != MARKER_CHAR:
            pos += 1
            continue
        run = _run_length(line, pos)
        if run == length:
            return pos
        pos += run
    return None


def find_markers(line: str) -> list[MarkerRegion]:
    """Scan one line for marker regions, left to right.

    Args:
        line: Text of a single line (no newline handling is attempted).

    Returns:
        Non-overlapping regions in left-to-right order. Malformed or
        unterminated markers simply produce no region.

    Example:
        >>> [(r.kind.name, r.inner) for r in find_markers("let ;;x^2;; and ;;;y;;;")]
        [('INLINE', 'x^2'), ('DISPLAY', 'y')]
    """
    regions: list[MarkerRegion] = []
    pos = 0

    while pos < len(line):
        if line[pos] != MARKER_CHAR:
            pos += 1
            continue

        run = _run_length(line, pos)
        kind = _RUN_KINDS.get(run)
        inner_start = pos + run

        if kind is None:
            # Length 1 or >4: plain text
            pos = inner_start
            continue

        closer = _find_closer(line, inner_start, run)
        if closer is None:
            pos = inner_start
            continue

        end = closer + run
        regions.append(
            MarkerRegion(
                kind=kind,
                start=pos,
                end=end,
                inner=line[inner_start:closer],
            )
        )
        pos = end

    return regions


def is_comment_line(line: str, kind: DocumentKind) -> bool:
    """Whether the whole line is a comment in a document of ``kind``."""
    stripped = line.lstrip()
    if kind is DocumentKind.LATEX:
        return stripped.startswith("%")
    if kind is DocumentKind.MARKDOWN:
        return stripped.startswith("<!--")
    return False


def find_markers_in_line(line: str, kind: DocumentKind) -> list[MarkerRegion]:
    """Like ``find_markers`` but ignores comment lines of the document kind.

    Comment lines hold kept originals (``% [lazy-latex input] ;;x;;``), which
    must never be converted again.
    """
    if is_comment_line(line, kind):
        return []
    return find_markers(line)
