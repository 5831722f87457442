"""Replacement building: generated text + marker region -> line edits.

Every operation uses offsets into the *original* line, i.e. the same
coordinate space as the scan that produced the region. Operations for one
line never overlap and are applied right to left, so applying one never moves
the offsets of another that has not been applied yet.

Rules per region kind:

- INLINE: ``open + text + close`` over the region.
- DISPLAY: ``open\\ntext\\nclose\\n`` over the region, preceded by a blank line
  when non-whitespace text precedes the region. A punctuation mark following
  the region (after optional whitespace) moves inside the block as
  `` <mark>`` and is deleted from the line together with the whitespace on
  both sides of it.
- FREE_TEXT: the generated text as-is.
- All kinds: whitespace between the region and a following single ``;`` is
  deleted, keeping the semicolon.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lazylatex.markers.scanner import MARKER_CHAR, MarkerKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from lazylatex.delimiters import OutputDelimiters
    from lazylatex.markers.scanner import MarkerRegion

logger = logging.getLogger(__name__)

ABSORBED_PUNCTUATION = ".,;:!?"


@dataclass(frozen=True, slots=True)
class Replacement:
    """Replace ``line[start:end]`` with ``text`` (offsets in the original line)."""

    start: int
    end: int
    text: str


def _skip_whitespace(line: str, pos: int) -> int:
    while pos < len(line) and line[pos].isspace():
        pos += 1
    return pos


def _semicolon_despacing(line: str, end: int) -> Replacement | None:
    """Delete whitespace between a region and a following lone semicolon."""
    pos = _skip_whitespace(line, end)
    if pos == end or pos >= len(line) or line[pos] != MARKER_CHAR:
        return None
    if pos + 1 < len(line) and line[pos + 1] == MARKER_CHAR:
        # Part of another marker run, not punctuation
        return None
    return Replacement(start=end, end=pos, text="")


def _absorbed_punctuation(line: str, end: int) -> tuple[str, Replacement] | None:
    """Find punctuation after a display region and the edit that removes it."""
    pos = _skip_whitespace(line, end)
    if pos >= len(line) or line[pos] not in ABSORBED_PUNCTUATION:
        return None
    if line.startswith(MARKER_CHAR * 2, pos):
        # Opens the next marker region
        return None
    after = _skip_whitespace(line, pos + 1)
    return line[pos], Replacement(start=end, end=after, text="")


def build_region_replacements(
    region: MarkerRegion,
    generated: str,
    line: str,
    delimiters: OutputDelimiters,
) -> list[Replacement]:
    """Turn one region's generated text into replacement operations.

    Args:
        region: The marker region, as found in ``line``.
        generated: Text produced for the region. Blank text yields no edits.
        line: The original line the region was scanned from.
        delimiters: Output math delimiters for the document.

    Returns:
        One or two non-overlapping operations; the region replacement comes
        first.
    """
    text = generated.strip()
    if not text:
        return []

    extra: list[Replacement] = []
    absorbed = None
    if region.kind is MarkerKind.DISPLAY:
        absorbed = _absorbed_punctuation(line, region.end)

    # Absorption already removes the whitespace before the mark
    despace = None if absorbed is not None else _semicolon_despacing(line, region.end)
    if despace is not None:
        extra.append(despace)

    if region.kind is MarkerKind.INLINE:
        inline = delimiters.inline
        replacement_text = f"{inline.open}{text}{inline.close}"
    elif region.kind is MarkerKind.DISPLAY:
        if absorbed is not None:
            mark, removal = absorbed
            text = f"{text} {mark}"
            extra.append(removal)

        display = delimiters.display
        replacement_text = f"{display.open}\n{text}\n{display.close}\n"
        # Display math always starts on a fresh line
        if line[: region.start].strip():
            replacement_text = "\n" + replacement_text
    else:
        replacement_text = text

    return [Replacement(region.start, region.end, replacement_text), *extra]


def build_line_replacements(
    regions: Iterable[MarkerRegion],
    results: Mapping[MarkerRegion, str],
    line: str,
    delimiters: OutputDelimiters,
) -> list[Replacement]:
    """Collect the operations for every region of a line that has a result."""
    replacements: list[Replacement] = []
    for region in regions:
        generated = results.get(region)
        if generated is None:
            continue
        replacements.extend(
            build_region_replacements(region, generated, line, delimiters)
        )
    return replacements


def _check_non_overlapping(line: str, ordered: list[Replacement]) -> None:
    """Validate operations sorted by descending start against ``line``."""
    upper = len(line)
    for rep in ordered:
        if not 0 <= rep.start <= rep.end <= upper:
            msg = (
                f"Replacement [{rep.start}, {rep.end}) overlaps another or lies "
                f"outside the line (length {len(line)})"
            )
            raise ValueError(msg)
        upper = rep.start


def sort_for_application(replacements: Iterable[Replacement]) -> list[Replacement]:
    """Order operations for right-to-left application (descending start)."""
    return sorted(replacements, key=lambda r: (r.start, r.end), reverse=True)


def apply_replacements(line: str, replacements: Iterable[Replacement]) -> str:
    """Apply operations to ``line`` right to left.

    Raises:
        ValueError: If operations overlap or fall outside the line. Nothing is
            applied in that case.
    """
    ordered = sort_for_application(replacements)
    _check_non_overlapping(line, ordered)

    result = line
    for rep in ordered:
        result = result[: rep.start] + rep.text + result[rep.end :]
    return result
