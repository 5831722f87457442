"""Outcome records returned by the conversion core.

The core never shows messages. It returns these records, with any errors it
tolerated, and the command handlers decide what to tell the user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lazylatex.convert.replacements import Replacement
    from lazylatex.errors import LazyLatexError
    from lazylatex.markers.scanner import MarkerRegion


@dataclass
class GenerationBatch:
    """Generated text for the regions of one line.

    Attributes:
        results: Trimmed, non-empty text per region. A region missing from
            the mapping is left untouched.
        errors: Failures that were tolerated, in request order.
    """

    results: dict[MarkerRegion, str] = field(default_factory=dict)
    errors: list[LazyLatexError] = field(default_factory=list)


@dataclass
class LineOutcome:
    """What happened to one line.

    Attributes:
        line_number: Zero-based line that was processed.
        regions: Marker regions found on the line.
        replacements: Operations built for the line (empty if nothing to do).
        applied: Whether the edit landed in the document.
        errors: Backend or generation failures that were tolerated.
    """

    line_number: int
    regions: list[MarkerRegion] = field(default_factory=list)
    replacements: list[Replacement] = field(default_factory=list)
    applied: bool = False
    errors: list[LazyLatexError] = field(default_factory=list)


@dataclass
class DocumentOutcome:
    """Summary of a whole-document convergence run.

    Attributes:
        converted: At least one line was converted.
        passes: Number of top-to-bottom passes started.
        lines_converted: Line numbers edited, in processing order. Numbers
            refer to the document as it was at the time of the edit.
        errors: Tolerated failures from every processed line.
        hit_pass_limit: The run stopped because of the pass limit.
    """

    converted: bool = False
    passes: int = 0
    lines_converted: list[int] = field(default_factory=list)
    errors: list[LazyLatexError] = field(default_factory=list)
    hit_pass_limit: bool = False
