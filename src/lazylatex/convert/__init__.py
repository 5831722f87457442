"""Marker conversion: requests, replacements, edits and the document loop."""

from lazylatex.convert.applier import apply_line_edit, original_comment
from lazylatex.convert.batch import partition_regions, request_generations
from lazylatex.convert.convergence import converge
from lazylatex.convert.pipeline import MarkerConverter
from lazylatex.convert.replacements import (
    Replacement,
    apply_replacements,
    build_line_replacements,
    build_region_replacements,
)

__all__ = [
    "MarkerConverter",
    "Replacement",
    "apply_line_edit",
    "apply_replacements",
    "build_line_replacements",
    "build_region_replacements",
    "converge",
    "original_comment",
    "partition_regions",
    "request_generations",
]
