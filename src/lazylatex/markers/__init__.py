"""Marker detection and context assembly."""

from lazylatex.markers.context import assemble_context, context_before_line
from lazylatex.markers.scanner import (
    MARKER_CHAR,
    MarkerKind,
    MarkerRegion,
    find_markers,
    find_markers_in_line,
    is_comment_line,
)

__all__ = [
    "MARKER_CHAR",
    "MarkerKind",
    "MarkerRegion",
    "assemble_context",
    "context_before_line",
    "find_markers",
    "find_markers_in_line",
    "is_comment_line",
]
