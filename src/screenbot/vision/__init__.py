"""Vision package: capture normalization, template matching and timed search.

Submodules:
- capture: raw BGRA frames to grayscale
- matcher: template loading and scoring
- search: timed retry loop
- coords: rectangles and capture-to-screen mapping
"""
from .capture import CaptureAdapter, to_gray
from .coords import Rect, CoordinateMapper, to_screen
from .matcher import Template, MatchResult, TemplateMatcher
from .search import NO_DEADLINE, SearchLoop, SearchState

__all__ = [
    "CaptureAdapter",
    "to_gray",
    "Rect",
    "CoordinateMapper",
    "to_screen",
    "Template",
    "MatchResult",
    "TemplateMatcher",
    "NO_DEADLINE",
    "SearchLoop",
    "SearchState",
]
