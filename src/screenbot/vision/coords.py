"""Rectangles in capture-pixel space and their mapping to input coordinates.

Captures are taken at backing-store resolution, which can be a fixed multiple
(dpi_ratio) of the point space used for input injection.
"""
from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Tuple

from ..config.vision import DEFAULT_HIGH_DPI_RATIO


@dataclass(frozen=True)
class Rect:
    """Zone of a window in capture pixels, relative to the window's top-left."""

    x: int
    y: int
    width: int
    height: int

    def center(self) -> Tuple[int, int]:
        return self.x + self.width // 2, self.y + self.height // 2


def _trunc_div(value: int, ratio: int) -> int:
    q = abs(int(value)) // ratio
    return q if value >= 0 else -q


def check_dpi_ratio(value) -> int:
    """Return `value` as an int, rejecting non-integers and values below 1."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"dpi_ratio must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"dpi_ratio must be >= 1, got {value}")
    return int(value)


def to_screen(window_origin: Tuple[float, float], dpi_ratio: int, relative_point: Tuple[int, int]) -> Tuple[int, int]:
    """Map a capture-pixel point to screen injection coordinates.

    screen = relative / dpi_ratio + origin, integer division truncating toward
    zero; the origin is truncated to whole points.
    """
    dpi_ratio = check_dpi_ratio(dpi_ratio)
    ox, oy = window_origin
    rx, ry = relative_point
    return _trunc_div(rx, dpi_ratio) + int(ox), _trunc_div(ry, dpi_ratio) + int(oy)


class CoordinateMapper:
    """to_screen() bound to a session dpi ratio."""

    def __init__(self, dpi_ratio: int = DEFAULT_HIGH_DPI_RATIO) -> None:
        self.dpi_ratio = dpi_ratio

    @property
    def dpi_ratio(self) -> int:
        return self._dpi_ratio

    @dpi_ratio.setter
    def dpi_ratio(self, value: int) -> None:
        self._dpi_ratio = check_dpi_ratio(value)

    def to_screen(self, window_origin: Tuple[float, float], relative_point: Tuple[int, int]) -> Tuple[int, int]:
        return to_screen(window_origin, self._dpi_ratio, relative_point)
