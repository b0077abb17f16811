"""Window descriptors and platform dispatch for enumeration and capture.

Backends live in io.mac (Quartz) and io.win (user32 + mss); they are imported
on first use so this module imports on any platform.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional

from ..config.vision import DEFAULT_SAMPLE_RATE
from ..core.errors import PlatformError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    """Screen-space rectangle of a window, in points."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class WindowDescriptor:
    """Snapshot of one window's identity and geometry."""

    id: int
    name: str
    owner_name: str
    bounds: Optional[Bounds] = None
    sample_rate: float = DEFAULT_SAMPLE_RATE

    def with_sample_rate(self, value: float) -> "WindowDescriptor":
        """Return a copy capturing `value` frames per second while searching."""
        return replace(self, sample_rate=float(value))


@dataclass(frozen=True)
class RawFrame:
    """Pixel buffer as delivered by the display server.

    `data` is row-major, `bytes_per_row` per row (may include padding), 4
    channels in BGRA order. `width` is the logical pixel width declared by
    the backend.
    """

    width: int
    height: int
    bytes_per_row: int
    bits_per_pixel: int
    bits_per_component: int
    data: bytes


def _backend():
    if sys.platform == "darwin":
        from . import mac
        return mac
    if sys.platform == "win32":
        from . import win
        return win
    raise PlatformError(f"Window enumeration is not supported on platform {sys.platform!r}")


def enumerate_windows() -> List[WindowDescriptor]:
    """Return descriptors for all on-screen windows, in window-server order."""
    windows = _backend().list_windows()
    logger.debug("windows: enumerated %d windows", len(windows))
    return windows


def capture_raw(window_id: int) -> RawFrame:
    """Grab the current on-screen pixels of a window."""
    return _backend().capture(window_id)


class WindowList:
    """List of on-screen windows."""

    NAME_WIDTH = 30

    def __init__(self, windows: Optional[Iterable[WindowDescriptor]] = None) -> None:
        self.windows: List[WindowDescriptor] = list(windows) if windows is not None else enumerate_windows()

    def __iter__(self) -> Iterator[WindowDescriptor]:
        return iter(self.windows)

    def __len__(self) -> int:
        return len(self.windows)

    def prettify(self) -> str:
        """Return the windows as an `Id / Window Name / Window Owner Name` table."""
        width = self.NAME_WIDTH
        lines = [f"{'Id':<6} {'Window Name':<{width}} {'Window Owner Name':<{width}}", "-" * (6 + width * 2)]
        for w in self.windows:
            name = w.name if len(w.name) <= width else w.name[: width - 3] + "..."
            lines.append(f"{w.id:<6} {name:<{width}} {w.owner_name:<{width}}")
        return "\n".join(lines) + "\n"


__all__ = [
    "Bounds",
    "WindowDescriptor",
    "RawFrame",
    "WindowList",
    "enumerate_windows",
    "capture_raw",
]
