"""
macOS window server backend (Quartz via PyObjC).

Window metadata comes back as heterogeneous dictionaries; values are read
through dict_entry(), which tags each one with its kind so callers match on
the tag instead of probing types. The parsing helpers are pure and run on any
platform; only list_windows() and capture() need Quartz.
"""
from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional

from ..config.vision import DEFAULT_SAMPLE_RATE
from ..core.errors import CaptureError, PlatformError
from .windows import Bounds, RawFrame, WindowDescriptor

if sys.platform == "darwin":
    import Quartz

logger = logging.getLogger(__name__)


class EntryKind(Enum):
    NUMBER = "number"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    DICT = "dict"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DictEntry:
    """A window-server dictionary value tagged with its kind."""

    kind: EntryKind
    value: Any = None


UNKNOWN = DictEntry(EntryKind.UNKNOWN)


def dict_entry(mapping: Mapping, key: str) -> DictEntry:
    """Read `key` from a window-server dictionary as a DictEntry."""
    if key not in mapping:
        return UNKNOWN
    value = mapping[key]
    # bool is a subclass of int: test it first
    if isinstance(value, bool):
        return DictEntry(EntryKind.BOOL, bool(value))
    if isinstance(value, int):
        return DictEntry(EntryKind.NUMBER, int(value))
    if isinstance(value, float):
        return DictEntry(EntryKind.FLOAT, float(value))
    if isinstance(value, str):
        return DictEntry(EntryKind.STRING, str(value))
    if isinstance(value, Mapping):
        return DictEntry(EntryKind.DICT, value)
    logger.warning("mac: unexpected value type %s for key %s", type(value).__name__, key)
    return UNKNOWN


def _number(entry: DictEntry) -> Optional[float]:
    if entry.kind in (EntryKind.NUMBER, EntryKind.FLOAT):
        return float(entry.value)
    return None


def bounds_from_entry(entry: DictEntry) -> Optional[Bounds]:
    if entry.kind is not EntryKind.DICT:
        return None
    fields = [_number(dict_entry(entry.value, k)) for k in ("X", "Y", "Width", "Height")]
    if any(f is None for f in fields):
        return None
    x, y, width, height = fields
    logger.debug("mac: window bounds %s, %s, size %s x %s", x, y, width, height)
    return Bounds(x=x, y=y, width=width, height=height)


def descriptors_from_info(info: Iterable[Any]) -> List[WindowDescriptor]:
    """Build descriptors from CGWindowListCopyWindowInfo entries.

    Windows without a string name, a string owner and an integer id are skipped.
    """
    windows: List[WindowDescriptor] = []
    for entry in info:
        if entry is None:
            raise PlatformError("Window list returned a null entry")
        name = dict_entry(entry, "kCGWindowName")
        owner = dict_entry(entry, "kCGWindowOwnerName")
        wid = dict_entry(entry, "kCGWindowNumber")
        if name.kind is EntryKind.STRING and owner.kind is EntryKind.STRING and wid.kind is EntryKind.NUMBER:
            windows.append(
                WindowDescriptor(
                    id=wid.value,
                    name=name.value,
                    owner_name=owner.value,
                    bounds=bounds_from_entry(dict_entry(entry, "kCGWindowBounds")),
                    sample_rate=DEFAULT_SAMPLE_RATE,
                )
            )
    return windows


def list_windows() -> List[WindowDescriptor]:
    info = Quartz.CGWindowListCopyWindowInfo(
        Quartz.kCGWindowListOptionIncludingWindow
        | Quartz.kCGWindowListOptionOnScreenOnly
        | Quartz.kCGWindowListExcludeDesktopElements,
        Quartz.kCGNullWindowID,
    )
    if info is None:
        raise PlatformError("CGWindowListCopyWindowInfo returned null")
    return descriptors_from_info(info)


def capture(window_id: int) -> RawFrame:
    image = Quartz.CGWindowListCreateImage(
        Quartz.CGRectNull,
        Quartz.kCGWindowListOptionIncludingWindow | Quartz.kCGWindowListExcludeDesktopElements,
        int(window_id),
        Quartz.kCGWindowImageBestResolution
        | Quartz.kCGWindowImageBoundsIgnoreFraming
        | Quartz.kCGWindowImageShouldBeOpaque,
    )
    if image is None:
        raise CaptureError(f"Cannot grab screenshot of window id {window_id}")
    provider = Quartz.CGImageGetDataProvider(image)
    data = Quartz.CGDataProviderCopyData(provider) if provider is not None else None
    if data is None:
        raise CaptureError(f"No pixel data for window id {window_id}")
    frame = RawFrame(
        width=int(Quartz.CGImageGetWidth(image)),
        height=int(Quartz.CGImageGetHeight(image)),
        bytes_per_row=int(Quartz.CGImageGetBytesPerRow(image)),
        bits_per_pixel=int(Quartz.CGImageGetBitsPerPixel(image)),
        bits_per_component=int(Quartz.CGImageGetBitsPerComponent(image)),
        data=bytes(data),
    )
    logger.debug(
        "mac: img %d x %d, bytes_per_row=%d bits_per_pixel=%d",
        frame.width, frame.height, frame.bytes_per_row, frame.bits_per_pixel,
    )
    return frame
