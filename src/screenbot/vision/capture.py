"""
Capture adapter: raw window pixels to a grayscale matrix.

The display server may pad each row beyond the pixel width (the stride). The
adapter checks the buffer is complete, drops the padding and converts BGRA to
grayscale with the fixed weighting in config.vision.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import cv2
import numpy as np

from ..config.vision import GRAYSCALE_CONVERSION
from ..core.errors import CaptureError
from ..io.windows import RawFrame, capture_raw

logger = logging.getLogger(__name__)

CHANNELS = 4


def to_gray(raw: Optional[RawFrame], window_id: Optional[int] = None) -> Tuple[int, int, np.ndarray]:
    """Return (width, height, gray) for a raw BGRA frame.

    Raises CaptureError when the frame is empty, not 4-channel, or when
    bytes_per_row * height does not equal the buffer length.
    """
    if raw is None or not raw.data or raw.height <= 0 or raw.bytes_per_row <= 0:
        raise CaptureError(f"Empty capture for window id {window_id}")
    if raw.bytes_per_row * raw.height != len(raw.data):
        raise CaptureError(
            "Cannot grab screenshot of window id %s: %d bytes/row x %d rows != %d bytes"
            % (window_id, raw.bytes_per_row, raw.height, len(raw.data))
        )
    if raw.bits_per_component <= 0 or raw.bits_per_pixel // raw.bits_per_component != CHANNELS:
        raise CaptureError(
            f"Unsupported pixel layout for window id {window_id}: "
            f"{raw.bits_per_pixel} bits/pixel, {raw.bits_per_component} bits/component"
        )
    bytes_per_pixel = raw.bits_per_pixel // 8
    columns = raw.bytes_per_row // bytes_per_pixel
    width = min(raw.width, columns) if raw.width > 0 else columns
    if width <= 0:
        raise CaptureError(f"Empty capture for window id {window_id}")

    rows = np.frombuffer(raw.data, dtype=np.uint8).reshape(raw.height, raw.bytes_per_row)
    pixels = np.ascontiguousarray(rows[:, : width * bytes_per_pixel]).reshape(raw.height, width, CHANNELS)
    gray = cv2.cvtColor(pixels, GRAYSCALE_CONVERSION)
    return width, raw.height, gray


class CaptureAdapter:
    """Grabs a window and normalizes it to grayscale.

    `grab` returns a RawFrame for a window id; it defaults to the platform
    backend.
    """

    def __init__(self, grab: Optional[Callable[[int], RawFrame]] = None) -> None:
        self._grab = grab or capture_raw

    def capture(self, window_id: int) -> Tuple[int, int, np.ndarray]:
        raw = self._grab(window_id)
        width, height, gray = to_gray(raw, window_id)
        logger.debug("capture: window %s -> %dx%d", window_id, width, height)
        return width, height, gray

    def screenshot(self, window_id: int, path: Union[str, Path]) -> Path:
        """Save a grayscale capture of the window to `path`."""
        _, _, gray = self.capture(window_id)
        out = Path(path)
        if not cv2.imwrite(str(out), gray):
            raise CaptureError(f"Cannot write screenshot to {out}")
        logger.info("capture: screenshot of window %s saved to %s", window_id, out)
        return out
