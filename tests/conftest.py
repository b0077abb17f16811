"""Pytest configuration.

Ensures src/ is on sys.path so tests can import `screenbot` without an install,
and provides headless stand-ins for the platform collaborators.
"""

import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from screenbot.io.windows import RawFrame  # noqa: E402


def bgra_frame(gray: np.ndarray, padding: int = 0) -> RawFrame:
    """Wrap a grayscale matrix as a BGRA RawFrame, optionally padding each row."""
    h, w = gray.shape
    bgra = np.dstack([gray, gray, gray, np.full_like(gray, 255)]).reshape(h, w * 4)
    if padding:
        bgra = np.hstack([bgra, np.full((h, padding), 7, dtype=np.uint8)])
    return RawFrame(
        width=w,
        height=h,
        bytes_per_row=w * 4 + padding,
        bits_per_pixel=32,
        bits_per_component=8,
        data=bgra.tobytes(),
    )


def noise(shape, seed):
    return np.random.default_rng(seed).integers(0, 256, size=shape, dtype=np.uint8)


class FakeClock:
    """Monotonic clock advanced only by sleep()."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingController:
    """InputController stand-in that records every call."""

    def __init__(self):
        self.calls = []

    def move_mouse(self, x, y):
        self.calls.append(("move", x, y))

    def mouse_down(self, button="left"):
        self.calls.append(("down", button))

    def mouse_up(self, button="left"):
        self.calls.append(("up", button))

    def key_down(self, key):
        self.calls.append(("key_down", key))

    def key_up(self, key):
        self.calls.append(("key_up", key))

    def key_click(self, key):
        self.calls.append(("key_click", key))

    def type_text(self, text):
        self.calls.append(("type", text))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def controller():
    return RecordingController()


@pytest.fixture
def scene(tmp_path):
    """A 120x90 noise frame and a 24x16 template cut from it at (37, 51)."""
    frame = noise((90, 120), seed=1)
    ox, oy, w, h = 37, 51, 24, 16
    template = frame[oy:oy + h, ox:ox + w].copy()
    path = tmp_path / "template.png"
    assert cv2.imwrite(str(path), template)
    return frame, path, (ox, oy, w, h)
