"""IO subpackage for platform-specific integrations.

- windows: window descriptors, enumeration and raw capture dispatch
- mac: Quartz backend (macOS)
- win: user32 + mss backend (Windows)
- controls: synthetic mouse and keyboard input
"""
from .windows import (
    Bounds,
    WindowDescriptor,
    RawFrame,
    WindowList,
    enumerate_windows,
    capture_raw,
)
from .controls import InputController

__all__ = [
    "Bounds",
    "WindowDescriptor",
    "RawFrame",
    "WindowList",
    "enumerate_windows",
    "capture_raw",
    "InputController",
]
