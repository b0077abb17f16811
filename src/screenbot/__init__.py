"""Capture a window, find template images in it and drive input relative to matches."""
from .bot import Bot, Id, Name, Regex
from .core.errors import (
    ScreenbotError,
    PlatformError,
    CaptureError,
    TemplateLoadError,
    InvalidTemplateSize,
    ImageNotFound,
    PreconditionViolation,
)
from .io.windows import Bounds, WindowDescriptor, WindowList
from .vision.coords import Rect
from .vision.search import NO_DEADLINE

__version__ = "0.1.0"

__all__ = [
    "Bot",
    "Name",
    "Regex",
    "Id",
    "Bounds",
    "WindowDescriptor",
    "WindowList",
    "Rect",
    "NO_DEADLINE",
    "ScreenbotError",
    "PlatformError",
    "CaptureError",
    "TemplateLoadError",
    "InvalidTemplateSize",
    "ImageNotFound",
    "PreconditionViolation",
]
