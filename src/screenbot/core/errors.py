"""Error hierarchy for screenbot.

Only ImageNotFound is an expected outcome of a search; every other error is a
genuine failure of the current operation.
"""
from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union


class ScreenbotError(Exception):
    """Base class for all screenbot errors."""


class PlatformError(ScreenbotError):
    """Native window-server call failed (window list or capture)."""


class CaptureError(PlatformError):
    """Display server refused to deliver a complete frame."""


class TemplateLoadError(ScreenbotError):
    """Template image could not be decoded as grayscale."""

    def __init__(self, path: Union[str, Path], message: str = "") -> None:
        self.path = str(path)
        super().__init__(message or f"Cannot load template {self.path}")


class InvalidTemplateSize(TemplateLoadError):
    """Template is larger than the captured frame in at least one dimension."""

    def __init__(self, path: Union[str, Path], template_size: Tuple[int, int], frame_size: Tuple[int, int]) -> None:
        self.template_size = template_size
        self.frame_size = frame_size
        super().__init__(
            path,
            "Template %s is %dx%d, larger than the %dx%d frame"
            % (str(path), template_size[0], template_size[1], frame_size[0], frame_size[1]),
        )


class ImageNotFound(ScreenbotError):
    """Template was not found in the window before the deadline."""

    def __init__(self, template_path: Union[str, Path]) -> None:
        self.template_path = str(template_path)
        super().__init__(f"Template {self.template_path} not found")


class PreconditionViolation(ScreenbotError):
    """Operation needs a bound window or an input controller that is missing."""


__all__ = [
    "ScreenbotError",
    "PlatformError",
    "CaptureError",
    "TemplateLoadError",
    "InvalidTemplateSize",
    "ImageNotFound",
    "PreconditionViolation",
]
