"""Core subpackage: configuration, logging setup and the error hierarchy."""
from .config import ConfigManager
from .errors import (
    ScreenbotError,
    PlatformError,
    CaptureError,
    TemplateLoadError,
    InvalidTemplateSize,
    ImageNotFound,
    PreconditionViolation,
)
from .logging_setup import setup_logging, get_artifacts_dir

__all__ = [
    "ConfigManager",
    "setup_logging",
    "get_artifacts_dir",
    "ScreenbotError",
    "PlatformError",
    "CaptureError",
    "TemplateLoadError",
    "InvalidTemplateSize",
    "ImageNotFound",
    "PreconditionViolation",
]
