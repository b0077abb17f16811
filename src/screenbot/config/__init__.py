"""Config subpackage.

- vision: thresholds, sampling rate, DPI ratio and input delays
"""
from .vision import (
    MATCH_THRESHOLD,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_HIGH_DPI_RATIO,
    DEFAULT_WAIT_TIME,
    ACTIVATE_TITLE_OFFSET,
    GRAYSCALE_CONVERSION,
)

__all__ = [
    "MATCH_THRESHOLD",
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_HIGH_DPI_RATIO",
    "DEFAULT_WAIT_TIME",
    "ACTIVATE_TITLE_OFFSET",
    "GRAYSCALE_CONVERSION",
]
