"""
Template matching against captured grayscale frames.

Scores use cv2.TM_CCOEFF_NORMED: a normalized correlation coefficient, 1.0 for
a perfect match and invariant to uniform brightness scale and shift. The score
field is reduced to its global maximum; there is no masking or multi-candidate
search.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from ..config.vision import MATCH_THRESHOLD
from ..core.errors import InvalidTemplateSize, TemplateLoadError
from .coords import Rect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Template:
    """Grayscale reference image decoded from `path`."""

    path: str
    image: np.ndarray

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


@dataclass(frozen=True)
class MatchResult:
    location: Rect
    score: float


class TemplateMatcher:
    """Loads templates and scores them against frames."""

    def __init__(self, threshold: float = MATCH_THRESHOLD) -> None:
        self.threshold = float(threshold)

    def load(self, path: Union[str, Path]) -> Template:
        """Decode `path` as an 8-bit grayscale template."""
        path = str(path)
        try:
            image = cv2.imread(path, cv2.IMREAD_GRAYSCALE)
        except cv2.error as exc:
            raise TemplateLoadError(path, f"Cannot decode template {path}: {exc}") from exc
        if image is None or image.size == 0:
            raise TemplateLoadError(path)
        logger.debug("matcher: template %s loaded (%dx%d)", path, image.shape[1], image.shape[0])
        return Template(path=path, image=image)

    def score(self, frame: np.ndarray, template: Template) -> MatchResult:
        """Return the best match of `template` in `frame`.

        Raises InvalidTemplateSize when the template is wider or taller than
        the frame.
        """
        frame_h, frame_w = frame.shape[:2]
        if template.width > frame_w or template.height > frame_h:
            raise InvalidTemplateSize(template.path, (template.width, template.height), (frame_w, frame_h))

        # (W - w + 1) x (H - h + 1) field of float32 scores
        field = cv2.matchTemplate(frame, template.image, cv2.TM_CCOEFF_NORMED)
        _, max_val, _, max_loc = cv2.minMaxLoc(field)
        location = Rect(int(max_loc[0]), int(max_loc[1]), template.width, template.height)
        return MatchResult(location=location, score=float(max_val))

    def accepts(self, result: MatchResult) -> bool:
        return result.score >= self.threshold
