"""
Timed template search over successive captures of one window.

State machine: SAMPLING -> MATCHED, or SAMPLING -> TIMED_OUT. Each tick
captures, converts and scores one frame; only "no match yet" is retried, any
capture or decode error aborts the search.
"""
from __future__ import annotations

import logging
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from ..core.errors import ImageNotFound
from ..io.windows import WindowDescriptor
from .capture import CaptureAdapter
from .coords import Rect
from .matcher import TemplateMatcher

logger = logging.getLogger(__name__)

# Timeout value meaning "search until found"
NO_DEADLINE = None


class SearchState(Enum):
    SAMPLING = "sampling"
    MATCHED = "matched"
    TIMED_OUT = "timed_out"


def normalize_timeout(timeout: Optional[float]) -> Optional[float]:
    """Map a timeout in seconds to a deadline; 0 and NO_DEADLINE mean none."""
    if timeout is NO_DEADLINE:
        return None
    timeout = float(timeout)
    if timeout < 0:
        raise ValueError(f"timeout must be >= 0, got {timeout}")
    if timeout == 0:
        logger.debug("search: timeout 0 means no deadline")
        return None
    return timeout


class SearchLoop:
    """Samples a window at its sample rate until a template is found.

    The clock must be monotonic. `sleep` blocks the calling thread; both are
    injectable so the timing can be driven by a fake clock.
    """

    def __init__(
        self,
        capture: Optional[CaptureAdapter] = None,
        matcher: Optional[TemplateMatcher] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.capture = capture or CaptureAdapter()
        self.matcher = matcher or TemplateMatcher()
        self._clock = clock
        self._sleep = sleep
        # None until a search runs, and again after a search aborted by an error
        self.state: Optional[SearchState] = None
        self.ticks = 0

    def find(
        self,
        window: WindowDescriptor,
        template_path: Union[str, Path],
        timeout: Optional[float] = NO_DEADLINE,
    ) -> Rect:
        """Return the rectangle of the first frame scoring at or above threshold.

        timeout is in seconds; NO_DEADLINE (or 0) waits forever. The deadline is
        checked after each tick's sleep, so a search can overrun it by up to one
        tick interval. Raises ImageNotFound past the deadline.
        """
        if window.sample_rate <= 0:
            raise ValueError(f"sample_rate must be > 0, got {window.sample_rate}")
        tick = 1.0 / window.sample_rate
        deadline = normalize_timeout(timeout)
        logger.debug("search: tick interval %.3fs, deadline %s", tick, deadline)
        if deadline is not None and deadline < tick:
            logger.warning(
                "search: timeout is too low (%d ms) for the capture period (%d ms)",
                int(deadline * 1000), int(tick * 1000),
            )

        template = self.matcher.load(template_path)

        self.state = SearchState.SAMPLING
        self.ticks = 0
        start = self._clock()
        try:
            while True:
                self.ticks += 1
                _, _, gray = self.capture.capture(window.id)
                result = self.matcher.score(gray, template)
                logger.debug("search: tick %d score=%.3f at %s", self.ticks, result.score, result.location)
                if self.matcher.accepts(result):
                    self.state = SearchState.MATCHED
                    logger.info("search: %s found at %s (score=%.3f)", template.path, result.location, result.score)
                    return result.location

                self._sleep(tick)
                elapsed = self._clock() - start
                if deadline is not None and elapsed > deadline:
                    self.state = SearchState.TIMED_OUT
                    logger.info("search: %s not found, timed out after %.3fs", template.path, elapsed)
                    raise ImageNotFound(template.path)
        finally:
            if self.state is SearchState.SAMPLING:
                self.state = None
