"""Bot: automation session bound to one window.

The Bot owns the bound window descriptor and the input controller and exposes
find / click-on-match / direct input operations on top of SearchLoop and
CoordinateMapper. Operations that need a window or a controller raise
PreconditionViolation when it is missing.
"""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .config.vision import (
    ACTIVATE_TITLE_OFFSET,
    DEFAULT_HIGH_DPI_RATIO,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_WAIT_TIME,
    MATCH_THRESHOLD,
)
from .core.errors import PreconditionViolation
from .io.controls import InputController
from .io.windows import Bounds, WindowDescriptor, enumerate_windows
from .vision.capture import CaptureAdapter
from .vision.coords import CoordinateMapper, Rect
from .vision.matcher import TemplateMatcher
from .vision.search import NO_DEADLINE, SearchLoop

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class Name:
    """Select windows whose name equals `value`."""

    value: str

    def matches(self, window: WindowDescriptor) -> bool:
        return window.name == self.value


@dataclass(frozen=True)
class Regex:
    """Select windows whose name contains a match of `pattern`."""

    pattern: str

    def matches(self, window: WindowDescriptor) -> bool:
        return re.search(self.pattern, window.name) is not None


@dataclass(frozen=True)
class Id:
    """Select the window with id `value`."""

    value: int

    def matches(self, window: WindowDescriptor) -> bool:
        return window.id == self.value


Selector = Union[Name, Regex, Id]


class Bot:
    """Automation capabilities for interacting with a window."""

    def __init__(
        self,
        controller: Optional[InputController] = None,
        window_source: Optional[Callable[[], List[WindowDescriptor]]] = None,
        search: Optional[SearchLoop] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.window: Optional[WindowDescriptor] = None
        self.controller = controller
        self.mapper = CoordinateMapper(DEFAULT_HIGH_DPI_RATIO)
        self.wait_time = DEFAULT_WAIT_TIME
        self.sample_rate = DEFAULT_SAMPLE_RATE
        self._window_source = window_source or enumerate_windows
        self._sleep = sleep
        self.search = search or SearchLoop(sleep=sleep)

    @classmethod
    def from_config(cls, config_manager, **kwargs) -> "Bot":
        """Build a Bot whose session settings come from a ConfigManager."""
        threshold = config_manager.get_float("match_threshold", MATCH_THRESHOLD)
        if "search" not in kwargs:
            kwargs["search"] = SearchLoop(
                CaptureAdapter(), TemplateMatcher(threshold), sleep=kwargs.get("sleep", time.sleep),
            )
        bot = cls(**kwargs)
        bot.set_high_dpi_ratio(config_manager.get_int("dpi_ratio", DEFAULT_HIGH_DPI_RATIO))
        bot.set_wait_time(config_manager.get_float("wait_time_ms", DEFAULT_WAIT_TIME * 1000) / 1000.0)
        bot.set_sample_rate(config_manager.get_float("sample_rate", DEFAULT_SAMPLE_RATE))
        return bot

    # --------------------------- session settings ---------------------------
    @property
    def high_dpi_ratio(self) -> int:
        return self.mapper.dpi_ratio

    def set_controller(self, controller: InputController) -> None:
        self.controller = controller

    def set_high_dpi_ratio(self, ratio: int) -> None:
        """Sets High DPI mode (for standard screen: 1, for Retina-like: 2)."""
        self.mapper.dpi_ratio = ratio

    def set_wait_time(self, seconds: float) -> None:
        """Sets the delay between mouse move and mouse down and up."""
        if seconds < 0:
            raise ValueError(f"wait time must be >= 0, got {seconds}")
        self.wait_time = float(seconds)

    def set_sample_rate(self, value: float) -> None:
        """Sets the number of captures per second, also for the bound window."""
        if value <= 0:
            raise ValueError(f"sample rate must be > 0, got {value}")
        self.sample_rate = float(value)
        if self.window is not None:
            self.window = self.window.with_sample_rate(self.sample_rate)

    def sleep(self, millis: int) -> None:
        self._sleep(millis / 1000.0)

    # --------------------------- window binding ---------------------------
    def bind_window_by(self, selector: Selector) -> Optional[WindowDescriptor]:
        """Bind the last enumerated window matching `selector`.

        Leaves the Bot unbound (window is None) when nothing matches. An
        invalid Regex pattern raises ValueError before any window is listed.
        """
        compiled = None
        if isinstance(selector, Regex):
            try:
                compiled = re.compile(selector.pattern)
            except re.error as exc:
                raise ValueError(f"Invalid window regex {selector.pattern!r}: {exc}") from exc
        windows = self._window_source()
        if compiled is not None:
            matches = [w for w in windows if compiled.search(w.name) is not None]
        else:
            matches = [w for w in windows if selector.matches(w)]
        if len(matches) > 1:
            logger.warning("bot: %d windows match %s, binding the last one", len(matches), selector)
        self.window = matches[-1].with_sample_rate(self.sample_rate) if matches else None
        if self.window is None:
            logger.warning("bot: no window matches %s", selector)
        else:
            logger.info("bot: bound window %s %r (%s)", self.window.id, self.window.name, self.window.owner_name)
        return self.window

    def set_window_from_name(self, name: str) -> Optional[WindowDescriptor]:
        return self.bind_window_by(Name(name))

    def set_window_from_regex(self, pattern: str) -> Optional[WindowDescriptor]:
        return self.bind_window_by(Regex(pattern))

    def set_window_from_id(self, window_id: int) -> Optional[WindowDescriptor]:
        return self.bind_window_by(Id(window_id))

    # --------------------------- preconditions ---------------------------
    def _require_window(self) -> WindowDescriptor:
        if self.window is None:
            raise PreconditionViolation("No window bound; call bind_window_by() first")
        return self.window

    def _require_bounds(self) -> Bounds:
        window = self._require_window()
        if window.bounds is None:
            raise PreconditionViolation(f"Window {window.id} has no known screen bounds")
        return window.bounds

    def _require_controller(self) -> InputController:
        if self.controller is None:
            raise PreconditionViolation("No input controller attached; call set_controller() first")
        return self.controller

    # --------------------------- capture & search ---------------------------
    def screenshot(self, path: PathLike) -> Path:
        """Captures the window in grayscale and saves it to `path`."""
        return self.search.capture.screenshot(self._require_window().id, path)

    def find(self, template: PathLike) -> Rect:
        """Searches the window for `template` until found."""
        rect = self.search.find(self._require_window(), template, NO_DEADLINE)
        logger.debug("bot: found %s", rect)
        return rect

    def find_with_timeout(self, template: PathLike, timeout: Optional[float]) -> Rect:
        """Searches the window for `template`; raises ImageNotFound after `timeout` seconds."""
        rect = self.search.find(self._require_window(), template, timeout)
        logger.debug("bot: found %s", rect)
        return rect

    def click_on_image(self, template: PathLike, timeout: Optional[float]) -> Tuple[int, int]:
        """Searches for `template` and clicks at its center.

        Returns the center in capture pixels relative to the window.
        """
        self._require_bounds()
        self._require_controller()
        logger.debug("bot: searching %s", template)
        rect = self.find_with_timeout(template, timeout)
        x, y = rect.center()
        self.click(x, y)
        return x, y

    # --------------------------- mouse ---------------------------
    def _move_to(self, relative_x: int, relative_y: int, action: str) -> InputController:
        controller = self._require_controller()
        bounds = self._require_bounds()
        screen_x, screen_y = self.mapper.to_screen((bounds.x, bounds.y), (relative_x, relative_y))
        logger.debug(
            "bot: %s on %d, %d (relative %d, %d / %d + origin %d, %d)",
            action, screen_x, screen_y, relative_x, relative_y, self.high_dpi_ratio, int(bounds.x), int(bounds.y),
        )
        controller.move_mouse(screen_x, screen_y)
        self._sleep(self.wait_time)
        return controller

    def click(self, relative_x: int, relative_y: int) -> None:
        """Clicks at capture-pixel coordinates relative to the window."""
        controller = self._move_to(relative_x, relative_y, "click")
        controller.mouse_down()
        self._sleep(self.wait_time)
        controller.mouse_up()

    def mouse_down_on(self, relative_x: int, relative_y: int) -> None:
        self._move_to(relative_x, relative_y, "mouse down").mouse_down()

    def mouse_up_on(self, relative_x: int, relative_y: int) -> None:
        self._move_to(relative_x, relative_y, "mouse up").mouse_up()

    def activate_window(self) -> None:
        """Clicks near the top of the window to bring it to the foreground.

        The x coordinate is the window width in points, i.e. the middle of the
        title bar when dpi_ratio is 2.
        """
        bounds = self._require_bounds()
        logger.debug("bot: activating window")
        self.click(int(bounds.width), ACTIVATE_TITLE_OFFSET)

    # --------------------------- keyboard ---------------------------
    def key_down(self, key: str) -> None:
        logger.debug("key: down %s", key)
        self._require_controller().key_down(key)

    def key_up(self, key: str) -> None:
        logger.debug("key: up %s", key)
        self._require_controller().key_up(key)

    def key_click(self, key: str) -> None:
        logger.debug("key: click %s", key)
        self._require_controller().key_click(key)

    def type_text(self, text: str) -> None:
        logger.debug("key: typing %r", text)
        self._require_controller().type_text(text)

    def write(self, text: str) -> None:
        self.type_text(text)

    def writeln(self, text: str) -> None:
        """Types `text` followed by return."""
        controller = self._require_controller()
        logger.debug("key: typing %r + enter", text)
        controller.type_text(text)
        controller.key_click("enter")
