"""Control System Module
Handles synthetic mouse and keyboard input.

The input library is chosen per platform: pydirectinput on Windows (DirectInput
scan codes reach games and other raw-input windows), pyautogui elsewhere. Both
expose the same moveTo/mouseDown/mouseUp/keyDown/keyUp/press/write API.
"""

import logging
import sys

logger = logging.getLogger(__name__)


def load_backend():
    """Import and configure the input library for this platform."""
    if sys.platform == "win32":
        import pydirectinput as backend
    else:
        import pyautogui as backend
    # Immediate actions, no corner failsafe: delays are handled by the Bot
    backend.FAILSAFE = False
    backend.PAUSE = 0.0
    return backend


class InputController:
    """Main class for mouse and keyboard automation."""

    def __init__(self, backend=None):
        self._backend = backend if backend is not None else load_backend()

    def move_mouse(self, x: int, y: int) -> None:
        logger.debug("mouse: move to (%d,%d)", x, y)
        self._backend.moveTo(int(x), int(y))

    def mouse_down(self, button: str = "left") -> None:
        logger.debug("mouse: down button=%s", button)
        self._backend.mouseDown(button=button)

    def mouse_up(self, button: str = "left") -> None:
        logger.debug("mouse: up button=%s", button)
        self._backend.mouseUp(button=button)

    def key_down(self, key: str) -> None:
        self._backend.keyDown(key)

    def key_up(self, key: str) -> None:
        self._backend.keyUp(key)

    def key_click(self, key: str) -> None:
        self._backend.press(key)

    def type_text(self, text: str) -> None:
        self._backend.write(text)
