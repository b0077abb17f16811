"""
Windows backend: window enumeration through user32 and capture through mss.

Native handles are held by context managers so they are released on every
exit path.
"""
from __future__ import annotations

import ctypes
import logging
import os
from contextlib import contextmanager
from typing import Iterator, List, Optional

import mss
from mss.exception import ScreenShotError

from ..config.vision import DEFAULT_SAMPLE_RATE
from ..core.errors import CaptureError, PlatformError
from .windows import Bounds, RawFrame, WindowDescriptor

logger = logging.getLogger(__name__)

PROCESS_QUERY_LIMITED_INFORMATION = 0x1000

if os.name == "nt":
    from ctypes import wintypes
    user32 = ctypes.windll.user32
    kernel32 = ctypes.windll.kernel32

    class RECT(ctypes.Structure):
        _fields_ = [
            ("left", ctypes.c_long),
            ("top", ctypes.c_long),
            ("right", ctypes.c_long),
            ("bottom", ctypes.c_long),
        ]

    EnumWindowsProc = ctypes.WINFUNCTYPE(wintypes.BOOL, wintypes.HWND, wintypes.LPARAM)


@contextmanager
def _open_process(pid: int) -> Iterator[Optional[int]]:
    hproc = kernel32.OpenProcess(PROCESS_QUERY_LIMITED_INFORMATION, False, pid)
    try:
        yield hproc or None
    finally:
        if hproc:
            kernel32.CloseHandle(hproc)


def _window_text(hwnd) -> str:
    length = user32.GetWindowTextLengthW(hwnd)
    if length <= 0:
        return ""
    buf = ctypes.create_unicode_buffer(length + 1)
    user32.GetWindowTextW(hwnd, buf, length + 1)
    return buf.value


def _owner_name(hwnd) -> str:
    pid = wintypes.DWORD()
    user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
    with _open_process(pid.value) as hproc:
        if hproc is None:
            return ""
        buf_len = wintypes.DWORD(260)
        buf = ctypes.create_unicode_buffer(buf_len.value)
        if not kernel32.QueryFullProcessImageNameW(hproc, 0, buf, ctypes.byref(buf_len)):
            return ""
        return os.path.basename(buf.value or "")


def _window_rect(hwnd) -> Optional[Bounds]:
    rc = RECT()
    if not user32.GetWindowRect(hwnd, ctypes.byref(rc)):
        return None
    width, height = rc.right - rc.left, rc.bottom - rc.top
    if width <= 0 or height <= 0:
        return None
    return Bounds(x=float(rc.left), y=float(rc.top), width=float(width), height=float(height))


def list_windows() -> List[WindowDescriptor]:
    handles = []

    def _collect(hwnd, _lparam):
        if user32.IsWindowVisible(hwnd):
            handles.append(hwnd)
        return True

    if not user32.EnumWindows(EnumWindowsProc(_collect), 0):
        raise PlatformError(f"EnumWindows failed (error {ctypes.GetLastError()})")

    windows: List[WindowDescriptor] = []
    for hwnd in handles:
        name = _window_text(hwnd)
        if not name:
            continue
        windows.append(
            WindowDescriptor(
                id=int(hwnd),
                name=name,
                owner_name=_owner_name(hwnd),
                bounds=_window_rect(hwnd),
                sample_rate=DEFAULT_SAMPLE_RATE,
            )
        )
    return windows


def capture(window_id: int) -> RawFrame:
    bounds = _window_rect(wintypes.HWND(window_id))
    if bounds is None:
        raise CaptureError(f"Cannot get the on-screen rectangle of window id {window_id}")
    region = {
        "left": int(bounds.x),
        "top": int(bounds.y),
        "width": int(bounds.width),
        "height": int(bounds.height),
    }
    try:
        with mss.mss() as sct:
            shot = sct.grab(region)
    except ScreenShotError as exc:
        raise CaptureError(f"Cannot grab screenshot of window id {window_id}: {exc}") from exc
    logger.debug("win: grab %dx%d region=%s", shot.width, shot.height, region)
    return RawFrame(
        width=shot.width,
        height=shot.height,
        bytes_per_row=shot.width * 4,
        bits_per_pixel=32,
        bits_per_component=8,
        data=bytes(shot.bgra),
    )
