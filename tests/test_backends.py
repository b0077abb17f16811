"""Native backends driven through fake Quartz, user32/kernel32 and mss objects."""

import ctypes
import types

import pytest
from mss.exception import ScreenShotError

from screenbot.core.errors import CaptureError, PlatformError
from screenbot.io import mac, win
from screenbot.io.windows import Bounds, RawFrame

# --------------------------- macOS ---------------------------


class FakeQuartz:
    kCGWindowListOptionIncludingWindow = 1
    kCGWindowListOptionOnScreenOnly = 2
    kCGWindowListExcludeDesktopElements = 4
    kCGNullWindowID = 0
    kCGWindowImageBestResolution = 8
    kCGWindowImageBoundsIgnoreFraming = 1
    kCGWindowImageShouldBeOpaque = 2
    CGRectNull = object()

    def __init__(self, info=None, image=None, data=None):
        self.info = info
        self.image = image
        self.data = data
        self.image_requests = []

    def CGWindowListCopyWindowInfo(self, options, relative_to):
        return self.info

    def CGWindowListCreateImage(self, rect, options, window_id, image_options):
        self.image_requests.append(window_id)
        return self.image

    def CGImageGetDataProvider(self, image):
        return "provider"

    def CGDataProviderCopyData(self, provider):
        return self.data

    def CGImageGetWidth(self, image):
        return image["width"]

    def CGImageGetHeight(self, image):
        return image["height"]

    def CGImageGetBytesPerRow(self, image):
        return image["bytes_per_row"]

    def CGImageGetBitsPerPixel(self, image):
        return 32

    def CGImageGetBitsPerComponent(self, image):
        return 8


def test_mac_null_window_list_is_platform_error(monkeypatch):
    monkeypatch.setattr(mac, "Quartz", FakeQuartz(info=None), raising=False)
    with pytest.raises(PlatformError):
        mac.list_windows()


def test_mac_list_windows_builds_descriptors(monkeypatch):
    info = [{"kCGWindowName": "Doc", "kCGWindowOwnerName": "Preview", "kCGWindowNumber": 77,
             "kCGWindowBounds": {"X": 1.0, "Y": 2.0, "Width": 3.0, "Height": 4.0}}]
    monkeypatch.setattr(mac, "Quartz", FakeQuartz(info=info), raising=False)
    [w] = mac.list_windows()
    assert (w.id, w.name, w.bounds) == (77, "Doc", Bounds(1.0, 2.0, 3.0, 4.0))


def test_mac_null_image_is_capture_error(monkeypatch):
    quartz = FakeQuartz(image=None)
    monkeypatch.setattr(mac, "Quartz", quartz, raising=False)
    with pytest.raises(CaptureError):
        mac.capture(77)
    assert quartz.image_requests == [77]


def test_mac_null_pixel_data_is_capture_error(monkeypatch):
    image = {"width": 2, "height": 1, "bytes_per_row": 8}
    monkeypatch.setattr(mac, "Quartz", FakeQuartz(image=image, data=None), raising=False)
    with pytest.raises(CaptureError):
        mac.capture(77)


def test_mac_capture_returns_raw_frame(monkeypatch):
    image = {"width": 2, "height": 1, "bytes_per_row": 16}
    monkeypatch.setattr(mac, "Quartz", FakeQuartz(image=image, data=bytes(range(16))), raising=False)
    assert mac.capture(77) == RawFrame(2, 1, 16, 32, 8, bytes(range(16)))


# --------------------------- Windows ---------------------------


class RECT(ctypes.Structure):
    _fields_ = [("left", ctypes.c_long), ("top", ctypes.c_long), ("right", ctypes.c_long), ("bottom", ctypes.c_long)]


class FakeUser32:
    def __init__(self, rect=(100, 50, 740, 530), handles=(), enum_ok=True):
        self.rect = rect
        self.handles = handles
        self.enum_ok = enum_ok

    def GetWindowRect(self, hwnd, prc):
        if self.rect is None:
            return 0
        rc = prc._obj
        rc.left, rc.top, rc.right, rc.bottom = self.rect
        return 1

    def GetWindowThreadProcessId(self, hwnd, ppid):
        ppid._obj.value = 4321
        return 1

    def EnumWindows(self, callback, lparam):
        for hwnd in self.handles:
            callback(hwnd, lparam)
        return 1 if self.enum_ok else 0

    def IsWindowVisible(self, hwnd):
        return hwnd != 3

    def GetWindowTextLengthW(self, hwnd):
        return len(self._title(hwnd))

    def GetWindowTextW(self, hwnd, buf, size):
        buf.value = self._title(hwnd)
        return len(buf.value)

    @staticmethod
    def _title(hwnd):
        return {1: "Notepad", 2: "", 3: "Hidden", 4: "Notepad"}.get(hwnd, "")


class FakeKernel32:
    def __init__(self, handle=999, image_name="C:/Apps/notepad.exe", query_error=None):
        self.handle = handle
        self.image_name = image_name
        self.query_error = query_error
        self.closed = []

    def OpenProcess(self, access, inherit, pid):
        return self.handle

    def QueryFullProcessImageNameW(self, hproc, flags, buf, psize):
        if self.query_error is not None:
            raise self.query_error
        if self.image_name is None:
            return 0
        buf.value = self.image_name
        return 1

    def CloseHandle(self, handle):
        self.closed.append(handle)
        return 1


@pytest.fixture
def win32(monkeypatch):
    wintypes = types.SimpleNamespace(DWORD=ctypes.c_ulong, HWND=ctypes.c_void_p)
    monkeypatch.setattr(win, "wintypes", wintypes, raising=False)
    monkeypatch.setattr(win, "RECT", RECT, raising=False)
    monkeypatch.setattr(win, "EnumWindowsProc", lambda fn: fn, raising=False)
    monkeypatch.setattr(ctypes, "GetLastError", lambda: 5, raising=False)

    def install(user32=None, kernel32=None):
        user32 = user32 or FakeUser32()
        kernel32 = kernel32 or FakeKernel32()
        monkeypatch.setattr(win, "user32", user32, raising=False)
        monkeypatch.setattr(win, "kernel32", kernel32, raising=False)
        return user32, kernel32

    return install


def test_owner_name_reads_process_image(win32):
    _, kernel32 = win32()
    assert win._owner_name(1) == "notepad.exe"
    assert kernel32.closed == [999]


def test_owner_name_closes_handle_when_query_fails(win32):
    _, kernel32 = win32(kernel32=FakeKernel32(image_name=None))
    assert win._owner_name(1) == ""
    assert kernel32.closed == [999]


def test_open_process_closes_handle_when_query_raises(win32):
    _, kernel32 = win32(kernel32=FakeKernel32(query_error=OSError("denied")))
    with pytest.raises(OSError):
        win._owner_name(1)
    assert kernel32.closed == [999]


def test_open_process_failure_closes_nothing(win32):
    _, kernel32 = win32(kernel32=FakeKernel32(handle=0))
    assert win._owner_name(1) == ""
    assert kernel32.closed == []


def test_list_windows_keeps_visible_titled_windows(win32):
    win32(user32=FakeUser32(handles=(1, 2, 3, 4)))
    windows = win.list_windows()
    assert [w.id for w in windows] == [1, 4]
    assert windows[0].owner_name == "notepad.exe"
    assert windows[0].bounds == Bounds(100.0, 50.0, 640.0, 480.0)


def test_list_windows_failure_is_platform_error(win32):
    win32(user32=FakeUser32(handles=(1,), enum_ok=False))
    with pytest.raises(PlatformError):
        win.list_windows()


class FakeShot:
    width, height = 2, 1
    bgra = bytes(range(8))


class FakeSct:
    def __init__(self, error=None):
        self.error = error
        self.regions = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def grab(self, region):
        self.regions.append(region)
        if self.error is not None:
            raise self.error
        return FakeShot()


def test_capture_maps_screenshot_error(win32, monkeypatch):
    win32()
    sct = FakeSct(error=ScreenShotError("grab failed"))
    monkeypatch.setattr(win, "mss", types.SimpleNamespace(mss=lambda: sct))
    with pytest.raises(CaptureError):
        win.capture(7)
    assert sct.regions == [{"left": 100, "top": 50, "width": 640, "height": 480}]


def test_capture_without_window_rect_is_capture_error(win32):
    win32(user32=FakeUser32(rect=None))
    with pytest.raises(CaptureError):
        win.capture(7)


def test_capture_returns_bgra_frame(win32, monkeypatch):
    win32()
    monkeypatch.setattr(win, "mss", types.SimpleNamespace(mss=lambda: FakeSct()))
    assert win.capture(7) == RawFrame(2, 1, 8, 32, 8, bytes(range(8)))
