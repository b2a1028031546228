"""
solowindow.winhost.win32 - Thin layer over the Win32 API.

Plain window queries go through pywin32 (win32gui / win32process).  The
pieces pywin32 does not wrap (DWM cloaking, the WinEvent hook, a message
loop that sees WM_HOTKEY, global hotkeys) are called through ctypes.
Nothing else in the package talks to either directly.  Importing this
module only works on Windows.
"""

from __future__ import annotations

import ctypes
import ctypes.wintypes
import logging

import pywintypes
import win32api
import win32con
import win32gui
import win32process

log = logging.getLogger(__name__)

user32 = ctypes.windll.user32
dwmapi = ctypes.windll.dwmapi
ole32 = ctypes.windll.ole32

# ============================================================================
# Constants
# ============================================================================

# ShowWindow commands that never steal focus
SW_SHOWNOACTIVATE = win32con.SW_SHOWNOACTIVATE
SW_SHOWMINNOACTIVE = win32con.SW_SHOWMINNOACTIVE

WS_CHILD = win32con.WS_CHILD
WS_MINIMIZEBOX = win32con.WS_MINIMIZEBOX
WS_EX_TOOLWINDOW = win32con.WS_EX_TOOLWINDOW
WS_EX_APPWINDOW = win32con.WS_EX_APPWINDOW
WS_EX_NOACTIVATE = 0x08000000

WM_QUIT = win32con.WM_QUIT
WM_HOTKEY = win32con.WM_HOTKEY

DWMWA_CLOAKED = 14
PROCESS_QUERY_LIMITED_INFORMATION = 0x1000

# WinEvents the host listens to
WINEVENT_OUTOFCONTEXT = 0x0000
WINEVENT_SKIPOWNPROCESS = 0x0002
EVENT_SYSTEM_FOREGROUND = 0x0003
EVENT_SYSTEM_MOVESIZEEND = 0x000B
EVENT_SYSTEM_MINIMIZESTART = 0x0016
EVENT_SYSTEM_MINIMIZEEND = 0x0017
EVENT_OBJECT_DESTROY = 0x8001
EVENT_OBJECT_SHOW = 0x8002
EVENT_OBJECT_HIDE = 0x8003
EVENT_OBJECT_LOCATIONCHANGE = 0x800B
EVENT_OBJECT_CLOAKED = 0x8017
EVENT_OBJECT_UNCLOAKED = 0x8018

EVENT_MIN = EVENT_SYSTEM_FOREGROUND
EVENT_MAX = EVENT_OBJECT_UNCLOAKED

OBJID_WINDOW = 0
CHILDID_SELF = 0

# void CALLBACK (HWINEVENTHOOK, DWORD event, HWND, LONG idObject,
#                LONG idChild, DWORD idEventThread, DWORD dwmsEventTime)
WinEventProc = ctypes.WINFUNCTYPE(
    None,
    ctypes.wintypes.HANDLE,
    ctypes.wintypes.DWORD,
    ctypes.wintypes.HWND,
    ctypes.c_long,
    ctypes.c_long,
    ctypes.wintypes.DWORD,
    ctypes.wintypes.DWORD,
)


# ============================================================================
# Window queries (pywin32)
# ============================================================================
def enum_windows() -> list[int]:
    """Every top-level HWND, front-most first."""
    hwnds: list[int] = []
    win32gui.EnumWindows(lambda hwnd, acc: acc.append(hwnd) or True, hwnds)
    return hwnds


def get_window_text(hwnd: int) -> str:
    try:
        return win32gui.GetWindowText(hwnd)
    except pywintypes.error:
        return ""


def get_class_name(hwnd: int) -> str:
    try:
        return win32gui.GetClassName(hwnd)
    except pywintypes.error:
        return ""


def get_process_name(hwnd: int) -> str:
    """Executable name of the process owning *hwnd* ("" if unknown)."""
    try:
        _tid, pid = win32process.GetWindowThreadProcessId(hwnd)
        handle = win32api.OpenProcess(PROCESS_QUERY_LIMITED_INFORMATION, False, pid)
    except pywintypes.error:
        return ""
    try:
        path = win32process.GetModuleFileNameEx(handle, 0)
    except pywintypes.error:
        return ""
    finally:
        win32api.CloseHandle(handle)
    return path.rsplit("\\", 1)[-1]


def get_window_rect(hwnd: int) -> tuple[int, int, int, int]:
    """(left, top, right, bottom); all zeros for a destroyed window."""
    try:
        return win32gui.GetWindowRect(hwnd)
    except pywintypes.error:
        return (0, 0, 0, 0)


def get_window_style(hwnd: int) -> int:
    return win32gui.GetWindowLong(hwnd, win32con.GWL_STYLE)


def get_window_ex_style(hwnd: int) -> int:
    return win32gui.GetWindowLong(hwnd, win32con.GWL_EXSTYLE)


def get_owner(hwnd: int) -> int:
    """HWND of the owner window, 0 if none."""
    try:
        return win32gui.GetWindow(hwnd, win32con.GW_OWNER) or 0
    except pywintypes.error:
        return 0


def is_window_valid(hwnd: int) -> bool:
    return bool(win32gui.IsWindow(hwnd))


def is_window_visible(hwnd: int) -> bool:
    return bool(win32gui.IsWindowVisible(hwnd))


def is_window_iconic(hwnd: int) -> bool:
    return bool(win32gui.IsIconic(hwnd))


def get_foreground_window() -> int:
    return win32gui.GetForegroundWindow()


def get_desktop_window() -> int:
    return win32gui.GetDesktopWindow()


def show_window(hwnd: int, cmd: int) -> bool:
    try:
        return bool(win32gui.ShowWindow(hwnd, cmd))
    except pywintypes.error:
        log.debug("ShowWindow(%#010x, %d) failed", hwnd, cmd)
        return False


# ============================================================================
# Not wrapped by pywin32 (ctypes)
# ============================================================================
def get_shell_window() -> int:
    return user32.GetShellWindow() or 0


def is_window_cloaked(hwnd: int) -> bool:
    """
    True if DWM cloaks the window: it sits on another virtual desktop,
    or is a suspended UWP frame.
    """
    cloaked = ctypes.c_int(0)
    hr = dwmapi.DwmGetWindowAttribute(
        ctypes.wintypes.HWND(hwnd),
        DWMWA_CLOAKED,
        ctypes.byref(cloaked),
        ctypes.sizeof(cloaked),
    )
    return hr == 0 and cloaked.value != 0


def set_win_event_hook(
    event_min: int,
    event_max: int,
    callback: WinEventProc,  # type: ignore[valid-type]
    flags: int = WINEVENT_OUTOFCONTEXT | WINEVENT_SKIPOWNPROCESS,
) -> int:
    """
    Install an out-of-context WinEvent hook.  Returns the handle, 0 on
    failure.  The caller keeps *callback* alive while the hook exists.
    """
    return user32.SetWinEventHook(event_min, event_max, 0, callback, 0, 0, flags) or 0


def unhook_win_event(hook_handle: int) -> bool:
    return bool(user32.UnhookWinEvent(hook_handle))


def get_message() -> tuple[bool, ctypes.wintypes.MSG]:
    """Block for the next thread message.  False once WM_QUIT arrives."""
    msg = ctypes.wintypes.MSG()
    result = user32.GetMessageW(ctypes.byref(msg), 0, 0, 0)
    return (result > 0, msg)


def translate_and_dispatch(msg: ctypes.wintypes.MSG) -> None:
    user32.TranslateMessage(ctypes.byref(msg))
    user32.DispatchMessageW(ctypes.byref(msg))


def post_quit_message(exit_code: int = 0) -> None:
    win32gui.PostQuitMessage(exit_code)


def post_thread_message(thread_id: int, msg: int, wparam: int = 0, lparam: int = 0) -> bool:
    return bool(user32.PostThreadMessageW(thread_id, msg, wparam, lparam))


def get_current_thread_id() -> int:
    return win32api.GetCurrentThreadId()


def co_initialize() -> None:
    ole32.CoInitialize(0)


def co_uninitialize() -> None:
    ole32.CoUninitialize()


def register_hotkey(hotkey_id: int, modifiers: int, vk: int) -> bool:
    return bool(user32.RegisterHotKey(None, hotkey_id, modifiers, vk))


def unregister_hotkey(hotkey_id: int) -> bool:
    return bool(user32.UnregisterHotKey(None, hotkey_id))
