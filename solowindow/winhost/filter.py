"""
solowindow.winhost.filter - Window filtering rules.

Two questions, answered from live Win32 state:

    - is_candidate()     : is this a real top-level window worth listing in
                           the stacking order at all (not the taskbar, a
                           tooltip, an invisible helper...)?
    - is_normal_window() : is it a regular application window, i.e. one
                           that may minimize others and be minimized?

Owned windows (dialogs) are candidates but not normal: they take part in
the engine only as transient children of their owner.
"""

from __future__ import annotations

import logging

from solowindow.winhost import win32

log = logging.getLogger(__name__)

# ============================================================================
# Known system class names to ALWAYS ignore
# ============================================================================
IGNORED_CLASSES: frozenset[str] = frozenset({
    # Windows shell / explorer
    "Shell_TrayWnd",            # Taskbar
    "Shell_SecondaryTrayWnd",   # Secondary monitor taskbar
    "Progman",                  # Desktop Program Manager
    "WorkerW",                  # Desktop wallpaper worker
    "DV2ControlHost",           # Start menu
    "Windows.UI.Core.CoreWindow",

    # System UI
    "NotifyIconOverflowWindow",
    "TopLevelWindowForOverflowXamlIsland",
    "Shell_InputSwitchTopLevelWindow",
    "MultitaskingViewFrame",    # Alt-Tab / Task View
    "TaskListThumbnailWnd",
    "ForegroundStaging",
    "EdgeUiInputTopWndClass",
    "EdgeUiInputWndClass",
    "NativeHWNDHost",

    # Other
    "tooltips_class32",
    "IME",
    "MSCTFIME UI",
    "#32768",                   # Popup menus
    "#32769",                   # Desktop
})

# Process names that are always excluded
IGNORED_PROCESSES: frozenset[str] = frozenset({
    "SearchUI.exe",
    "SearchHost.exe",
    "ShellExperienceHost.exe",
    "StartMenuExperienceHost.exe",
    "TextInputHost.exe",
    "LockApp.exe",
    "ScreenClippingHost.exe",
    "GameBar.exe",
})

IGNORED_TITLES: frozenset[str] = frozenset({
    "",
    "Program Manager",
    "Windows Input Experience",
})


# ============================================================================
# Filters
# ============================================================================
def is_candidate(hwnd: int) -> bool:
    """
    True if *hwnd* belongs in the stacking order.

    The rules, in order:
        1. Must still exist and be visible (minimized windows are visible).
        2. Must not be a child window.
        3. Class, process and title must not be in the ignore lists.
        4. Must not be the shell or desktop window.
    """
    if not win32.is_window_valid(hwnd) or not win32.is_window_visible(hwnd):
        return False

    if win32.get_window_style(hwnd) & win32.WS_CHILD:
        return False

    cls = win32.get_class_name(hwnd)
    if cls in IGNORED_CLASSES:
        return False

    if win32.get_window_text(hwnd) in IGNORED_TITLES:
        return False

    proc = win32.get_process_name(hwnd)
    if proc in IGNORED_PROCESSES:
        log.debug("Filtered %#010x: ignored process %r", hwnd, proc)
        return False

    if hwnd in (win32.get_shell_window(), win32.get_desktop_window()):
        return False

    return True


def is_normal_window(hwnd: int) -> bool:
    """
    True for regular application windows.

        - passes is_candidate();
        - not cloaked (other virtual desktop, suspended UWP frame);
        - not a tool window unless it opts in with WS_EX_APPWINDOW;
        - not WS_EX_NOACTIVATE (overlays);
        - no visible owner (owned windows are dialogs).
    """
    if not is_candidate(hwnd):
        return False

    if win32.is_window_cloaked(hwnd):
        return False

    ex_style = win32.get_window_ex_style(hwnd)
    if ex_style & win32.WS_EX_TOOLWINDOW and not ex_style & win32.WS_EX_APPWINDOW:
        return False
    if ex_style & win32.WS_EX_NOACTIVATE:
        return False

    return visible_owner(hwnd) == 0


def visible_owner(hwnd: int) -> int:
    """
    The owner HWND if it is a visible window, else 0.

    Many applications own their main window with a hidden helper; such an
    owner is not a transient parent for our purposes.
    """
    owner = win32.get_owner(hwnd)
    if owner and win32.is_window_visible(owner):
        return owner
    return 0


def candidate_hwnds() -> list[int]:
    """Every candidate HWND, front-most first."""
    return [hwnd for hwnd in win32.enum_windows() if is_candidate(hwnd)]
