"""
solowindow.winhost.window - Win32Window: a live handle to a real window.

Each Win32Window wraps an HWND and reads everything from the OS on demand,
so the engine's snapshot is always fresh.  Writing ``minimized`` calls
ShowWindow with the no-activate variants so the engine never steals focus.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Optional

import pywintypes
import win32gui

from solowindow.core.host import Window
from solowindow.rules.rect import Rect
from solowindow.winhost import filter as wfilter
from solowindow.winhost import win32
from solowindow.winhost.monitor import monitor_name_for_window

log = logging.getLogger(__name__)


# Virtual desktop ids.  Win32 only tells us whether a window is cloaked,
# so desktops are approximated as "the current one" vs "another one".
CURRENT_DESKTOP = "current"
OTHER_DESKTOP = "other"


class Win32Window(Window):
    """
    Represents a single top-level window on the system.

    Equality and hashing are based solely on the HWND value.
    """

    def __init__(self, hwnd: int) -> None:
        self._hwnd = hwnd

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def hwnd(self) -> int:
        return self._hwnd

    @property
    def id(self) -> Hashable:
        return self._hwnd

    @property
    def caption(self) -> str:
        return win32.get_window_text(self._hwnd)

    @property
    def is_valid(self) -> bool:
        return win32.is_window_valid(self._hwnd)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------
    @property
    def is_normal(self) -> bool:
        return wfilter.is_normal_window(self._hwnd)

    @property
    def is_minimizable(self) -> bool:
        return bool(win32.get_window_style(self._hwnd) & win32.WS_MINIMIZEBOX)

    # ------------------------------------------------------------------
    # Mutable state
    # ------------------------------------------------------------------
    @property
    def minimized(self) -> bool:
        return win32.is_window_iconic(self._hwnd)

    @minimized.setter
    def minimized(self, value: bool) -> None:
        cmd = win32.SW_SHOWMINNOACTIVE if value else win32.SW_SHOWNOACTIVATE
        win32.show_window(self._hwnd, cmd)

    # ------------------------------------------------------------------
    # Relations / placement
    # ------------------------------------------------------------------
    @property
    def transient_owner(self) -> Optional[Window]:
        owner = wfilter.visible_owner(self._hwnd)
        return Win32Window(owner) if owner else None

    @property
    def desktops(self) -> frozenset[Hashable]:
        if win32.is_window_cloaked(self._hwnd):
            return frozenset({OTHER_DESKTOP})
        return frozenset({CURRENT_DESKTOP})

    @property
    def monitor(self) -> Hashable:
        return monitor_name_for_window(self._hwnd)

    @property
    def bounds(self) -> Rect:
        """
        Screen rectangle.  A minimized window reports its restored
        position, otherwise every victim would sit at (-32000, -32000)
        and stop overlapping its causer.
        """
        if self.minimized:
            try:
                placement = win32gui.GetWindowPlacement(self._hwnd)
                return Rect(*placement[4])
            except pywintypes.error:
                log.debug("GetWindowPlacement failed for %#010x", self._hwnd)
        return Rect(*win32.get_window_rect(self._hwnd))

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        title = self.caption if self.is_valid else "<destroyed>"
        return f"Win32Window(hwnd={self._hwnd:#010x}, title={title!r})"
