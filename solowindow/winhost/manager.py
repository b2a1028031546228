"""
solowindow.winhost.manager - Win32Host: the real Windows desktop as a Host.

Win32Host:

  1. Lists windows in z-order through EnumWindows (front-most first).
  2. Installs a WinEventHook and translates the raw WinEvents into
     HostEvents on its EventDispatcher.
  3. Runs the Win32 message loop, which also delivers WM_HOTKEY to an
     optional HotkeyManager.

WinEvent -> HostEvent:
    OBJECT_SHOW (new window)          -> WINDOW_ADDED
    OBJECT_DESTROY / OBJECT_HIDE      -> WINDOW_REMOVED
    SYSTEM_FOREGROUND                 -> WINDOW_ACTIVATED
    SYSTEM_MINIMIZESTART / END        -> MINIMIZED_CHANGED
    SYSTEM_MOVESIZEEND                -> MOVE_RESIZE_FINISHED
    OBJECT_LOCATIONCHANGE (new mon.)  -> OUTPUT_CHANGED
    OBJECT_CLOAKED / UNCLOAKED        -> DESKTOPS_CHANGED

Windows has no notification for "current virtual desktop changed"; the
cloak events fired while switching desktops cover it.
"""

from __future__ import annotations

import logging
import signal
from collections.abc import Hashable
from typing import Optional

from solowindow.core.events import HostEvent
from solowindow.core.host import Host, Window
from solowindow.winhost import filter as wfilter
from solowindow.winhost import win32
from solowindow.winhost.keybinds import HotkeyManager
from solowindow.winhost.window import CURRENT_DESKTOP, Win32Window

log = logging.getLogger(__name__)


class Win32Host(Host):
    """
    Host backed by the live Windows desktop.

    Usage:
        host = Win32Host()
        engine = SoloWindow(host, settings)
        engine.attach()
        host.start()   # blocks in the Win32 message loop
    """

    def __init__(self, hotkeys: Optional[HotkeyManager] = None) -> None:
        super().__init__()

        # Windows announced with WINDOW_ADDED, by HWND.  Needed because a
        # destroyed HWND can no longer be classified.
        self._known: dict[int, Win32Window] = {}

        # Last monitor seen per HWND, to turn location changes into
        # OUTPUT_CHANGED only when the monitor actually changes.
        self._monitors: dict[int, Hashable] = {}

        self._hook_handle: int = 0
        # Must prevent GC of the ctypes callback
        self._hook_proc: Optional[win32.WinEventProc] = None

        self._running: bool = False
        self._loop_thread_id: int = 0
        self._hotkeys = hotkeys

    # ------------------------------------------------------------------
    # Host interface
    # ------------------------------------------------------------------
    def stacking_order(self) -> list[Window]:
        return [Win32Window(hwnd) for hwnd in wfilter.candidate_hwnds()]

    @property
    def current_desktop(self) -> Hashable:
        return CURRENT_DESKTOP

    def find(self, window_id) -> Optional[Window]:
        if isinstance(window_id, int) and wfilter.is_candidate(window_id):
            return Win32Window(window_id)
        return None

    def foreground(self) -> Optional[Win32Window]:
        """The foreground window if it is a candidate, else None."""
        hwnd = win32.get_foreground_window()
        if hwnd and wfilter.is_candidate(hwnd):
            return Win32Window(hwnd)
        return None

    # ------------------------------------------------------------------
    # Internal: WinEvent callback
    # ------------------------------------------------------------------
    def _on_win_event(
        self,
        hook: int,
        event: int,
        hwnd: int,
        id_object: int,
        id_child: int,
        event_thread: int,
        event_time: int,
    ) -> None:
        """
        Raw WinEvent callback dispatched by the OS.

        Only events on top-level windows (OBJID_WINDOW / CHILDID_SELF) are
        considered.
        """
        if id_object != win32.OBJID_WINDOW or id_child != win32.CHILDID_SELF:
            return
        if not hwnd:
            return

        try:
            if event == win32.EVENT_OBJECT_SHOW:
                self._track(hwnd)

            elif event in (win32.EVENT_OBJECT_DESTROY, win32.EVENT_OBJECT_HIDE):
                self._untrack(hwnd)

            elif event == win32.EVENT_SYSTEM_FOREGROUND:
                window = self._track(hwnd) or self._known.get(hwnd)
                if window is not None:
                    self.events.emit(HostEvent.WINDOW_ACTIVATED, window)

            elif event in (
                win32.EVENT_SYSTEM_MINIMIZESTART,
                win32.EVENT_SYSTEM_MINIMIZEEND,
            ):
                self._emit_known(HostEvent.MINIMIZED_CHANGED, hwnd)

            elif event == win32.EVENT_SYSTEM_MOVESIZEEND:
                self._emit_known(HostEvent.MOVE_RESIZE_FINISHED, hwnd)

            elif event == win32.EVENT_OBJECT_LOCATIONCHANGE:
                self._check_monitor(hwnd)

            elif event in (win32.EVENT_OBJECT_CLOAKED, win32.EVENT_OBJECT_UNCLOAKED):
                self._emit_known(HostEvent.DESKTOPS_CHANGED, hwnd)

        except Exception:
            log.exception("Error handling event %#06x for hwnd %#010x", event, hwnd)

    # ------------------------------------------------------------------
    # Internal: tracking
    # ------------------------------------------------------------------
    def _track(self, hwnd: int) -> Optional[Win32Window]:
        """Announce *hwnd* if it is a new candidate.  Returns it if new."""
        if hwnd in self._known or not wfilter.is_candidate(hwnd):
            return None
        window = Win32Window(hwnd)
        self._known[hwnd] = window
        self._monitors[hwnd] = window.monitor
        log.debug("ADDED %r", window)
        self.events.emit(HostEvent.WINDOW_ADDED, window)
        return window

    def _untrack(self, hwnd: int) -> None:
        window = self._known.pop(hwnd, None)
        self._monitors.pop(hwnd, None)
        if window is not None:
            log.debug("REMOVED %#010x", hwnd)
            self.events.emit(HostEvent.WINDOW_REMOVED, window)

    def _emit_known(self, event: HostEvent, hwnd: int) -> None:
        window = self._known.get(hwnd)
        if window is not None:
            self.events.emit(event, window)

    def _check_monitor(self, hwnd: int) -> None:
        window = self._known.get(hwnd)
        if window is None or window.minimized:
            return
        monitor = window.monitor
        if self._monitors.get(hwnd) != monitor:
            self._monitors[hwnd] = monitor
            log.debug("OUTPUT %r -> %s", window, monitor)
            self.events.emit(HostEvent.OUTPUT_CHANGED, window)

    def _scan_existing(self) -> None:
        """Record the windows that exist at startup (no events)."""
        for window in self.stacking_order():
            self._known[window.id] = window
            self._monitors[window.id] = window.monitor
        log.info("Initial scan complete: %d windows", len(self._known))

    # ------------------------------------------------------------------
    # Public: lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """
        Scan, install the WinEvent hook and run the message loop.

        Blocks until stop() is called or SIGINT/SIGTERM is received.

        Raises:
            RuntimeError: if the WinEvent hook cannot be installed.
        """
        win32.co_initialize()
        self._scan_existing()

        self._hook_proc = win32.WinEventProc(self._on_win_event)
        self._hook_handle = win32.set_win_event_hook(
            event_min=win32.EVENT_MIN,
            event_max=win32.EVENT_MAX,
            callback=self._hook_proc,
        )
        if not self._hook_handle:
            log.error("Failed to install WinEvent hook!")
            win32.co_uninitialize()
            raise RuntimeError("SetWinEventHook failed")

        log.info("WinEvent hook installed (handle=%#x)", self._hook_handle)

        def _signal_handler(sig: int, frame: object) -> None:
            log.info("Signal %d received, stopping...", sig)
            self.stop()

        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

        self._running = True
        self._loop_thread_id = win32.get_current_thread_id()

        while self._running:
            got_msg, msg = win32.get_message()
            if not got_msg:
                break

            if msg.message == win32.WM_HOTKEY and self._hotkeys is not None:
                self._hotkeys.dispatch(msg.wParam)
                continue

            win32.translate_and_dispatch(msg)

        self._cleanup()

    def stop(self) -> None:
        """
        Request the message loop to stop.
        Safe to call from any thread or from within a callback.
        """
        self._running = False
        if self._loop_thread_id:
            win32.post_thread_message(self._loop_thread_id, win32.WM_QUIT, 0, 0)
        else:
            win32.post_quit_message(0)

    def _cleanup(self) -> None:
        if self._hotkeys is not None:
            self._hotkeys.unregister_all()

        if self._hook_handle:
            win32.unhook_win_event(self._hook_handle)
            self._hook_handle = 0
            log.info("WinEvent hook removed")

        self._hook_proc = None
        win32.co_uninitialize()
