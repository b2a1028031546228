"""
solowindow.core.virtual - In-memory host for tests and simulations.

VirtualHost keeps a front-to-back window list and behaves like a desktop
shell would: writing ``window.minimized`` emits MINIMIZED_CHANGED, closing a
window emits WINDOW_REMOVED, and so on.  The user side of the desktop is
simulated through explicit methods (user_minimize, activate, move...).

How notifications reach subscribers is configurable, so every timing a
real shell may use can be reproduced:

    - NotifyMode.SYNC     : delivered immediately, after the change.
    - NotifyMode.DEFERRED : queued; delivered in order by flush().
    - pre_change=True     : MINIMIZED_CHANGED is additionally delivered
                            once BEFORE the value changes (SYNC only; a
                            queued signal is always observed afterwards).
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Hashable, Iterable
from typing import TYPE_CHECKING, Optional

from solowindow.core.events import HostEvent
from solowindow.core.host import Host, Window
from solowindow.rules.rect import Rect

if TYPE_CHECKING:
    from solowindow.engine.menu import MenuEntry

log = logging.getLogger(__name__)


class NotifyMode(enum.Enum):
    """When VirtualHost delivers its notifications."""

    # Right away, from inside the call that caused them.
    SYNC = "sync"

    # Queued until flush() is called.
    DEFERRED = "deferred"


DEFAULT_BOUNDS = Rect(0, 0, 800, 600)


# ============================================================================
# VirtualWindow
# ============================================================================
class VirtualWindow(Window):
    """A window that lives in a VirtualHost."""

    def __init__(
        self,
        host: VirtualHost,
        window_id: Hashable,
        caption: str = "",
        *,
        bounds: Rect = DEFAULT_BOUNDS,
        monitor: Hashable = 0,
        desktops: Iterable[Hashable] = (),
        is_normal: bool = True,
        is_minimizable: bool = True,
        minimized: bool = False,
        transient_owner: Optional[Window] = None,
    ) -> None:
        self._host = host
        self._id = window_id
        self._caption = caption or str(window_id)
        self._bounds = bounds
        self._monitor = monitor
        self._desktops = frozenset(desktops)
        self._is_normal = is_normal
        self._is_minimizable = is_minimizable
        self._minimized = minimized
        self._owner = transient_owner

    @property
    def id(self) -> Hashable:
        return self._id

    @property
    def caption(self) -> str:
        return self._caption

    @property
    def is_normal(self) -> bool:
        return self._is_normal

    @property
    def is_minimizable(self) -> bool:
        return self._is_minimizable

    @property
    def minimized(self) -> bool:
        return self._minimized

    @minimized.setter
    def minimized(self, value: bool) -> None:
        self._host._change_minimized(self, bool(value))

    @property
    def transient_owner(self) -> Optional[Window]:
        return self._owner

    @transient_owner.setter
    def transient_owner(self, owner: Optional[Window]) -> None:
        self._owner = owner

    @property
    def desktops(self) -> frozenset[Hashable]:
        return self._desktops

    @property
    def monitor(self) -> Hashable:
        return self._monitor

    @property
    def bounds(self) -> Rect:
        return self._bounds


# ============================================================================
# VirtualHost
# ============================================================================
class VirtualHost(Host):
    """
    Scriptable desktop.

    Usage:
        host = VirtualHost()
        editor = host.add_window("editor", bounds=Rect(0, 0, 800, 600))
        host.activate(editor)
        host.user_minimize(editor)
    """

    def __init__(
        self,
        mode: NotifyMode = NotifyMode.SYNC,
        pre_change: bool = False,
        current_desktop: Hashable = 1,
    ) -> None:
        super().__init__()
        self.mode = mode
        self.pre_change = pre_change
        self._current_desktop = current_desktop

        # Front-most first
        self._windows: list[VirtualWindow] = []
        self._pending: list[tuple[HostEvent, Optional[Window]]] = []

    # ------------------------------------------------------------------
    # Host interface
    # ------------------------------------------------------------------
    def stacking_order(self) -> list[Window]:
        return list(self._windows)

    @property
    def current_desktop(self) -> Hashable:
        return self._current_desktop

    @property
    def pending(self) -> int:
        """Number of queued notifications (DEFERRED mode)."""
        return len(self._pending)

    # ------------------------------------------------------------------
    # Window lifecycle
    # ------------------------------------------------------------------
    def add_window(
        self,
        window_id: Hashable,
        caption: str = "",
        *,
        desktops: Optional[Iterable[Hashable]] = None,
        on_all_desktops: bool = False,
        **kwargs,
    ) -> VirtualWindow:
        """
        Create a window on top of the stack and announce it.

        By default the window is on the current desktop only; pass
        ``on_all_desktops=True`` or an explicit ``desktops`` iterable.
        """
        if self.find(window_id) is not None:
            raise ValueError(f"Duplicate window id {window_id!r}")

        if on_all_desktops:
            desktops = ()
        elif desktops is None:
            desktops = (self._current_desktop,)

        window = VirtualWindow(self, window_id, caption, desktops=desktops, **kwargs)
        self._windows.insert(0, window)
        log.debug("Added %r", window)
        self._notify(HostEvent.WINDOW_ADDED, window)
        return window

    def remove_window(self, window: VirtualWindow) -> None:
        """Close *window*."""
        self._windows.remove(window)
        log.debug("Removed %r", window)
        self._notify(HostEvent.WINDOW_REMOVED, window)

    # ------------------------------------------------------------------
    # Simulated user actions
    # ------------------------------------------------------------------
    def activate(self, window: VirtualWindow) -> None:
        """Focus *window*: raise it, unminimize it if needed, announce it."""
        self.raise_window(window)
        if window.minimized:
            self._change_minimized(window, False)
        self._notify(HostEvent.WINDOW_ACTIVATED, window)

    def raise_window(self, window: VirtualWindow) -> None:
        """Move *window* to the front without activating it (no event)."""
        self._windows.remove(window)
        self._windows.insert(0, window)

    def user_minimize(self, window: VirtualWindow) -> None:
        self._change_minimized(window, True)

    def user_restore(self, window: VirtualWindow) -> None:
        self._change_minimized(window, False)

    def move(self, window: VirtualWindow, bounds: Rect) -> None:
        """Finish an interactive move/resize of *window* at *bounds*."""
        window._bounds = bounds
        self._notify(HostEvent.MOVE_RESIZE_FINISHED, window)

    def set_monitor(
        self,
        window: VirtualWindow,
        monitor: Hashable,
        bounds: Optional[Rect] = None,
    ) -> None:
        """Send *window* to another output."""
        window._monitor = monitor
        if bounds is not None:
            window._bounds = bounds
        self._notify(HostEvent.OUTPUT_CHANGED, window)

    def set_desktops(self, window: VirtualWindow, desktops: Iterable[Hashable]) -> None:
        """Change the desktops of *window*; empty means all desktops."""
        window._desktops = frozenset(desktops)
        self._notify(HostEvent.DESKTOPS_CHANGED, window)

    def switch_desktop(self, desktop: Hashable) -> None:
        self._current_desktop = desktop
        self._notify(HostEvent.CURRENT_DESKTOP_CHANGED, None)

    def context_menu(self, window: VirtualWindow) -> list[MenuEntry]:
        """The entries the registered providers add for *window*."""
        return self.menu_entries(window)

    # ------------------------------------------------------------------
    # Notification delivery
    # ------------------------------------------------------------------
    def flush(self) -> int:
        """
        Deliver queued notifications in order, including any queued while
        flushing.  Returns how many were delivered.
        """
        delivered = 0
        while self._pending:
            event, window = self._pending.pop(0)
            self.events.emit(event, window)
            delivered += 1
        return delivered

    def _change_minimized(self, window: VirtualWindow, value: bool) -> None:
        if window._minimized == value:
            return
        if self.pre_change and self.mode is NotifyMode.SYNC:
            self._notify(HostEvent.MINIMIZED_CHANGED, window)
        window._minimized = value
        log.debug("%s %r", "Minimized" if value else "Restored", window)
        self._notify(HostEvent.MINIMIZED_CHANGED, window)

    def _notify(self, event: HostEvent, window: Optional[Window]) -> None:
        if self.mode is NotifyMode.DEFERRED:
            self._pending.append((event, window))
            return
        self.events.emit(event, window)
