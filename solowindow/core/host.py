"""
solowindow.core.host - The host object model the engine depends on.

A *host* is whatever owns the real windows: a desktop shell, a window
manager, or the in-memory VirtualHost used by the tests.  The engine only
ever sees:

    - Window : a read/write view of one window (minimized is writable).
    - Host   : the front-to-back window list, the current virtual desktop,
               an EventDispatcher, and a hook for the pin context menu.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any, Optional

from solowindow.core.events import EventDispatcher
from solowindow.rules.rect import Rect

if TYPE_CHECKING:
    from solowindow.engine.menu import MenuEntry

log = logging.getLogger(__name__)


# Type for context-menu providers: window -> entry (or None to contribute
# nothing for that window).
MenuProvider = Callable[["Window"], Optional["MenuEntry"]]


# ============================================================================
# Window
# ============================================================================
class Window(abc.ABC):
    """
    Abstract view of a single host window.

    Equality and hashing are based solely on ``id``, so a Window can be
    used in sets and as a dict key regardless of which host produced it.
    """

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    @abc.abstractmethod
    def id(self) -> Hashable:
        """Opaque identifier, stable and unique for the window's lifetime."""
        ...

    @property
    @abc.abstractmethod
    def caption(self) -> str:
        """Display label (informational only)."""
        ...

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------
    @property
    @abc.abstractmethod
    def is_normal(self) -> bool:
        """True for regular application windows (not panels, docks, tooltips)."""
        ...

    @property
    @abc.abstractmethod
    def is_minimizable(self) -> bool:
        ...

    # ------------------------------------------------------------------
    # Mutable state
    # ------------------------------------------------------------------
    @property
    @abc.abstractmethod
    def minimized(self) -> bool:
        ...

    @minimized.setter
    @abc.abstractmethod
    def minimized(self, value: bool) -> None:
        ...

    # ------------------------------------------------------------------
    # Relations / placement
    # ------------------------------------------------------------------
    @property
    @abc.abstractmethod
    def transient_owner(self) -> Optional[Window]:
        """The window this one is transient for (dialogs, popups), or None."""
        ...

    @property
    @abc.abstractmethod
    def desktops(self) -> frozenset[Hashable]:
        """Virtual desktop ids the window is on.  Empty means all desktops."""
        ...

    @property
    def on_all_desktops(self) -> bool:
        return not self.desktops

    @property
    @abc.abstractmethod
    def monitor(self) -> Hashable:
        """Identifier of the output the window currently occupies."""
        ...

    @property
    @abc.abstractmethod
    def bounds(self) -> Rect:
        ...

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Window):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r}, caption={self.caption!r})"


# ============================================================================
# Host
# ============================================================================
class Host(abc.ABC):
    """
    Abstract workspace: the window list, the current desktop and events.

    Subclasses must create ``self.events`` (an EventDispatcher) and
    implement stacking_order() and current_desktop.
    """

    def __init__(self) -> None:
        self.events = EventDispatcher()
        self._menu_providers: list[MenuProvider] = []

    @abc.abstractmethod
    def stacking_order(self) -> list[Window]:
        """All windows, front-most first (index 0 is on top)."""
        ...

    @property
    @abc.abstractmethod
    def current_desktop(self) -> Hashable:
        ...

    def find(self, window_id: Any) -> Optional[Window]:
        """Return the live window with *window_id*, or None if it is gone."""
        for window in self.stacking_order():
            if window.id == window_id:
                return window
        return None

    # ------------------------------------------------------------------
    # Context menu contribution
    # ------------------------------------------------------------------
    def register_menu(self, provider: MenuProvider) -> None:
        """Register a per-window context menu contribution."""
        self._menu_providers.append(provider)

    def unregister_menu(self, provider: MenuProvider) -> None:
        try:
            self._menu_providers.remove(provider)
        except ValueError:
            pass

    def menu_entries(self, window: Window) -> list[MenuEntry]:
        """Collect the entries every provider contributes for *window*."""
        entries: list[MenuEntry] = []
        for provider in self._menu_providers:
            entry = provider(window)
            if entry is not None:
                entries.append(entry)
        return entries
