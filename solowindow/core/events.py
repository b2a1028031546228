"""
solowindow.core.events - Host event kinds and the dispatcher.

Every host (real desktop or in-memory) delivers its notifications through
an EventDispatcher.  The engine subscribes handlers to HostEvent kinds and
never talks to the host's native signal mechanism directly, which is what
lets the tests drive the engine by emitting synthetic events.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from solowindow.core.host import Window

log = logging.getLogger(__name__)


# ============================================================================
# Event types emitted by a host
# ============================================================================
class HostEvent(enum.Enum):
    """Notifications a host can deliver to subscribers."""

    # A window appeared.
    WINDOW_ADDED = "window_added"

    # A window was closed / destroyed.
    WINDOW_REMOVED = "window_removed"

    # A window became the active (focused) window.
    WINDOW_ACTIVATED = "window_activated"

    # A window's minimized flag changed (by the user or by the engine).
    MINIMIZED_CHANGED = "minimized_changed"

    # An interactive move or resize finished.
    MOVE_RESIZE_FINISHED = "move_resize_finished"

    # A window moved to another output (monitor).
    OUTPUT_CHANGED = "output_changed"

    # A window's set of virtual desktops changed.
    DESKTOPS_CHANGED = "desktops_changed"

    # The current virtual desktop changed.  Carries no window.
    CURRENT_DESKTOP_CHANGED = "current_desktop_changed"


# Type alias for event handlers.
# All handlers receive (event, window); window is None for workspace-wide
# events such as CURRENT_DESKTOP_CHANGED.
EventHandler = Callable[[HostEvent, Optional["Window"]], None]


# ============================================================================
# EventDispatcher
# ============================================================================
class EventDispatcher:
    """
    Fire-and-forget callback registry keyed by HostEvent.

    Usage:
        events = EventDispatcher()
        events.on(HostEvent.WINDOW_ADDED, my_handler)
        events.emit(HostEvent.WINDOW_ADDED, window)
    """

    def __init__(self) -> None:
        # Event subscribers: event -> list of handlers
        self._subscribers: dict[HostEvent, list[EventHandler]] = {
            ev: [] for ev in HostEvent
        }

    def on(self, event: HostEvent, handler: EventHandler) -> None:
        """Register a handler for a specific event."""
        self._subscribers[event].append(handler)

    def off(self, event: HostEvent, handler: EventHandler) -> None:
        """Unregister a handler."""
        try:
            self._subscribers[event].remove(handler)
        except ValueError:
            pass

    def on_all(self, handler: EventHandler) -> None:
        """Register a handler for ALL events."""
        for ev in HostEvent:
            self._subscribers[ev].append(handler)

    def subscriber_count(self, event: HostEvent) -> int:
        return len(self._subscribers[event])

    def emit(self, event: HostEvent, window: Optional[Window] = None) -> None:
        """
        Deliver *event* to every subscriber, in registration order.

        A failing handler is logged and does not prevent the remaining
        handlers from running.
        """
        # Copy: handlers may subscribe/unsubscribe while being notified
        for handler in list(self._subscribers[event]):
            try:
                handler(event, window)
            except Exception:
                log.exception(
                    "Error in event handler for %s on %s", event.value, window
                )
