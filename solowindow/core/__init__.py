"""
solowindow.core - Host object model and event delivery.

This package contains:
    - events  : HostEvent kinds and the EventDispatcher
    - host    : Window / Host abstract base classes the engine depends on
    - virtual : VirtualHost - in-memory host for tests and simulations
"""

from solowindow.core.events import EventDispatcher, EventHandler, HostEvent
from solowindow.core.host import Host, MenuProvider, Window
from solowindow.core.virtual import NotifyMode, VirtualHost, VirtualWindow

__all__ = [
    "EventDispatcher", "EventHandler", "HostEvent",
    "Host", "MenuProvider", "Window",
    "NotifyMode", "VirtualHost", "VirtualWindow",
]
