"""Tests for the in-memory VirtualHost.

Run with:
    pytest tests/test_virtual.py -v
"""

import pytest

from solowindow.core.events import HostEvent
from solowindow.core.virtual import NotifyMode, VirtualHost


@pytest.fixture
def recorded():
    """(host, list of (event, window id)) with a recorder on every event."""
    host = VirtualHost()
    seen = []
    host.events.on_all(lambda event, window: seen.append((event, getattr(window, "id", None))))
    return host, seen


class TestVirtualHost:
    def test_new_windows_go_on_top(self, host):
        host.add_window("a")
        host.add_window("b")
        assert [w.id for w in host.stacking_order()] == ["b", "a"]

    def test_duplicate_id_rejected(self, host):
        host.add_window("a")
        with pytest.raises(ValueError, match="Duplicate"):
            host.add_window("a")

    def test_default_desktop_is_current(self):
        host = VirtualHost(current_desktop=3)
        assert host.add_window("a").desktops == frozenset({3})
        assert host.add_window("b", on_all_desktops=True).on_all_desktops

    def test_find(self, host):
        a = host.add_window("a")
        assert host.find("a") is a
        host.remove_window(a)
        assert host.find("a") is None

    def test_events(self, recorded):
        host, seen = recorded
        a = host.add_window("a")
        a.minimized = True
        # Unchanged value: no notification
        a.minimized = True
        host.activate(a)
        host.switch_desktop(2)

        assert seen == [
            (HostEvent.WINDOW_ADDED, "a"),
            (HostEvent.MINIMIZED_CHANGED, "a"),
            (HostEvent.MINIMIZED_CHANGED, "a"),
            (HostEvent.WINDOW_ACTIVATED, "a"),
            (HostEvent.CURRENT_DESKTOP_CHANGED, None),
        ]
        assert not a.minimized

    def test_pre_change_notifies_twice(self):
        host = VirtualHost(pre_change=True)
        observed = []
        host.events.on(
            HostEvent.MINIMIZED_CHANGED, lambda event, window: observed.append(window.minimized)
        )
        host.add_window("a").minimized = True
        assert observed == [False, True]

    def test_deferred_queue(self):
        host = VirtualHost(mode=NotifyMode.DEFERRED)
        seen = []
        host.events.on_all(lambda event, window: seen.append(event))

        a = host.add_window("a")
        host.user_minimize(a)
        assert seen == []
        assert host.pending == 2

        assert host.flush() == 2
        assert seen == [HostEvent.WINDOW_ADDED, HostEvent.MINIMIZED_CHANGED]
