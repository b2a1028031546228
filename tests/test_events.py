"""Tests for core.events.EventDispatcher.

Run with:
    pytest tests/test_events.py -v
"""

import logging

from solowindow.core.events import EventDispatcher, HostEvent


class TestEventDispatcher:
    def setup_method(self):
        self.events = EventDispatcher()
        self.received = []

    def _record(self, tag):
        def handler(event, window):
            self.received.append((tag, event, window))
        return handler

    def test_handlers_run_in_registration_order(self):
        self.events.on(HostEvent.WINDOW_ADDED, self._record("first"))
        self.events.on(HostEvent.WINDOW_ADDED, self._record("second"))

        self.events.emit(HostEvent.WINDOW_ADDED, "w")

        assert [tag for tag, _, _ in self.received] == ["first", "second"]
        assert self.received[0][1:] == (HostEvent.WINDOW_ADDED, "w")

    def test_other_events_not_delivered(self):
        self.events.on(HostEvent.WINDOW_ADDED, self._record("added"))
        self.events.emit(HostEvent.WINDOW_REMOVED, "w")
        assert self.received == []

    def test_failing_handler_is_contained(self, caplog):
        """A handler that raises is logged; the next one still runs."""
        def broken(event, window):
            raise RuntimeError("boom")

        self.events.on(HostEvent.WINDOW_ACTIVATED, broken)
        self.events.on(HostEvent.WINDOW_ACTIVATED, self._record("after"))

        with caplog.at_level(logging.ERROR, logger="solowindow.core.events"):
            self.events.emit(HostEvent.WINDOW_ACTIVATED, "w")

        assert [tag for tag, _, _ in self.received] == ["after"]
        assert "boom" in caplog.text

    def test_off(self):
        handler = self._record("x")
        self.events.on(HostEvent.OUTPUT_CHANGED, handler)
        self.events.off(HostEvent.OUTPUT_CHANGED, handler)
        # Removing twice is harmless
        self.events.off(HostEvent.OUTPUT_CHANGED, handler)

        self.events.emit(HostEvent.OUTPUT_CHANGED, "w")

        assert self.received == []
        assert self.events.subscriber_count(HostEvent.OUTPUT_CHANGED) == 0

    def test_on_all(self):
        self.events.on_all(self._record("all"))
        for event in HostEvent:
            assert self.events.subscriber_count(event) == 1

        self.events.emit(HostEvent.CURRENT_DESKTOP_CHANGED)

        assert self.received == [("all", HostEvent.CURRENT_DESKTOP_CHANGED, None)]

    def test_unsubscribe_during_emit(self):
        """Handlers may unsubscribe themselves while being notified."""
        def once(event, window):
            self.received.append(("once", event, window))
            self.events.off(event, once)

        self.events.on(HostEvent.WINDOW_ADDED, once)
        self.events.emit(HostEvent.WINDOW_ADDED, "a")
        self.events.emit(HostEvent.WINDOW_ADDED, "b")

        assert len(self.received) == 1
