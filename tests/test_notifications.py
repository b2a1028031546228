"""Notification timing: the engine must tell its own changes from the user's
however the host delivers minimized-changed notifications.

Run with:
    pytest tests/test_notifications.py -v
"""

import logging

import pytest

from solowindow.core.virtual import NotifyMode, VirtualHost
from solowindow.rules.rect import Rect

LEFT = Rect(0, 0, 800, 600)
RIGHT = Rect(400, 300, 1200, 900)


@pytest.fixture
def deferred_host():
    return VirtualHost(mode=NotifyMode.DEFERRED)


@pytest.fixture
def pre_change_host():
    return VirtualHost(pre_change=True)


class TestPreChangeSignals:
    """The host also notifies once before the value flips."""

    def test_engine_minimize_is_not_taken_as_manual(self, pre_change_host, make_engine):
        engine = make_engine(pre_change_host)
        b = pre_change_host.add_window("B", bounds=RIGHT)
        pre_change_host.add_window("A", bounds=LEFT)

        assert b.minimized
        assert len(engine.context.manual) == 0
        assert len(engine.context.intents) == 0

    def test_user_minimize_of_causer(self, pre_change_host, make_engine):
        engine = make_engine(pre_change_host)
        b = pre_change_host.add_window("B", bounds=RIGHT)
        a = pre_change_host.add_window("A", bounds=LEFT)

        pre_change_host.user_minimize(a)

        assert "A" in engine.context.manual
        assert not b.minimized
        assert len(engine.context.intents) == 0


class TestDeferredSignals:
    """Notifications are queued and delivered later by flush()."""

    def test_flush_confirms_engine_changes(self, deferred_host, make_engine):
        engine = make_engine(deferred_host)
        b = deferred_host.add_window("B", bounds=RIGHT)
        deferred_host.add_window("A", bounds=LEFT)
        assert deferred_host.pending == 2

        delivered = deferred_host.flush()

        # Two additions plus B's minimize notification
        assert delivered == 3
        assert deferred_host.pending == 0
        assert b.minimized
        assert "B" not in engine.context.manual
        assert len(engine.context.intents) == 0
        assert engine.context.causers.causer_of("B") == "A"

    def test_user_minimize_after_flush(self, deferred_host, make_engine):
        engine = make_engine(deferred_host)
        b = deferred_host.add_window("B", bounds=RIGHT)
        a = deferred_host.add_window("A", bounds=LEFT)
        deferred_host.flush()

        deferred_host.user_minimize(a)
        deferred_host.flush()

        assert "A" in engine.context.manual
        assert not b.minimized
        assert len(engine.context.intents) == 0

    def test_unconfirmed_intent_expires(self, deferred_host, make_engine, caplog):
        engine = make_engine(deferred_host, intent_max_age=1)
        deferred_host.add_window("B", bounds=RIGHT)
        deferred_host.add_window("A", bounds=LEFT)

        engine.sweep()
        assert "B" in engine.context.intents

        with caplog.at_level(logging.WARNING, logger="solowindow.engine.sweep"):
            engine.sweep()
            assert "B" in engine.context.intents
            engine.sweep()

        assert "B" not in engine.context.intents
        assert "never confirmed" in caplog.text
