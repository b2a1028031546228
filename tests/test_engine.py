"""End-to-end engine tests: SoloWindow driven by a synchronous VirtualHost.

Run with:
    pytest tests/test_engine.py -v
"""

import logging

from solowindow.config.settings import PolicyType
from solowindow.core.events import HostEvent
from solowindow.engine.controller import SoloWindow
from solowindow.engine.menu import PIN_MENU_TEXT
from solowindow.rules.rect import Rect

LEFT = Rect(0, 0, 800, 600)
RIGHT = Rect(400, 300, 1200, 900)
FAR = Rect(2000, 0, 2800, 600)
NEAR = Rect(100, 100, 900, 700)


def open_pair(host):
    """B behind, A in front, overlapping.  Returns (a, b)."""
    b = host.add_window("B", bounds=RIGHT)
    a = host.add_window("A", bounds=LEFT)
    return a, b


# ============================================================================
# Dominance scenarios
# ============================================================================
class TestScenarios:
    def test_front_window_minimizes_back_window(self, host, engine):
        a, b = open_pair(host)

        assert b.minimized
        assert not a.minimized
        assert engine.context.causers.victims_of("A") == {"B"}
        # The engine's own change is neither pending nor taken as manual
        assert len(engine.context.intents) == 0
        assert "B" not in engine.context.manual

    def test_overlap_not_respected(self, host, make_engine):
        make_engine(host, respect_overlap=False)
        b = host.add_window("B", bounds=FAR)
        host.add_window("A", bounds=LEFT)

        assert b.minimized

    def test_pinned_window_never_minimized(self, host, engine):
        b = host.add_window("B", bounds=RIGHT)
        assert engine.toggle_pin(b) is True

        a = host.add_window("A", bounds=LEFT)
        host.move(a, NEAR)
        host.activate(a)

        assert not b.minimized

    def test_pinning_a_victim_restores_it(self, host, engine):
        a, b = open_pair(host)

        engine.toggle_pin(b)

        assert not b.minimized
        assert "A" not in engine.context.causers

    def test_other_monitor_untouched(self, host, engine):
        c = host.add_window("C", bounds=FAR, monitor=2)
        a = host.add_window("A", bounds=LEFT, monitor=1)
        host.activate(a)

        assert not c.minimized

    def test_second_sweep_changes_nothing(self, host, engine):
        host.add_window("C", bounds=NEAR)
        open_pair(host)

        result = engine.sweep()

        assert not result.skipped
        assert not result.changed

    def test_non_normal_window_added_does_not_sweep(self, host, engine):
        before = engine.orchestrator.generation
        host.add_window("tooltip", is_normal=False)
        assert engine.orchestrator.generation == before

    def test_switching_desktop_sweeps(self, host, engine):
        open_pair(host)
        before = engine.orchestrator.generation

        host.switch_desktop(2)

        assert engine.orchestrator.generation == before + 1

    def test_single_active_policy(self, host, make_engine):
        make_engine(host, policy=PolicyType.SINGLE_ACTIVE)
        a = host.add_window("A", bounds=LEFT)
        b = host.add_window("B", bounds=LEFT)
        assert a.minimized

        host.activate(a)

        assert not a.minimized
        assert b.minimized
        assert host.stacking_order()[0] is a



# ============================================================================
# Single active window: switching between windows
# ============================================================================
class TestSingleActiveSwitching:
    """Activating a window designates it, even one the engine minimized."""

    def test_switching_back_to_a_minimized_window(self, host, make_engine):
        engine = make_engine(host, policy=PolicyType.SINGLE_ACTIVE)
        a = host.add_window("A", bounds=LEFT)
        b = host.add_window("B", bounds=RIGHT)

        host.activate(b)
        assert a.minimized
        assert not b.minimized

        host.activate(a)

        assert not a.minimized
        assert b.minimized
        assert engine.active_id == "A"
        assert engine.context.causers.causer_of("B") == "A"
        assert len(engine.context.manual) == 0

    def test_alternating_activations(self, host, make_engine):
        make_engine(host, policy=PolicyType.SINGLE_ACTIVE)
        a = host.add_window("A", bounds=LEFT)
        b = host.add_window("B", bounds=RIGHT)

        for front, back in ((b, a), (a, b), (b, a), (a, b)):
            host.activate(front)
            assert not front.minimized, front.id
            assert back.minimized, back.id

    def test_activation_leaves_other_monitor_alone(self, host, make_engine):
        make_engine(host, policy=PolicyType.SINGLE_ACTIVE)
        c = host.add_window("C", bounds=LEFT, monitor=1)
        d = host.add_window("D", bounds=LEFT, monitor=1)
        a = host.add_window("A", bounds=LEFT, monitor=0)
        b = host.add_window("B", bounds=LEFT, monitor=0)
        assert a.minimized
        assert c.minimized

        host.activate(a)

        assert not a.minimized
        assert b.minimized
        assert not d.minimized
        assert c.minimized

        host.activate(b)

        assert not b.minimized
        assert a.minimized
        assert not d.minimized
        assert c.minimized


# ============================================================================
# Manual minimize / restore
# ============================================================================
class TestManualMinimize:
    def test_user_minimize_is_tracked_and_never_undone(self, host, engine):
        a = host.add_window("A", bounds=LEFT)

        host.user_minimize(a)
        engine.sweep()

        assert "A" in engine.context.manual
        assert a.minimized

    def test_user_minimizing_causer_restores_its_victims(self, host, engine):
        a, b = open_pair(host)

        host.user_minimize(a)

        assert not b.minimized
        assert "A" not in engine.context.causers
        assert "A" in engine.context.manual

    def test_user_restore_clears_manual_flag(self, host, engine):
        a, b = open_pair(host)
        host.user_minimize(a)

        host.user_restore(a)

        assert "A" not in engine.context.manual
        # A is in front again, so B goes back down
        assert b.minimized

    def test_activating_a_victim_brings_it_forward(self, host, engine):
        a, b = open_pair(host)

        host.activate(b)

        assert not b.minimized
        assert a.minimized
        assert engine.context.causers.causer_of("A") == "B"
        assert engine.active_id == "B"
        assert "B" not in engine.context.manual


# ============================================================================
# Causer cascade
# ============================================================================
class TestCauserCascade:
    def test_closing_causer_restores_victims(self, host, engine):
        a, b = open_pair(host)

        host.remove_window(a)

        assert not b.minimized
        assert "A" not in engine.context.causers

    def test_closing_victim_drops_ledger_entry(self, host, engine):
        a, b = open_pair(host)

        host.remove_window(b)

        assert len(engine.context.causers) == 0

    def test_closing_active_window_forgets_it(self, host, engine):
        a = host.add_window("A", bounds=LEFT)
        host.activate(a)
        host.remove_window(a)
        assert engine.active_id is None

    def test_moving_causer_away_restores_victim(self, host, engine):
        a, b = open_pair(host)

        host.move(a, FAR)

        assert not b.minimized
        assert "A" not in engine.context.causers

    def test_moving_causer_within_overlap_keeps_victim(self, host, engine):
        a, b = open_pair(host)

        host.move(a, NEAR)

        assert b.minimized
        assert engine.context.causers.causer_of("B") == "A"

    def test_causer_to_other_monitor_restores_victim(self, host, engine):
        a, b = open_pair(host)

        host.set_monitor(a, 1)

        assert not b.minimized

    def test_causer_to_other_desktop_restores_victim(self, host, engine):
        a, b = open_pair(host)

        host.set_desktops(a, [2])

        assert not b.minimized

    def test_dialog_keeps_owner_visible(self, host, engine):
        owner = host.add_window("P", bounds=LEFT)
        cover = host.add_window("C", bounds=LEFT)
        assert owner.minimized

        dialog = host.add_window("D", bounds=LEFT, is_normal=False, transient_owner=owner)
        host.activate(dialog)

        assert not owner.minimized
        assert not cover.minimized
        assert not dialog.minimized

    def test_release_all(self, host, engine):
        a, b = open_pair(host)

        assert engine.release_all() == ["B"]
        assert not b.minimized
        assert len(engine.context.causers) == 0


# ============================================================================
# Sweep orchestration
# ============================================================================
class TestSweepOrchestration:
    def test_engine_changes_do_not_trigger_sweeps(self, host, engine):
        """One sweep per added window; B's minimize notification adds none."""
        open_pair(host)
        assert engine.orchestrator.generation == 2
        assert len(engine.context.manual) == 0

    def test_sweep_requested_during_sweep_is_deferred(self, host, engine):
        nested = []

        def sweep_again(event, window):
            nested.append((engine.orchestrator.is_sweeping, engine.sweep()))

        b = host.add_window("B", bounds=RIGHT)
        before = engine.orchestrator.generation
        host.events.on(HostEvent.MINIMIZED_CHANGED, sweep_again)

        host.add_window("A", bounds=LEFT)

        assert b.minimized
        assert len(nested) == 1
        was_sweeping, result = nested[0]
        assert was_sweeping
        assert result.skipped
        # The deferred request ran once, after the first sweep
        assert engine.orchestrator.generation == before + 2
        assert not engine.orchestrator.is_sweeping

    def test_sweep_limit(self, host, make_engine, caplog):
        engine = make_engine(host, sweep_limit=2)
        open_pair(host)

        with caplog.at_level(logging.WARNING, logger="solowindow.engine.sweep"):
            result = engine.sweep()

        assert result.skipped
        assert engine.orchestrator.generation == 2
        assert "Sweep limit reached" in caplog.text

    def test_dry_run_writes_nothing(self, host):
        engine = SoloWindow(host)
        a, b = open_pair(host)

        result = engine.sweep(dry_run=True)

        assert result.decisions["B"].minimize
        assert result.minimized == []
        assert not b.minimized
        assert len(engine.context.intents) == 0

    def test_reset(self, host, engine):
        a, b = open_pair(host)
        engine.toggle_pin(a)
        host.activate(a)

        engine.reset()

        assert engine.active_id is None
        assert len(engine.context.pins) == 0
        assert len(engine.context.causers) == 0


# ============================================================================
# Pin context menu
# ============================================================================
class TestPinMenu:
    def test_menu_entry_toggles_pin(self, host, engine):
        a = host.add_window("A")

        entries = host.context_menu(a)
        assert len(entries) == 1
        assert entries[0].text == PIN_MENU_TEXT
        assert entries[0].checkable
        assert not entries[0].checked

        entries[0].trigger()

        assert "A" in engine.context.pins
        assert host.context_menu(a)[0].checked

    def test_no_entry_for_non_normal_window(self, host, engine):
        panel = host.add_window("panel", is_normal=False)
        assert host.context_menu(panel) == []

    def test_detach_removes_menu_and_handlers(self, host, engine):
        engine.detach()
        a, b = open_pair(host)

        assert host.context_menu(a) == []
        assert not b.minimized
        assert not engine.is_attached

    def test_toggle_pin_without_window(self, engine):
        assert engine.toggle_pin(None) is None
