"""Tests for the engine registries, the causer/victim ledger and EngineContext.

Run with:
    pytest tests/test_registries.py -v
"""

from solowindow.engine.context import EngineContext
from solowindow.engine.ledger import CauserVictimLedger
from solowindow.engine.registries import (
    IntentLedger,
    IntentStatus,
    ManualMinimizeTracker,
    PinRegistry,
)


class TestPinRegistry:
    def test_toggle(self):
        pins = PinRegistry()
        assert pins.toggle("a") is True
        assert "a" in pins
        assert pins.toggle("a") is False
        assert "a" not in pins

    def test_discard_reports_presence(self):
        manual = ManualMinimizeTracker()
        manual.add("a")
        assert manual.discard("a") is True
        assert manual.discard("a") is False
        assert len(manual) == 0


class TestIntentLedger:
    """reconcile() sorts notifications into confirmed / in flight / user."""

    def test_matching_observation_confirms_and_consumes(self):
        intents = IntentLedger()
        intents.record("a", True)

        assert intents.reconcile("a", True) is IntentStatus.CONFIRMED
        assert "a" not in intents

    def test_mismatching_observation_is_in_flight(self):
        """A pre-change signal leaves the intent in place."""
        intents = IntentLedger()
        intents.record("a", True)

        assert intents.reconcile("a", False) is IntentStatus.IN_FLIGHT
        assert "a" in intents
        assert intents.reconcile("a", True) is IntentStatus.CONFIRMED

    def test_no_intent_is_absent(self):
        assert IntentLedger().reconcile("a", True) is IntentStatus.ABSENT

    def test_record_overwrites(self):
        intents = IntentLedger()
        intents.record("a", True, generation=1)
        intents.record("a", False, generation=2)
        assert intents.get("a").minimized is False
        assert intents.get("a").generation == 2

    def test_expire(self):
        intents = IntentLedger()
        intents.record("old", True, generation=1)
        intents.record("new", True, generation=3)

        assert intents.expire(generation=4, max_age=2) == ["old"]
        assert "old" not in intents
        assert "new" in intents

    def test_expire_disabled_with_zero(self):
        intents = IntentLedger()
        intents.record("a", True, generation=1)
        assert intents.expire(generation=100, max_age=0) == []
        assert "a" in intents


class TestCauserVictimLedger:
    def test_record_and_query(self):
        ledger = CauserVictimLedger()
        assert ledger.record("c", "v1")
        assert ledger.record("c", "v2")

        assert ledger.victims_of("c") == {"v1", "v2"}
        assert ledger.causer_of("v1") == "c"
        assert ledger.all_victims() == {"v1", "v2"}

    def test_self_pair_refused(self):
        ledger = CauserVictimLedger()
        assert ledger.record("a", "a") is False
        assert len(ledger) == 0

    def test_victim_has_single_causer(self):
        ledger = CauserVictimLedger()
        ledger.record("c1", "v")
        ledger.record("c2", "v")

        assert ledger.causer_of("v") == "c2"
        assert "c1" not in ledger

    def test_pop_causer(self):
        ledger = CauserVictimLedger()
        ledger.record("c", "v")
        assert ledger.pop_causer("c") == {"v"}
        assert ledger.pop_causer("c") == set()

    def test_discard_victim_drops_empty_sets(self):
        ledger = CauserVictimLedger()
        ledger.record("c", "v")
        assert ledger.discard_victim("v") == ["c"]
        assert "c" not in ledger

    def test_prune(self):
        ledger = CauserVictimLedger()
        ledger.record("c", "keep")
        ledger.record("c", "drop")

        dropped = ledger.prune(lambda victim_id: victim_id == "keep")

        assert dropped == ["drop"]
        assert ledger.victims_of("c") == {"keep"}


class TestEngineContext:
    def test_forget_returns_victims_and_clears_traces(self):
        context = EngineContext()
        context.pins.add("w")
        context.manual.add("w")
        context.intents.record("w", True)
        context.causers.record("w", "victim")
        context.causers.record("other", "w")

        victims = context.forget("w")

        assert victims == {"victim"}
        assert "w" not in context.pins
        assert "w" not in context.manual
        assert "w" not in context.intents
        assert "other" not in context.causers

    def test_reset(self):
        context = EngineContext()
        context.pins.add("a")
        context.causers.record("a", "b")
        context.reset()
        assert len(context.pins) == 0
        assert len(context.causers) == 0

    def test_dump_state_lists_causers(self):
        context = EngineContext()
        context.causers.record("c", "v")
        dump = context.dump_state()
        assert "EngineContext" in dump
        assert "Causer 'c' -> [\"'v'\"]" in dump
