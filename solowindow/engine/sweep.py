"""
solowindow.engine.sweep - SweepOrchestrator: the decide-then-apply cycle.

A sweep runs in two phases:

  1. Decide: capture a Snapshot of the host and let the configured
     DecisionPolicy compute the desired state of every window.  Nothing is
     written during this phase.
  2. Apply:  for every window whose desired state differs from its captured
     state, record an intent in the IntentLedger and THEN write
     ``window.minimized``.  Minimizations with a known causer are also
     recorded in the CauserVictimLedger.

Writing ``minimized`` makes the host emit minimized-changed notifications
(synchronously or later).  The recorded intents are what lets the
controller recognise those notifications as the engine's own.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from typing import Optional

from solowindow.config.settings import Settings
from solowindow.core.host import Host, Window
from solowindow.engine.context import EngineContext
from solowindow.rules.policies import Decision, DecisionPolicy, RuleSet
from solowindow.rules.snapshot import Snapshot

log = logging.getLogger(__name__)


# ============================================================================
# SweepResult
# ============================================================================
@dataclass
class SweepResult:
    """What one sweep decided and changed."""

    generation: int
    decisions: dict[Hashable, Decision] = field(default_factory=dict)
    minimized: list[Hashable] = field(default_factory=list)
    restored: list[Hashable] = field(default_factory=list)
    skipped: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.minimized or self.restored)


# ============================================================================
# SweepOrchestrator
# ============================================================================
class SweepOrchestrator:
    """
    Runs sweeps over a host and keeps the ledgers in step with them.

    Usage:
        orchestrator = SweepOrchestrator(host, context, policy, settings)
        result = orchestrator.sweep(active_id=window.id)
    """

    def __init__(
        self,
        host: Host,
        context: EngineContext,
        policy: DecisionPolicy,
        settings: Settings,
    ) -> None:
        self._host = host
        self._context = context
        self._policy = policy
        self._settings = settings

        # Sweep counter; also stamps intents for expiry
        self._generation: int = 0

        # Re-entrancy guard: a sweep requested while one is running is
        # deferred and run once the current one finishes.
        self._sweeping: bool = False
        self._rerun_requested: bool = False
        self._rerun_active_id: Optional[Hashable] = None

    # ------------------------------------------------------------------
    # Public: properties
    # ------------------------------------------------------------------
    @property
    def generation(self) -> int:
        return self._generation

    @property
    def policy(self) -> DecisionPolicy:
        return self._policy

    @property
    def is_sweeping(self) -> bool:
        return self._sweeping

    def rules(self) -> RuleSet:
        return RuleSet(self._settings, self._context.pins, self._context.manual)

    # ------------------------------------------------------------------
    # Public: sweep
    # ------------------------------------------------------------------
    def sweep(
        self,
        active_id: Optional[Hashable] = None,
        dry_run: bool = False,
    ) -> SweepResult:
        """
        Run one decide-then-apply cycle.

        Args:
            active_id: Id of the window that was just activated (used by
                       the single-active policy; ignored by dominance).
            dry_run:   Decide only, never write to the host.

        Returns:
            The SweepResult of this sweep.  A sweep requested while another
            one is running returns a skipped result and runs afterwards.
        """
        if self._sweeping:
            log.debug("Sweep requested during a sweep; deferring")
            self._rerun_requested = True
            self._rerun_active_id = active_id
            return SweepResult(generation=self._generation, skipped=True)

        limit = self._settings.sweep_limit
        if limit and self._generation >= limit:
            log.warning(
                "Sweep limit reached (%d); skipping. Restart to continue.", limit
            )
            return SweepResult(generation=self._generation, skipped=True)

        self._sweeping = True
        try:
            result = self._run(active_id, dry_run)
            # Bounded by the sweep limit (when set) and by the ledgers
            # converging: a rerun only happens if something re-requested it.
            while self._rerun_requested and not dry_run:
                self._rerun_requested = False
                if limit and self._generation >= limit:
                    break
                result = self._run(self._rerun_active_id, dry_run)
        finally:
            self._sweeping = False
            self._rerun_requested = False
        return result

    def _run(self, active_id: Optional[Hashable], dry_run: bool) -> SweepResult:
        self._generation += 1
        generation = self._generation
        context = self._context

        log.debug("sweep #%d started (policy=%s)", generation, self._policy.name)

        expired = context.intents.expire(generation, self._settings.intent_max_age)
        for window_id in expired:
            log.warning("Intent for %r never confirmed; discarded", window_id)

        # --- Phase 1: decide over a single snapshot ---
        snapshot = Snapshot.capture(self._host, active_id)
        dropped = context.causers.prune(
            lambda victim_id: self._still_minimized(snapshot, victim_id)
        )
        if dropped:
            log.debug("Pruned restored victims from ledger: %s", dropped)

        decisions = self._policy.evaluate(snapshot, self.rules())
        result = SweepResult(generation=generation, decisions=decisions)

        if dry_run:
            return result

        # --- Phase 2: apply ---
        for state in snapshot:
            decision = decisions.get(state.id)
            if decision is None:
                continue
            window = snapshot.window(state.id)
            if window is None:
                continue

            if decision.minimize and not state.minimized:
                if self._minimize(window, decision.causer, generation):
                    result.minimized.append(state.id)
            elif not decision.minimize and state.minimized:
                if self._restore(window, generation, decision.reason):
                    result.restored.append(state.id)

        log.debug(
            "sweep #%d finished: %d minimized, %d restored",
            generation,
            len(result.minimized),
            len(result.restored),
        )
        return result

    # ------------------------------------------------------------------
    # Public: out-of-sweep restoration
    # ------------------------------------------------------------------
    def restore(self, window_ids: Iterable[Hashable], reason: str = "") -> list[Hashable]:
        """
        Restore the given windows right away (causer went away).

        Ids that no longer exist, are not minimized, or were minimized by
        the user are skipped.

        Returns:
            The ids actually restored.
        """
        restored: list[Hashable] = []
        for window_id in window_ids:
            window = self._host.find(window_id)
            if window is None:
                log.debug("Cannot restore %r: window is gone", window_id)
                self._context.causers.discard_victim(window_id)
                continue
            if not window.minimized:
                self._context.causers.discard_victim(window_id)
                continue
            if self._restore(window, self._generation, reason):
                restored.append(window_id)
        return restored

    def release_all(self) -> list[Hashable]:
        """Restore every window the ledger says the engine minimized."""
        victims = self._context.causers.all_victims()
        restored = self.restore(victims, reason="releasing on shutdown")
        self._context.causers.clear()
        return restored

    # ------------------------------------------------------------------
    # Internal: apply helpers
    # ------------------------------------------------------------------
    def _minimize(
        self,
        window: Window,
        causer_id: Optional[Hashable],
        generation: int,
    ) -> bool:
        context = self._context
        if window.id in context.pins:
            log.debug("Not minimizing pinned window %r", window)
            return False

        log.info("MINIMIZE %r (causer %r)", window, causer_id)
        context.intents.record(window.id, True, generation)
        if causer_id is not None:
            context.causers.record(causer_id, window.id)
        window.minimized = True
        return True

    def _restore(self, window: Window, generation: int, reason: str = "") -> bool:
        context = self._context
        if window.id in context.manual:
            log.debug("Not restoring manually minimized window %r", window)
            return False

        log.info("RESTORE  %r%s", window, f" ({reason})" if reason else "")
        context.intents.record(window.id, False, generation)
        context.causers.discard_victim(window.id)
        window.minimized = False
        return True

    def _still_minimized(self, snapshot: Snapshot, window_id: Hashable) -> bool:
        state = snapshot.get(window_id)
        if state is None:
            return False
        # A minimize the host has not applied yet still counts
        intent = self._context.intents.get(window_id)
        return state.minimized or (intent is not None and intent.minimized)
