"""
solowindow.engine.ledger - CauserVictimLedger.

Remembers, for each "causer" window, which "victim" windows the engine
minimized because of it.  That is what allows restoring a victim exactly
when the reason for its minimization goes away (the causer closes, is
minimized by the user, or moves off the victim).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterator

log = logging.getLogger(__name__)


class CauserVictimLedger:
    """Map causer id -> set of victim ids.  Empty sets are never kept."""

    def __init__(self) -> None:
        self._victims: dict[Hashable, set[Hashable]] = {}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def record(self, causer_id: Hashable, victim_id: Hashable) -> bool:
        """
        Record that *causer_id* caused *victim_id* to be minimized.

        A victim is attributed to a single causer: any previous entry for
        the victim is dropped first.  Self pairs are refused.

        Returns:
            True if the pair was recorded.
        """
        if causer_id == victim_id:
            log.warning("Refusing to record %r as its own causer", causer_id)
            return False

        self.discard_victim(victim_id)
        self._victims.setdefault(causer_id, set()).add(victim_id)
        return True

    def pop_causer(self, causer_id: Hashable) -> set[Hashable]:
        """Remove the entry for *causer_id* and return its victims."""
        return self._victims.pop(causer_id, set())

    def remove_victim(self, causer_id: Hashable, victim_id: Hashable) -> bool:
        """Remove one victim from one causer's set."""
        victims = self._victims.get(causer_id)
        if victims is None or victim_id not in victims:
            return False
        victims.discard(victim_id)
        if not victims:
            del self._victims[causer_id]
        return True

    def discard_victim(self, victim_id: Hashable) -> list[Hashable]:
        """
        Remove *victim_id* from every causer's set.

        Returns:
            The causers it was removed from.
        """
        causers = [c for c, victims in self._victims.items() if victim_id in victims]
        for causer_id in causers:
            self.remove_victim(causer_id, victim_id)
        return causers

    def prune(self, keep: Callable[[Hashable], bool]) -> list[Hashable]:
        """
        Drop every victim for which ``keep(victim_id)`` is False.

        Returns:
            The victim ids that were dropped.
        """
        dropped: list[Hashable] = []
        for causer_id in list(self._victims):
            for victim_id in list(self._victims[causer_id]):
                if not keep(victim_id):
                    self.remove_victim(causer_id, victim_id)
                    dropped.append(victim_id)
        return dropped

    def clear(self) -> None:
        self._victims.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def victims_of(self, causer_id: Hashable) -> frozenset[Hashable]:
        return frozenset(self._victims.get(causer_id, ()))

    def causer_of(self, victim_id: Hashable) -> Hashable | None:
        for causer_id, victims in self._victims.items():
            if victim_id in victims:
                return causer_id
        return None

    def all_victims(self) -> set[Hashable]:
        result: set[Hashable] = set()
        for victims in self._victims.values():
            result |= victims
        return result

    def __contains__(self, causer_id: object) -> bool:
        return causer_id in self._victims

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._victims))

    def __len__(self) -> int:
        return len(self._victims)

    def __repr__(self) -> str:
        return f"CauserVictimLedger({self._victims!r})"
