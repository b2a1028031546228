"""
solowindow.engine.registries - Per-session window id registries.

    - PinRegistry           : windows the user exempted from auto-minimize.
    - ManualMinimizeTracker : windows the user (not the engine) minimized.
    - IntentLedger          : minimize/restore requests awaiting the host's
                              confirming notification.

All of them hold window ids only, never Window objects, and live only for
the lifetime of the process.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger(__name__)


# ============================================================================
# WindowIdSet
# ============================================================================
class WindowIdSet:
    """A plain set of window ids with logging-friendly helpers."""

    def __init__(self) -> None:
        self._ids: set[Hashable] = set()

    def add(self, window_id: Hashable) -> None:
        self._ids.add(window_id)

    def discard(self, window_id: Hashable) -> bool:
        """Remove *window_id*.  Returns True if it was present."""
        if window_id in self._ids:
            self._ids.discard(window_id)
            return True
        return False

    def clear(self) -> None:
        self._ids.clear()

    def __contains__(self, window_id: object) -> bool:
        return window_id in self._ids

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({sorted(map(repr, self._ids))})"


class PinRegistry(WindowIdSet):
    """Windows the user pinned.  Pinned windows are never auto-minimized."""

    def toggle(self, window_id: Hashable) -> bool:
        """Flip the pin on *window_id*.  Returns the new pinned state."""
        if self.discard(window_id):
            return False
        self.add(window_id)
        return True


class ManualMinimizeTracker(WindowIdSet):
    """
    Windows the user minimized directly.

    The engine never restores these; an id leaves the set when the user
    restores the window or the window closes.
    """


# ============================================================================
# IntentLedger
# ============================================================================
class IntentStatus(enum.Enum):
    """Outcome of reconciling a minimized-changed notification."""

    # An intent existed and the observed state matches it: consumed.
    CONFIRMED = "confirmed"

    # An intent exists but the observed state does not match yet: a stale
    # or pre-change signal for an engine request still in flight.
    IN_FLIGHT = "in_flight"

    # No intent: the change came from the user.
    ABSENT = "absent"


@dataclass(frozen=True, slots=True)
class Intent:
    """A pending request: the engine asked for ``minimized``."""

    minimized: bool
    generation: int = 0


class IntentLedger:
    """
    Map window id -> the minimize/restore action the engine just requested.

    Contract with the host: minimized-changed notifications are post-change
    observations.  The handler reconciles the value it observes against the
    recorded intent via reconcile().
    """

    def __init__(self) -> None:
        self._intents: dict[Hashable, Intent] = {}

    def record(self, window_id: Hashable, minimized: bool, generation: int = 0) -> None:
        """Record that the engine is about to set ``minimized`` on a window."""
        self._intents[window_id] = Intent(minimized, generation)

    def get(self, window_id: Hashable) -> Optional[Intent]:
        return self._intents.get(window_id)

    def discard(self, window_id: Hashable) -> None:
        self._intents.pop(window_id, None)

    def reconcile(self, window_id: Hashable, observed: bool) -> IntentStatus:
        """
        Match a notification's observed state against the ledger.

        Args:
            window_id: The window the notification is about.
            observed:  The window's ``minimized`` value as seen now.

        Returns:
            CONFIRMED (entry consumed), IN_FLIGHT (entry kept, notification
            to be ignored) or ABSENT (user-initiated change).
        """
        intent = self._intents.get(window_id)
        if intent is None:
            return IntentStatus.ABSENT
        if intent.minimized == observed:
            del self._intents[window_id]
            return IntentStatus.CONFIRMED
        return IntentStatus.IN_FLIGHT

    def expire(self, generation: int, max_age: int) -> list[Hashable]:
        """
        Drop intents recorded more than *max_age* sweeps before *generation*.

        Returns the ids that were dropped.
        """
        if max_age <= 0:
            return []
        stale = [
            window_id
            for window_id, intent in self._intents.items()
            if generation - intent.generation > max_age
        ]
        for window_id in stale:
            del self._intents[window_id]
        return stale

    def clear(self) -> None:
        self._intents.clear()

    def __contains__(self, window_id: object) -> bool:
        return window_id in self._intents

    def __len__(self) -> int:
        return len(self._intents)

    def __repr__(self) -> str:
        return f"IntentLedger({self._intents!r})"
