"""
solowindow.engine.context - EngineContext.

Groups the four mutable registries the engine owns so they are created,
inspected and reset together instead of living as module globals.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass, field

from solowindow.engine.ledger import CauserVictimLedger
from solowindow.engine.registries import (
    IntentLedger,
    ManualMinimizeTracker,
    PinRegistry,
)

log = logging.getLogger(__name__)


@dataclass
class EngineContext:
    """All per-session engine state."""

    pins: PinRegistry = field(default_factory=PinRegistry)
    manual: ManualMinimizeTracker = field(default_factory=ManualMinimizeTracker)
    intents: IntentLedger = field(default_factory=IntentLedger)
    causers: CauserVictimLedger = field(default_factory=CauserVictimLedger)

    def reset(self) -> None:
        """Forget everything (used by tests and on re-attach)."""
        self.pins.clear()
        self.manual.clear()
        self.intents.clear()
        self.causers.clear()

    def forget(self, window_id: Hashable) -> set[Hashable]:
        """
        Drop every trace of a closed window.

        Returns:
            The victims the window had as a causer; the caller decides
            whether to restore them.
        """
        self.pins.discard(window_id)
        self.manual.discard(window_id)
        self.intents.discard(window_id)
        self.causers.discard_victim(window_id)
        return self.causers.pop_causer(window_id)

    def dump_state(self) -> str:
        """Return a formatted string of every registry."""
        lines = [
            "=== EngineContext ===",
            f"    Pinned:   {sorted(map(repr, self.pins))}",
            f"    Manual:   {sorted(map(repr, self.manual))}",
            f"    Intents:  {self.intents!r}",
        ]
        for causer_id in self.causers:
            victims = sorted(map(repr, self.causers.victims_of(causer_id)))
            lines.append(f"    Causer {causer_id!r} -> {victims}")
        return "\n".join(lines)
