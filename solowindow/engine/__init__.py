"""
solowindow.engine - Stateful side of the engine.

This package contains:
    - registries : PinRegistry, ManualMinimizeTracker and IntentLedger
    - ledger     : CauserVictimLedger - which window minimized which
    - context    : EngineContext - the registries grouped per session
    - sweep      : SweepOrchestrator - the decide-then-apply cycle
    - menu       : The "Pin Window" MenuEntry
    - controller : SoloWindow - host events -> sweeps
"""

from solowindow.engine.registries import (
    IntentLedger,
    IntentStatus,
    ManualMinimizeTracker,
    PinRegistry,
)
from solowindow.engine.ledger import CauserVictimLedger
from solowindow.engine.context import EngineContext
from solowindow.engine.sweep import SweepOrchestrator, SweepResult
from solowindow.engine.menu import PIN_MENU_TEXT, MenuEntry
from solowindow.engine.controller import SoloWindow

__all__ = [
    "IntentLedger", "IntentStatus", "ManualMinimizeTracker", "PinRegistry",
    "CauserVictimLedger", "EngineContext",
    "SweepOrchestrator", "SweepResult",
    "PIN_MENU_TEXT", "MenuEntry",
    "SoloWindow",
]
