"""
solowindow.engine.menu - The "Pin Window" context menu contribution.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

PIN_MENU_TEXT = "Pin Window"


@dataclass(frozen=True, slots=True)
class MenuEntry:
    """A checkable entry the host adds to a window's context menu."""

    text: str
    checkable: bool
    checked: bool
    triggered: Callable[[], None]

    def trigger(self) -> None:
        self.triggered()
