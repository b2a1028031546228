"""
solowindow.winhost.keybinds - Sistema de hotkeys globales.

Registra combos globales via RegisterHotKey. Los WM_HOTKEY llegan por el
message loop del Win32Host, que llama a dispatch().

Uso tipico:
    hk = HotkeyManager()
    hk.bind("alt+shift+p", toggle_pin, "Toggle pin")
    # ... el message loop procesa WM_HOTKEY ...
    hk.unregister_all()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from solowindow.winhost import win32
from solowindow.winhost.combo_parser import MOD_NOREPEAT, Combo, parse_combo

log = logging.getLogger(__name__)


# Type for hotkey callbacks: called with no arguments
HotkeyCallback = Callable[[], None]


@dataclass(frozen=True, slots=True)
class Hotkey:
    """A registered hotkey binding."""

    id: int
    combo: Combo
    callback: HotkeyCallback
    description: str


class HotkeyManager:
    """
    Gestiona hotkeys globales del sistema.

    Cada hotkey se registra con un ID unico; dispatch() busca el ID de un
    WM_HOTKEY y ejecuta su callback.
    """

    def __init__(self) -> None:
        self._hotkeys: dict[int, Hotkey] = {}
        self._next_id: int = 1

    @property
    def count(self) -> int:
        return len(self._hotkeys)

    def bind(
        self,
        combo: str,
        callback: HotkeyCallback,
        description: str = "",
    ) -> Optional[int]:
        """
        Register *combo* (e.g. "alt+shift+p").

        Raises:
            ComboParseError: if the combo string is invalid.

        Returns:
            The hotkey ID, or None if the OS refused it (already taken).
        """
        parsed = parse_combo(combo)
        hotkey_id = self._next_id

        if not win32.register_hotkey(hotkey_id, parsed.modifiers | MOD_NOREPEAT, parsed.vk):
            log.error("Failed to register hotkey %s (%s)", parsed, description)
            return None

        self._hotkeys[hotkey_id] = Hotkey(hotkey_id, parsed, callback, description)
        self._next_id += 1
        log.info("Hotkey registered: id=%d %s  %s", hotkey_id, parsed, description)
        return hotkey_id

    def unregister_all(self) -> None:
        """Unregister every hotkey.  Call this on shutdown."""
        for hotkey_id in list(self._hotkeys):
            win32.unregister_hotkey(hotkey_id)
        log.info("All hotkeys unregistered (%d total)", len(self._hotkeys))
        self._hotkeys.clear()

    def dispatch(self, hotkey_id: int) -> bool:
        """
        Run the callback of a WM_HOTKEY.

        Returns:
            True if a callback was found and executed.
        """
        hotkey = self._hotkeys.get(hotkey_id)
        if hotkey is None:
            log.warning("Unknown hotkey id: %d", hotkey_id)
            return False

        log.debug("Hotkey dispatched: %s", hotkey.description)
        try:
            hotkey.callback()
        except Exception:
            log.exception("Error in hotkey callback: %s", hotkey.description)
        return True
