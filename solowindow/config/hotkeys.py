"""
solowindow.config.hotkeys - Hotkeys del host Win32.

Windows no tiene un menu contextual de ventana que podamos extender, asi
que "Pin Window" se ofrece como hotkey global:

    pinHotkey (por defecto Alt + Shift + P) -> Fijar/soltar la ventana
                                               en primer plano
    Alt + Shift + S                         -> Barrido inmediato
"""

from __future__ import annotations

import logging

from solowindow.engine.controller import SoloWindow
from solowindow.engine.menu import PIN_MENU_TEXT
from solowindow.winhost.keybinds import HotkeyManager
from solowindow.winhost.manager import Win32Host

log = logging.getLogger(__name__)


SWEEP_HOTKEY = "alt+shift+s"


def register_all_hotkeys(
    hk_manager: HotkeyManager,
    engine: SoloWindow,
    host: Win32Host,
) -> int:
    """
    Registra los hotkeys del motor.

    Args:
        hk_manager: Gestor de hotkeys donde registrar.
        engine:     El motor ya enlazado al host.
        host:       El host Win32 (para conocer la ventana en primer plano).

    Returns:
        Numero de hotkeys registrados exitosamente.

    Raises:
        ComboParseError: si pinHotkey no es un combo valido.
    """

    def _toggle_pin() -> None:
        window = host.foreground()
        if window is None:
            log.info("Pin hotkey: no foreground window")
            return
        # Mismo contrato que el menu contextual de otros hosts
        for entry in host.menu_entries(window):
            if entry.text == PIN_MENU_TEXT:
                entry.trigger()

    bindings = [
        (engine.settings.pin_hotkey, _toggle_pin, "Toggle pin on foreground window"),
        (SWEEP_HOTKEY, engine.sweep, "Sweep now"),
    ]

    registered = 0
    for combo, callback, description in bindings:
        if hk_manager.bind(combo, callback, description) is not None:
            registered += 1

    log.info("Hotkeys registered: %d", registered)
    return registered
