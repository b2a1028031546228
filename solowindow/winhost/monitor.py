"""
solowindow.winhost.monitor - Monitores del sistema.

Usa win32api de pywin32 para enumerar los monitores y para saber en
cual esta cada ventana. El id de monitor que ve el motor es el nombre
del dispositivo (ej. r'\\\\.\\DISPLAY1').
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pywintypes
import win32api
import win32con

from solowindow.rules.rect import Rect

log = logging.getLogger(__name__)


# ============================================================================
# Monitor
# ============================================================================
@dataclass(frozen=True, slots=True)
class Monitor:
    """
    Un monitor fisico conectado al sistema.

    Atributos:
        name:       Nombre del dispositivo; es el id de monitor del motor.
        full_rect:  Area total del monitor.
        is_primary: True si es el monitor principal.
    """

    name: str
    full_rect: Rect
    is_primary: bool = False


# ============================================================================
# Funciones de deteccion
# ============================================================================
def get_monitors() -> list[Monitor]:
    """
    Enumera los monitores conectados.

    Returns:
        Lista de Monitor: el primario primero, luego por nombre.
    """
    monitors: list[Monitor] = []

    for hmonitor, _hdc, _rect in win32api.EnumDisplayMonitors(None, None):
        try:
            info = win32api.GetMonitorInfo(hmonitor)
        except pywintypes.error:
            log.warning("No se pudo obtener info del monitor %s", hmonitor)
            continue

        monitors.append(
            Monitor(
                name=info["Device"],
                full_rect=Rect(*info["Monitor"]),
                is_primary=bool(info["Flags"] & win32con.MONITORINFOF_PRIMARY),
            )
        )

    monitors.sort(key=lambda m: (not m.is_primary, m.name))
    log.debug("Monitores detectados: %s", [m.name for m in monitors])
    return monitors


def monitor_name_for_window(hwnd: int) -> str:
    """
    Nombre del monitor donde esta *hwnd* (el mas cercano si esta fuera).

    Para ventanas minimizadas Windows usa la posicion previa al minimizado,
    asi que una victima conserva su monitor mientras esta minimizada.
    """
    try:
        hmonitor = win32api.MonitorFromWindow(hwnd, win32con.MONITOR_DEFAULTTONEAREST)
        return win32api.GetMonitorInfo(hmonitor)["Device"]
    except pywintypes.error:
        log.debug("Sin monitor para %#010x", hwnd)
        return ""
