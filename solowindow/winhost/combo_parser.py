"""
solowindow.winhost.combo_parser - Parser de combos de teclado.

Convierte strings como "alt+shift+p" en un Combo (modifiers, vk) listo
para RegisterHotKey. No depende de ctypes, asi que la configuracion se
puede validar en cualquier plataforma.

    - Aliases: win = super = windows, ctrl = control, alt = menu.
    - Sin distincion de mayusculas: "Alt+Shift+P" == "alt+shift+p".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

log = logging.getLogger(__name__)


# Flags de RegisterHotKey
MOD_ALT = 0x0001
MOD_CONTROL = 0x0002
MOD_SHIFT = 0x0004
MOD_WIN = 0x0008
MOD_NOREPEAT = 0x4000


_MODIFIER_MAP: dict[str, int] = {
    "alt": MOD_ALT,
    "menu": MOD_ALT,
    "ctrl": MOD_CONTROL,
    "control": MOD_CONTROL,
    "shift": MOD_SHIFT,
    "win": MOD_WIN,
    "super": MOD_WIN,
    "windows": MOD_WIN,
}

# Orden de presentacion: (flag, nombre)
_MODIFIER_NAMES: tuple[tuple[int, str], ...] = (
    (MOD_WIN, "Win"),
    (MOD_CONTROL, "Ctrl"),
    (MOD_ALT, "Alt"),
    (MOD_SHIFT, "Shift"),
)


def _vk_table() -> dict[str, int]:
    table: dict[str, int] = {}
    for i in range(26):
        table[chr(ord("a") + i)] = 0x41 + i     # A-Z
    for i in range(10):
        table[str(i)] = 0x30 + i                # 0-9
    for i in range(1, 25):
        table[f"f{i}"] = 0x70 + (i - 1)          # F1-F24
    table.update(
        {
            "enter": 0x0D,
            "return": 0x0D,
            "escape": 0x1B,
            "esc": 0x1B,
            "space": 0x20,
            "tab": 0x09,
            "backspace": 0x08,
            "insert": 0x2D,
            "delete": 0x2E,
            "home": 0x24,
            "end": 0x23,
            "pageup": 0x21,
            "pagedown": 0x22,
            "left": 0x25,
            "up": 0x26,
            "right": 0x27,
            "down": 0x28,
            "pause": 0x13,
            "minus": 0xBD,
            "equals": 0xBB,
            "comma": 0xBC,
            "period": 0xBE,
            "slash": 0xBF,
            "backquote": 0xC0,
        }
    )
    return table


_VK_MAP: dict[str, int] = _vk_table()


class ComboParseError(ValueError):
    """Se lanza cuando un combo no se puede interpretar."""
    pass


@dataclass(frozen=True, slots=True)
class Combo:
    """Un combo listo para RegisterHotKey."""

    modifiers: int
    vk: int

    def __str__(self) -> str:
        parts = [name for flag, name in _MODIFIER_NAMES if self.modifiers & flag]
        parts.append(_vk_name(self.vk))
        return "+".join(parts)


# ============================================================================
# API publica
# ============================================================================
def parse_combo(combo: str) -> Combo:
    """
    Interpreta un combo del tipo "alt+shift+p".

    Raises:
        ComboParseError: combo vacio, sin tecla, con varias teclas, con
                         modificadores repetidos o con partes desconocidas.
    """
    parts = [p.strip().lower() for p in (combo or "").split("+")]
    parts = [p for p in parts if p]
    if not parts:
        raise ComboParseError(f"Empty combo: {combo!r}")

    modifiers = 0
    vk = None

    for part in parts:
        flag = _MODIFIER_MAP.get(part)
        if flag is not None:
            if modifiers & flag:
                raise ComboParseError(f"Duplicate modifier {part!r} in {combo!r}")
            modifiers |= flag
        elif part in _VK_MAP:
            if vk is not None:
                raise ComboParseError(f"More than one key in {combo!r}")
            vk = _VK_MAP[part]
        else:
            raise ComboParseError(f"Unknown key or modifier {part!r} in {combo!r}")

    if vk is None:
        raise ComboParseError(f"No key in {combo!r}")

    return Combo(modifiers, vk)


def is_valid_combo(combo: str) -> bool:
    try:
        parse_combo(combo)
    except ComboParseError:
        return False
    return True


def _vk_name(vk: int) -> str:
    for name, code in _VK_MAP.items():
        if code == vk:
            return name.upper() if len(name) == 1 else name.capitalize()
    return f"0x{vk:02X}"
