"""
solowindow.rules.snapshot - Captura inmutable del estado de las ventanas.

Cada barrido (sweep) decide a partir de UNA captura tomada al inicio.
Asi ninguna decision del barrido se ve afectada por los cambios que el
propio barrido aplica despues, y el resultado no depende del orden en
que se recorren las ventanas.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from solowindow.rules.rect import Rect
from solowindow.rules.relations import ancestors, on_desktop

if TYPE_CHECKING:
    from solowindow.core.host import Host, Window

log = logging.getLogger(__name__)


# ============================================================================
# WindowState
# ============================================================================
@dataclass(frozen=True, slots=True)
class WindowState:
    """
    Copia de solo lectura de una ventana en el instante de la captura.

    Atributos:
        stacking_index: Posicion en el orden de apilado (0 = arriba del todo).
        ancestor_ids:   Ids de los duenos transient, del mas cercano a la raiz.
    """

    id: Hashable
    caption: str
    is_normal: bool
    is_minimizable: bool
    minimized: bool
    desktops: frozenset
    on_all_desktops: bool
    monitor: Hashable
    bounds: Rect
    stacking_index: int
    ancestor_ids: tuple = ()

    @property
    def root_id(self) -> Hashable:
        return self.ancestor_ids[-1] if self.ancestor_ids else self.id

    @property
    def is_transient(self) -> bool:
        return bool(self.ancestor_ids)

    @classmethod
    def capture(cls, window: Window, stacking_index: int) -> WindowState:
        return cls(
            id=window.id,
            caption=window.caption,
            is_normal=window.is_normal,
            is_minimizable=window.is_minimizable,
            minimized=window.minimized,
            desktops=frozenset(window.desktops),
            on_all_desktops=window.on_all_desktops,
            monitor=window.monitor,
            bounds=window.bounds,
            stacking_index=stacking_index,
            ancestor_ids=tuple(owner.id for owner in ancestors(window)),
        )

    def __str__(self) -> str:
        return f"{self.caption!r} [{self.id}]"


# ============================================================================
# Snapshot
# ============================================================================
class Snapshot:
    """
    Lista de WindowState en orden de apilado (de frente hacia atras).

    Conserva la referencia a cada Window viva para que la fase de
    aplicacion pueda escribir ``minimized`` sin volver a consultar el host.
    """

    def __init__(
        self,
        states: list[WindowState],
        current_desktop: Hashable,
        active_id: Optional[Hashable] = None,
        live: Optional[dict[Hashable, Window]] = None,
    ) -> None:
        self._states = list(states)
        self._by_id = {s.id: s for s in self._states}
        self._live = dict(live or {})
        self.current_desktop = current_desktop
        self.active_id = active_id

    @classmethod
    def capture(cls, host: Host, active_id: Optional[Hashable] = None) -> Snapshot:
        """Captura el estado actual de *host*."""
        windows = host.stacking_order()
        states = [WindowState.capture(w, i) for i, w in enumerate(windows)]
        return cls(
            states,
            current_desktop=host.current_desktop,
            active_id=active_id,
            live={w.id: w for w in windows},
        )

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    def get(self, window_id: Hashable) -> Optional[WindowState]:
        return self._by_id.get(window_id)

    def window(self, window_id: Hashable) -> Optional[Window]:
        """La Window viva capturada con *window_id* (None si no hay)."""
        return self._live.get(window_id)

    def above(self, state: WindowState) -> list[WindowState]:
        """Ventanas estrictamente por encima de *state*, de frente hacia atras."""
        return [s for s in self._states if s.stacking_index < state.stacking_index]

    def is_on_current_desktop(self, state: WindowState) -> bool:
        return on_desktop(state, self.current_desktop)

    @property
    def active(self) -> Optional[WindowState]:
        if self.active_id is None:
            return None
        return self._by_id.get(self.active_id)

    @property
    def monitors(self) -> list[Hashable]:
        """Monitores presentes, en orden de primera aparicion."""
        seen: dict[Hashable, None] = {}
        for state in self._states:
            seen.setdefault(state.monitor, None)
        return list(seen)

    def __iter__(self) -> Iterator[WindowState]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, window_id: object) -> bool:
        return window_id in self._by_id
