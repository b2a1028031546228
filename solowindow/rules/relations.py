"""
solowindow.rules.relations - Relaciones entre ventanas.

Funciones puras que responden preguntas sobre pares de ventanas:
    - share_desktop        : comparten algun escritorio virtual
    - on_desktop           : la ventana es visible en un escritorio dado
    - root_owner/ancestors : cadena de duenos "transient" (dialogos)
    - is_transient_related : una es ancestro de la otra

Funcionan con cualquier objeto que exponga los atributos de Window
(desktops, on_all_desktops, transient_owner).
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solowindow.core.host import Window

log = logging.getLogger(__name__)


# ============================================================================
# Escritorios virtuales
# ============================================================================
def share_desktop(a, b) -> bool:
    """
    True si *a* y *b* comparten algun escritorio virtual.

    Una ventana marcada "en todos los escritorios" comparte escritorio
    con cualquier otra. Los escritorios se comparan por id.
    """
    if a.on_all_desktops or b.on_all_desktops:
        return True
    return not a.desktops.isdisjoint(b.desktops)


def on_desktop(window, desktop: Hashable) -> bool:
    """True si *window* es visible en el escritorio *desktop*."""
    return window.on_all_desktops or desktop in window.desktops


# ============================================================================
# Cadena transient
# ============================================================================
def ancestors(window: Window) -> list[Window]:
    """
    Retorna los duenos transient de *window*, del mas cercano a la raiz.

    Se recorre de forma iterativa. Si los datos del host contienen un
    ciclo de propiedad se registra el error y se retorna una lista vacia,
    es decir, la ventana se trata como si no tuviera dueno.
    """
    chain: list[Window] = []
    seen: set[Hashable] = {window.id}
    owner = window.transient_owner

    while owner is not None:
        if owner.id in seen:
            log.error(
                "Cyclic transient ownership detected at %r (starting from %r)",
                owner,
                window,
            )
            return []
        seen.add(owner.id)
        chain.append(owner)
        owner = owner.transient_owner

    return chain


def root_owner(window: Window) -> Window:
    """
    Sigue transient_owner hasta llegar a una ventana sin dueno.

    Retorna *window* misma si no tiene dueno, o si la cadena es ciclica.
    """
    chain = ancestors(window)
    return chain[-1] if chain else window


def is_transient_related(a: Window, b: Window) -> bool:
    """True si *a* es ancestro transient de *b* o viceversa."""
    if a.id == b.id:
        return False
    return (
        any(owner.id == b.id for owner in ancestors(a))
        or any(owner.id == a.id for owner in ancestors(b))
    )


def is_normal_and_minimizable(window) -> bool:
    return window.is_normal and window.is_minimizable
