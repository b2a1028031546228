"""
solowindow.rules - Reglas de visibilidad (logica pura, sin efectos).

Este paquete contiene:
    - rect      : Estructura Rect y prueba de solape
    - relations : Escritorios compartidos y cadena de duenos transient
    - snapshot  : WindowState / Snapshot - captura inmutable por barrido
    - policies  : RuleSet y las politicas Dominance / SingleActive
"""

from solowindow.rules.rect import Rect, overlaps
from solowindow.rules.relations import (
    ancestors,
    is_normal_and_minimizable,
    is_transient_related,
    on_desktop,
    root_owner,
    share_desktop,
)
from solowindow.rules.snapshot import Snapshot, WindowState
from solowindow.rules.policies import (
    Decision,
    DecisionPolicy,
    DominanceSweepPolicy,
    POLICIES,
    RuleSet,
    SingleActivePolicy,
    apply_transient_correction,
    create_policy,
)

__all__ = [
    "Rect",
    "overlaps",
    "ancestors",
    "is_normal_and_minimizable",
    "is_transient_related",
    "on_desktop",
    "root_owner",
    "share_desktop",
    "Snapshot",
    "WindowState",
    "Decision",
    "DecisionPolicy",
    "DominanceSweepPolicy",
    "POLICIES",
    "RuleSet",
    "SingleActivePolicy",
    "apply_transient_correction",
    "create_policy",
]
