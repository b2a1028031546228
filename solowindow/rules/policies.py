"""
solowindow.rules.policies - Politicas de decision de visibilidad.

Cada politica es una clase que implementa la interfaz base
`DecisionPolicy`. Recibe una captura (Snapshot) y las reglas activas
(RuleSet) y retorna un mapa id de ventana -> Decision, sin modificar
nada. Aplicar las decisiones es trabajo del SweepOrchestrator.

Politicas disponibles:
    - DominanceSweepPolicy : una ventana se minimiza si alguna ventana
                             valida esta por encima de ella.
    - SingleActivePolicy   : solo la ventana activa designada de cada
                             monitor queda visible.

Ambas comparten las primitivas de RuleSet y la correccion transient
(un dialogo visible mantiene visible a su dueno).
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from solowindow.config.settings import PolicyType, Settings
from solowindow.rules.relations import is_normal_and_minimizable, share_desktop
from solowindow.rules.snapshot import Snapshot, WindowState

if TYPE_CHECKING:
    from solowindow.engine.registries import ManualMinimizeTracker, PinRegistry

log = logging.getLogger(__name__)


# ============================================================================
# Decision
# ============================================================================
@dataclass(frozen=True, slots=True)
class Decision:
    """
    Estado deseado para una ventana.

    Atributos:
        minimize: True para minimizar, False para mantener/restaurar visible.
        causer:   Id de la ventana que provoca el minimizado (si se conoce).
        reason:   Texto corto para el log.
    """

    minimize: bool
    causer: Optional[Hashable] = None
    reason: str = ""


# ============================================================================
# RuleSet - primitivas compartidas
# ============================================================================
class RuleSet:
    """
    Reglas activas: configuracion + pines + minimizados manuales.

    Solo lee los registros; nunca los modifica.
    """

    def __init__(
        self,
        settings: Settings,
        pins: PinRegistry,
        manual: ManualMinimizeTracker,
    ) -> None:
        self.settings = settings
        self._pins = pins
        self._manual = manual

    def is_pinned(self, window_id: Hashable) -> bool:
        return window_id in self._pins

    def is_manually_minimized(self, window_id: Hashable) -> bool:
        return window_id in self._manual

    def is_evaluated(self, state: WindowState, snapshot: Snapshot) -> bool:
        """
        True si la ventana participa en la evaluacion: normal, minimizable,
        en el escritorio actual y no minimizada a mano por el usuario.
        """
        return (
            is_normal_and_minimizable(state)
            and snapshot.is_on_current_desktop(state)
            and not self.is_manually_minimized(state.id)
        )

    def causer_exclusion(
        self,
        victim: WindowState,
        causer: WindowState,
        *,
        stacking: bool = True,
    ) -> Optional[str]:
        """
        Primer motivo por el que *causer* NO puede minimizar a *victim*.

        Args:
            victim:   Ventana candidata a minimizarse.
            causer:   Ventana que la minimizaria.
            stacking: Exigir que causer este estrictamente por encima.

        Returns:
            Un texto con el motivo, o None si causer cumple todas las reglas.
        """
        if not causer.is_normal:
            return "not a normal window"

        if self.is_manually_minimized(causer.id):
            return "manually minimized"

        # Una ventana no se minimiza a si misma ni a sus dialogos/duenos
        if (
            victim.id == causer.id
            or causer.id in victim.ancestor_ids
            or victim.id in causer.ancestor_ids
        ):
            return "same or related"

        if stacking and causer.stacking_index >= victim.stacking_index:
            return "below"

        if self.settings.pinned_windows_dont_minimize and self.is_pinned(causer.id):
            return "pinned"

        return self.scope_exclusion(victim, causer)

    def scope_exclusion(self, victim, causer) -> Optional[str]:
        """
        Solo las reglas de alcance: monitor, escritorio y solape.

        Es lo que puede dejar de cumplirse cuando el causante se mueve.
        """
        settings = self.settings

        if settings.respect_monitors and victim.monitor != causer.monitor:
            return "on another monitor"

        if settings.respect_virtual_desktops and not share_desktop(victim, causer):
            return "on another virtual desktop"

        if settings.respect_overlap and not victim.bounds.overlaps(causer.bounds):
            return "does not overlap"

        return None


# ============================================================================
# DecisionPolicy (clase base abstracta)
# ============================================================================
class DecisionPolicy(abc.ABC):
    """
    Interfaz abstracta para una politica de decision.

    evaluate() = decide() + correccion transient. Las subclases solo
    implementan decide().
    """

    @property
    @abc.abstractmethod
    def policy_type(self) -> PolicyType:
        """Retorna el tipo de politica."""
        ...

    @property
    def name(self) -> str:
        return self.policy_type.value

    @abc.abstractmethod
    def decide(self, snapshot: Snapshot, rules: RuleSet) -> dict[Hashable, Decision]:
        """
        Calcula las decisiones sin correccion transient.

        Las ventanas sin entrada en el mapa no se tocan.
        """
        ...

    def evaluate(self, snapshot: Snapshot, rules: RuleSet) -> dict[Hashable, Decision]:
        """Decisiones finales para *snapshot*."""
        decisions = self.decide(snapshot, rules)
        return apply_transient_correction(snapshot, decisions, rules)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


# ============================================================================
# DominanceSweepPolicy
# ============================================================================
class DominanceSweepPolicy(DecisionPolicy):
    """
    Una ventana A se minimiza si existe una ventana B por encima de ella
    que cumple todas las reglas (normal, mismo monitor, mismo escritorio,
    no relacionada, no fijada, con solape...).

    B se busca de frente hacia atras y gana la primera que cumple, de modo
    que el causante registrado es determinista.
    """

    @property
    def policy_type(self) -> PolicyType:
        return PolicyType.DOMINANCE

    def decide(self, snapshot: Snapshot, rules: RuleSet) -> dict[Hashable, Decision]:
        decisions: dict[Hashable, Decision] = {}

        for state in snapshot:
            if not rules.is_evaluated(state, snapshot):
                continue

            if rules.is_pinned(state.id):
                decisions[state.id] = Decision(False, reason="pinned")
                continue

            causer = self._find_dominant(state, snapshot, rules)
            if causer is None:
                decisions[state.id] = Decision(False, reason="not dominated")
            else:
                log.debug("%s should be minimized because of %s", state, causer)
                decisions[state.id] = Decision(
                    True, causer=causer.id, reason=f"dominated by {causer}"
                )

        return decisions

    @staticmethod
    def _find_dominant(
        state: WindowState,
        snapshot: Snapshot,
        rules: RuleSet,
    ) -> Optional[WindowState]:
        for other in snapshot.above(state):
            reason = rules.causer_exclusion(state, other)
            if reason is None:
                return other
            log.debug("%s vs %s: skip (%s)", state, other, reason)
        return None


# ============================================================================
# SingleActivePolicy
# ============================================================================
# Clave del unico slot cuando no se respetan los monitores
_GLOBAL_SLOT = "*"


class SingleActivePolicy(DecisionPolicy):
    """
    Una ventana activa designada por monitor (o una global).

    En el monitor de la ventana activada, la designada es ella misma; en
    los demas, la ventana normal no minimizada mas al frente. Toda otra
    ventana evaluable que comparta escritorio y se solape con la designada
    de su monitor se minimiza, con la designada como causante.

    Si un monitor no tiene ventana designada no se decide nada en el.
    """

    @property
    def policy_type(self) -> PolicyType:
        return PolicyType.SINGLE_ACTIVE

    def decide(self, snapshot: Snapshot, rules: RuleSet) -> dict[Hashable, Decision]:
        designated = self.designate(snapshot, rules)
        decisions: dict[Hashable, Decision] = {}

        for state in snapshot:
            if not rules.is_evaluated(state, snapshot):
                continue

            active = designated.get(self._slot(state, rules))
            if active is None:
                continue

            if state.id == active.id:
                decisions[state.id] = Decision(False, reason="designated active window")
                continue

            if rules.is_pinned(state.id):
                continue

            reason = rules.causer_exclusion(state, active, stacking=False)
            if reason is not None:
                log.debug("%s vs active %s: skip (%s)", state, active, reason)
                continue

            decisions[state.id] = Decision(
                True, causer=active.id, reason=f"not the active window {active}"
            )

        return decisions

    def designate(self, snapshot: Snapshot, rules: RuleSet) -> dict[Hashable, WindowState]:
        """
        Ventana activa designada por slot (monitor, o uno global).

        Returns:
            slot -> WindowState. Los slots sin ventana visible no aparecen.
        """
        active = snapshot.active
        if active is not None and not self._can_be_designated(active, snapshot, rules):
            active = None

        if not rules.settings.respect_monitors:
            chosen = active or self._front_most(snapshot, None)
            return {_GLOBAL_SLOT: chosen} if chosen is not None else {}

        designated: dict[Hashable, WindowState] = {}
        for monitor in snapshot.monitors:
            if active is not None and active.monitor == monitor:
                designated[monitor] = active
                continue
            front = self._front_most(snapshot, monitor)
            if front is not None:
                designated[monitor] = front
        return designated

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _slot(state: WindowState, rules: RuleSet) -> Hashable:
        return state.monitor if rules.settings.respect_monitors else _GLOBAL_SLOT

    @staticmethod
    def _can_be_designated(state: WindowState, snapshot: Snapshot, rules: RuleSet) -> bool:
        """
        La ventana activada se designa aunque siga minimizada: su
        Decision(False) la restaura.  Si el usuario la minimizo a mano no.
        """
        return (
            state.is_normal
            and snapshot.is_on_current_desktop(state)
            and not rules.is_manually_minimized(state.id)
        )

    @staticmethod
    def _is_candidate(state: WindowState, snapshot: Snapshot) -> bool:
        return (
            state.is_normal
            and not state.minimized
            and snapshot.is_on_current_desktop(state)
        )

    def _front_most(
        self,
        snapshot: Snapshot,
        monitor: Optional[Hashable],
    ) -> Optional[WindowState]:
        for state in snapshot:
            if monitor is not None and state.monitor != monitor:
                continue
            if self._is_candidate(state, snapshot):
                return state
        return None


# ============================================================================
# Correccion transient
# ============================================================================
def apply_transient_correction(
    snapshot: Snapshot,
    decisions: Mapping[Hashable, Decision],
    rules: RuleSet,
) -> dict[Hashable, Decision]:
    """
    Acopla la visibilidad de un dialogo y la de su cadena de duenos.

    1. Para cada ventana transient que queda visible y que no fue
       minimizada a mano, cada ancestro presente en la captura y no
       minimizado a mano pasa a Decision(False).
    2. Cada ventana transient con Decision(True) cuya raiz queda visible
       tras el paso 1 pasa a Decision(False). Solo se cambian decisiones
       existentes; una ventana sin decision sigue sin tocarse.

    El paso 1 lee el mapa sin corregir y el paso 2 el resultado del 1, asi
    el resultado no depende del orden.
    """
    corrected = dict(decisions)

    for state in snapshot:
        if not state.ancestor_ids:
            continue
        if not _stays_visible(state, decisions.get(state.id), snapshot):
            continue
        if rules.is_manually_minimized(state.id):
            continue

        for ancestor_id in state.ancestor_ids:
            if ancestor_id not in snapshot or rules.is_manually_minimized(ancestor_id):
                continue
            current = corrected.get(ancestor_id)
            if current is not None and not current.minimize:
                continue
            log.debug(
                "%s is a visible transient; ancestor [%s] follows it",
                state,
                ancestor_id,
            )
            corrected[ancestor_id] = Decision(
                False, reason=f"transient child {state} stays visible"
            )

    for state in snapshot:
        if not state.ancestor_ids:
            continue
        current = corrected.get(state.id)
        if current is None or not current.minimize:
            continue
        root_id = state.root_id
        root = snapshot.get(root_id)
        if root is None or rules.is_manually_minimized(root_id):
            continue
        if not _stays_visible(root, corrected.get(root_id), snapshot):
            continue
        log.debug("%s belongs to visible owner [%s]; kept visible", state, root_id)
        corrected[state.id] = Decision(False, reason=f"owner [{root_id}] stays visible")

    return corrected


def _stays_visible(
    state: WindowState,
    decision: Optional[Decision],
    snapshot: Snapshot,
) -> bool:
    """
    Visibilidad final de *state* sin la correccion.

    Sin decision la ventana no se toca (por ejemplo un dialogo, que no es
    "normal"): queda visible si ya lo esta en el escritorio actual.
    """
    if decision is not None:
        return not decision.minimize
    return not state.minimized and snapshot.is_on_current_desktop(state)


# ============================================================================
# Registro de politicas
# ============================================================================
POLICIES: dict[PolicyType, type[DecisionPolicy]] = {
    PolicyType.DOMINANCE: DominanceSweepPolicy,
    PolicyType.SINGLE_ACTIVE: SingleActivePolicy,
}


def create_policy(policy_type: PolicyType) -> DecisionPolicy:
    """Instancia la politica configurada."""
    return POLICIES[policy_type]()
