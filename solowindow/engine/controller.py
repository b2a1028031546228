"""
solowindow.engine.controller - SoloWindow: host events -> sweeps.

SoloWindow is the object a host integration creates.  It:

  1. Subscribes to the host's EventDispatcher.
  2. Reconciles minimized-changed notifications against the IntentLedger
     to tell the engine's own changes from the user's.
  3. Restores victims when their causer closes, is minimized by the user,
     or moves off them.
  4. Runs a sweep after every relevant event.
  5. Contributes the "Pin Window" context menu entry.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Optional

from solowindow.config.settings import Settings
from solowindow.core.events import EventHandler, HostEvent
from solowindow.core.host import Host, Window
from solowindow.engine.context import EngineContext
from solowindow.engine.menu import PIN_MENU_TEXT, MenuEntry
from solowindow.engine.registries import IntentStatus
from solowindow.engine.sweep import SweepOrchestrator, SweepResult
from solowindow.rules.policies import DecisionPolicy, create_policy
from solowindow.rules.relations import is_normal_and_minimizable
from solowindow.rules.snapshot import WindowState

log = logging.getLogger(__name__)


class SoloWindow:
    """
    The engine as seen by a host.

    Usage:
        engine = SoloWindow(host, Settings.from_reader(read_config))
        engine.attach()
        ...
        engine.detach()
    """

    def __init__(
        self,
        host: Host,
        settings: Optional[Settings] = None,
        context: Optional[EngineContext] = None,
        policy: Optional[DecisionPolicy] = None,
    ) -> None:
        self._host = host
        self._settings = settings if settings is not None else Settings()
        self.context = context if context is not None else EngineContext()
        self._orchestrator = SweepOrchestrator(
            host,
            self.context,
            policy if policy is not None else create_policy(self._settings.policy),
            self._settings,
        )

        # Id of the most recently activated window (or None)
        self._active_id: Optional[Hashable] = None
        self._attached: bool = False

        self._handlers: dict[HostEvent, EventHandler] = {
            HostEvent.WINDOW_ADDED: self._on_window_added,
            HostEvent.WINDOW_REMOVED: self._on_window_removed,
            HostEvent.WINDOW_ACTIVATED: self._on_window_activated,
            HostEvent.MINIMIZED_CHANGED: self._on_minimized_changed,
            HostEvent.MOVE_RESIZE_FINISHED: self._on_geometry_changed,
            HostEvent.OUTPUT_CHANGED: self._on_geometry_changed,
            HostEvent.DESKTOPS_CHANGED: self._on_geometry_changed,
            HostEvent.CURRENT_DESKTOP_CHANGED: self._on_current_desktop_changed,
        }

    # ------------------------------------------------------------------
    # Public: properties
    # ------------------------------------------------------------------
    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def orchestrator(self) -> SweepOrchestrator:
        return self._orchestrator

    @property
    def active_id(self) -> Optional[Hashable]:
        return self._active_id

    @property
    def is_attached(self) -> bool:
        return self._attached

    # ------------------------------------------------------------------
    # Public: lifecycle
    # ------------------------------------------------------------------
    def attach(self) -> None:
        """Subscribe to the host's events and register the pin menu."""
        if self._attached:
            return
        for event, handler in self._handlers.items():
            self._host.events.on(event, handler)
        self._host.register_menu(self.menu_entry)
        self._attached = True
        log.info(
            "SoloWindow attached (policy=%s, %d windows)",
            self._orchestrator.policy.name,
            len(self._host.stacking_order()),
        )

    def detach(self) -> None:
        """Reverse attach().  Registries are kept; see reset()."""
        if not self._attached:
            return
        for event, handler in self._handlers.items():
            self._host.events.off(event, handler)
        self._host.unregister_menu(self.menu_entry)
        self._attached = False
        log.info("SoloWindow detached")

    def reset(self) -> None:
        """Clear every registry and forget the active window."""
        self.context.reset()
        self._active_id = None

    # ------------------------------------------------------------------
    # Public: operations
    # ------------------------------------------------------------------
    def sweep(self, dry_run: bool = False) -> SweepResult:
        """Re-evaluate every window now."""
        return self._orchestrator.sweep(self._active_id, dry_run=dry_run)

    def toggle_pin(self, window: Optional[Window]) -> Optional[bool]:
        """
        Pin or unpin *window* and re-evaluate.

        Returns:
            The new pinned state, or None if there was no window.
        """
        if window is None:
            return None

        pinned = self.context.pins.toggle(window.id)
        log.info("%s window %r", "Pinned" if pinned else "Unpinned", window)
        self.sweep()
        return pinned

    def menu_entry(self, window: Optional[Window]) -> Optional[MenuEntry]:
        """Context menu contribution: a checkable "Pin Window" for normal windows."""
        if window is None or not window.is_normal:
            return None
        return MenuEntry(
            text=PIN_MENU_TEXT,
            checkable=True,
            checked=window.id in self.context.pins,
            triggered=lambda: self.toggle_pin(window),
        )

    def release_all(self) -> list[Hashable]:
        """Restore every window the engine minimized (e.g. on shutdown)."""
        return self._orchestrator.release_all()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def _on_window_added(self, event: HostEvent, window: Optional[Window]) -> None:
        if window is None or not is_normal_and_minimizable(window):
            return
        log.debug("Window added: %r", window)
        self.sweep()

    def _on_window_removed(self, event: HostEvent, window: Optional[Window]) -> None:
        if window is None:
            return

        victims = self.context.forget(window.id)
        if self._active_id == window.id:
            self._active_id = None

        if victims:
            restored = self._orchestrator.restore(
                victims, reason=f"causer {window!r} closed"
            )
            log.debug("Causer %r closed; restored %s", window, restored)

        self.sweep()

    def _on_window_activated(self, event: HostEvent, window: Optional[Window]) -> None:
        if window is None:
            return
        log.debug("Window activated: %r", window)
        self._active_id = window.id
        self.sweep()

    def _on_minimized_changed(self, event: HostEvent, window: Optional[Window]) -> None:
        if window is None:
            return

        observed = window.minimized
        status = self.context.intents.reconcile(window.id, observed)

        if status is IntentStatus.CONFIRMED:
            log.debug("Engine action on %r confirmed", window)
            return
        if status is IntentStatus.IN_FLIGHT:
            log.debug("Ignoring in-flight signal for %r", window)
            return

        # No intent: the user did this
        if observed:
            self.context.manual.add(window.id)
            log.info("MANUAL MINIMIZE %r", window)
            victims = self.context.causers.pop_causer(window.id)
            if victims:
                self._orchestrator.restore(
                    victims, reason=f"causer {window!r} minimized by user"
                )
        else:
            self.context.manual.discard(window.id)
            self.context.causers.discard_victim(window.id)
            log.info("MANUAL RESTORE  %r", window)
            # A window the user restores becomes the active one
            self._active_id = window.id

        self.sweep()

    def _on_geometry_changed(self, event: HostEvent, window: Optional[Window]) -> None:
        if window is None:
            return
        log.debug("%s on %r", event.value, window)
        self._release_displaced_victims(window)
        self.sweep()

    def _on_current_desktop_changed(
        self, event: HostEvent, window: Optional[Window]
    ) -> None:
        log.debug("Current desktop changed to %r", self._host.current_desktop)
        self.sweep()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _release_displaced_victims(self, causer: Window) -> None:
        """
        Restore the victims *causer* no longer reaches after moving
        (no overlap, other monitor or other desktop, per the settings).
        """
        ledger = self.context.causers
        victim_ids = ledger.victims_of(causer.id)
        if not victim_ids:
            return

        rules = self._orchestrator.rules()
        causer_state = WindowState.capture(causer, 0)

        for victim_id in victim_ids:
            victim = self._host.find(victim_id)
            if victim is None:
                ledger.remove_victim(causer.id, victim_id)
                continue

            reason = rules.scope_exclusion(WindowState.capture(victim, 0), causer_state)
            if reason is None:
                continue

            ledger.remove_victim(causer.id, victim_id)
            self._orchestrator.restore(
                [victim_id], reason=f"causer {causer!r} moved: {reason}"
            )
