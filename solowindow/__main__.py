"""
SoloWindow - Entry point (Windows desktop).

Run with:  python -m solowindow [--policy single_active] [--debug]
           python -m solowindow --dry-run     (print decisions and exit)
"""

import argparse
import logging
import sys

from solowindow.config.settings import PolicyType, Settings, SettingsError
from solowindow.engine.controller import SoloWindow
from solowindow.rules.snapshot import Snapshot

log = logging.getLogger("solowindow")


class SafeStreamHandler(logging.StreamHandler):
    """Handler that replaces unencodable characters instead of crashing."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            enc = getattr(self.stream, "encoding", "utf-8") or "utf-8"
            safe = msg.encode(enc, errors="replace").decode(enc, errors="replace")
            self.stream.write(safe + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def setup_logging(debug: bool = False) -> None:
    fmt = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
    handler = SafeStreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.addHandler(handler)

    # Quiet down noisy loggers
    logging.getLogger("solowindow.winhost.filter").setLevel(logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solowindow",
        description="Minimize windows that are covered by another window.",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in PolicyType],
        default=PolicyType.DOMINANCE.value,
    )
    parser.add_argument("--ignore-monitors", action="store_true",
                        help="let windows minimize windows on other monitors")
    parser.add_argument("--ignore-virtual-desktops", action="store_true",
                        help="let windows minimize windows on other desktops")
    parser.add_argument("--ignore-overlap", action="store_true",
                        help="minimize even windows that are not overlapped")
    parser.add_argument("--pinned-can-minimize", action="store_true",
                        help="pinned windows still minimize the windows below")
    parser.add_argument("--sweep-limit", type=int, default=0)
    parser.add_argument("--intent-max-age", type=int, default=0)
    parser.add_argument("--pin-hotkey", default=Settings().pin_hotkey)
    parser.add_argument("--dry-run", action="store_true",
                        help="print what one sweep would do and exit")
    parser.add_argument("--debug", action="store_true")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Map the command line onto the configuration keys."""
    return Settings.from_mapping(
        {
            "respectMonitors": not args.ignore_monitors,
            "respectVirtualDesktops": not args.ignore_virtual_desktops,
            "respectOverlap": not args.ignore_overlap,
            "pinnedWindowsDontMinimize": not args.pinned_can_minimize,
            "policy": args.policy,
            "sweepLimit": args.sweep_limit,
            "intentMaxAge": args.intent_max_age,
            "pinHotkey": args.pin_hotkey,
        }
    )


def print_diagnostics(engine: SoloWindow, host) -> None:
    """One dry-run sweep: every listed window and what would happen to it."""
    snapshot = Snapshot.capture(host)
    result = engine.sweep(dry_run=True)

    print(f"\n  {len(snapshot)} windows, policy={engine.orchestrator.policy.name}\n")
    for state in snapshot:
        decision = result.decisions.get(state.id)
        if decision is None:
            verdict = "untouched"
        elif decision.minimize:
            verdict = f"MINIMIZE ({decision.reason})"
        else:
            verdict = f"visible ({decision.reason})"
        flags = "".join(
            (
                "N" if state.is_normal else "-",
                "m" if state.is_minimizable else "-",
                "M" if state.minimized else "-",
            )
        )
        print(f"  {state.stacking_index:3d} {flags} {state!s:<50.50} {verdict}")
    print("")


def main() -> int:
    args = build_parser().parse_args()
    setup_logging(args.debug)

    try:
        settings = settings_from_args(args)
    except SettingsError as exc:
        log.error("Invalid configuration: %s", exc)
        return 2

    if sys.platform != "win32":
        log.error("The desktop host only runs on Windows")
        return 1

    from solowindow.config.hotkeys import register_all_hotkeys
    from solowindow.winhost.combo_parser import ComboParseError
    from solowindow.winhost.keybinds import HotkeyManager
    from solowindow.winhost.manager import Win32Host
    from solowindow.winhost.monitor import get_monitors

    hk_manager = HotkeyManager()
    host = Win32Host(hotkeys=hk_manager)
    engine = SoloWindow(host, settings)

    if args.dry_run:
        print_diagnostics(engine, host)
        return 0

    engine.attach()
    try:
        hk_count = register_all_hotkeys(hk_manager, engine, host)
    except ComboParseError as exc:
        log.error("Invalid pinHotkey: %s", exc)
        engine.detach()
        return 2

    print("=" * 60)
    print("  SoloWindow running. Press Ctrl+C to stop.")
    print(f"  Policy:   {settings.policy.value}")
    for monitor in get_monitors():
        primary = " (primary)" if monitor.is_primary else ""
        print(f"  Monitor:  {monitor.name} {monitor.full_rect}{primary}")
    print(f"  Hotkeys:  {hk_count}  (pin: {settings.pin_hotkey})")
    print("=" * 60 + "\n")

    engine.sweep()
    try:
        host.start()
    finally:
        # Never leave windows minimized behind once the engine is gone
        restored = engine.release_all()
        engine.detach()
        log.info("Released %d windows", len(restored))
        print("\n" + engine.context.dump_state())

    return 0


if __name__ == "__main__":
    sys.exit(main())
