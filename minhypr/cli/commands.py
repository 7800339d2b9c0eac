"""CLI command handlers for minhypr.

Implements all CLI commands for window minimization.
"""

import argparse
import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional

from .. import __version__
from ..compositor import create_compositor
from ..core.capture import ThumbnailCapture
from ..core.config import MinhyprConfig, load_config
from ..core.engine import MinimizationEngine, RestoreResult
from ..core.errors import MinhyprError, NotFound
from ..core.notifier import StatusBarNotifier
from ..core.picker import RofiPicker
from ..core.presentation import format_rofi_row, menu_rows, neutral_status, status_payload
from ..core.store import StateStore
from .logging_config import log_timing, setup_logging


logger = logging.getLogger(__name__)


# ANSI color codes for output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BLUE = "\033[34m"
    GRAY = "\033[90m"


def print_success(message: str) -> None:
    """Print success message in green."""
    print(f"{Colors.GREEN}✓{Colors.RESET} {message}")


def print_error(message: str) -> None:
    """Print error message in red."""
    print(f"{Colors.RED}✗{Colors.RESET} {message}", file=sys.stderr)


def print_info(message: str) -> None:
    """Print info message in blue."""
    print(f"{Colors.BLUE}ℹ{Colors.RESET} {message}")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    print(f"{Colors.YELLOW}⚠{Colors.RESET} {message}")


def print_error_with_remediation(error: str, remediation: str) -> None:
    """Print error with remediation steps.

    Examples:
        >>> print_error_with_remediation(
        ...     "No minimized window matches '7'",
        ...     "Use 'minhypr list' to see minimized windows"
        ... )
    """
    print(f"{Colors.RED}✗ Error:{Colors.RESET} {error}", file=sys.stderr)
    print(f"{Colors.BLUE}  Remediation:{Colors.RESET} {remediation}", file=sys.stderr)


def report_error(error: MinhyprError) -> int:
    """Print a minhypr error and return the exit status for it."""
    if error.remediation:
        print_error_with_remediation(error.message, error.remediation)
    else:
        print_error(error.message)
    return 1


# ============================================================================
# Runtime wiring
# ============================================================================


def _config_path(args: argparse.Namespace) -> Optional[Path]:
    config = getattr(args, "config", None)
    return Path(config).expanduser() if config else None


def build_engine(config: MinhyprConfig) -> MinimizationEngine:
    """Wire the store, adapters and notifier for one invocation."""
    store = StateStore(config.state_file, config.lock_file, lock_timeout=config.lock_timeout)
    capture = ThumbnailCapture(
        config.preview_dir,
        thumbnail_size=config.thumbnail_size,
        icon_size=config.icon_size,
        timeout=config.command_timeout,
        enabled=config.capture_enabled,
    )
    return MinimizationEngine(
        store,
        create_compositor(config),
        capture=capture,
        config=config,
        notifier=StatusBarNotifier(config.waybar_signal),
    )


@asynccontextmanager
async def open_engine(args: argparse.Namespace) -> AsyncIterator[MinimizationEngine]:
    engine = build_engine(load_config(_config_path(args)))
    try:
        yield engine
    finally:
        await engine.compositor.close()


def _describe(result: RestoreResult) -> str:
    entry = result.entry
    name = entry.app_class or entry.window_handle
    message = f"Restored {name} to workspace {result.workspace}"
    if result.fell_back:
        message += " (source workspace unavailable)"
    return message


# ============================================================================
# Minimize / Restore Commands
# ============================================================================


async def cmd_minimize(args: argparse.Namespace) -> int:
    """Minimize the focused window (or --address).

    Returns:
        0 on success, 1 on error
    """
    try:
        async with open_engine(args) as engine:
            with log_timing("minimize", logger):
                entry = await engine.minimize(handle=args.address)
        print_success(f"Minimized {entry.app_class or entry.window_handle} (id {entry.id})")
        if entry.thumbnail_path is None:
            logger.info("No thumbnail captured for this window")
        return 0

    except MinhyprError as e:
        return report_error(e)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        return 1


async def cmd_restore(args: argparse.Namespace) -> int:
    """Restore an entry by id/handle, or pick one from the rofi menu.

    Returns:
        0 on success or cancelled menu, 1 on error
    """
    try:
        async with open_engine(args) as engine:
            if args.target is not None:
                entry_id = engine.resolve(args.target)
            else:
                entries = await engine.list_entries()
                if not entries:
                    print_info("No minimized windows")
                    return 0
                picker = RofiPicker(theme=engine.config.rofi_theme)
                entry_id = await picker.choose(list(menu_rows(entries)))
                if entry_id is None:
                    return 0

            with log_timing("restore", logger):
                result = await engine.restore(entry_id)
        print_success(_describe(result))
        return 0

    except MinhyprError as e:
        return report_error(e)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        return 1


async def cmd_restore_last(args: argparse.Namespace) -> int:
    """Restore the most recently minimized window.

    Returns:
        0 on success, 1 on error (including nothing minimized)
    """
    try:
        async with open_engine(args) as engine:
            with log_timing("restore-last", logger):
                result = await engine.restore_last()
        print_success(_describe(result))
        return 0

    except MinhyprError as e:
        return report_error(e)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        return 1


async def cmd_restore_all(args: argparse.Namespace) -> int:
    """Restore every minimized window, oldest first.

    Returns:
        0 if every window was restored (or none was minimized), 1 otherwise
    """
    try:
        async with open_engine(args) as engine:
            with log_timing("restore-all", logger):
                report = await engine.restore_all()

        if report.total == 0:
            print_info("No minimized windows")
            return 0

        for result in report.restored:
            print_success(_describe(result))
        for failure in report.failures:
            print_error(f"Entry {failure.entry.id} ({failure.entry.app_class}): {failure.error.message}")

        if not report.ok:
            print_warning(f"Restored {len(report.restored)} of {report.total} windows")
            return 1
        return 0

    except MinhyprError as e:
        return report_error(e)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        return 1


# ============================================================================
# Status / Menu Commands
# ============================================================================


async def cmd_show(args: argparse.Namespace) -> int:
    """Print the status-bar payload as one JSON line.

    Reads the state file without taking the lock or talking to the
    compositor. Never fails: any error yields the neutral payload.

    Returns:
        Always 0
    """
    icon = neutral_status().text
    try:
        config = load_config(_config_path(args))
        icon = config.status_icon
        store = StateStore(config.state_file, config.lock_file)
        payload = status_payload(store.load(), icon)
    except Exception as e:
        logger.warning(f"Status unavailable: {e}")
        payload = neutral_status(icon)

    print(payload.to_line())
    return 0


async def cmd_show_rofi(args: argparse.Namespace) -> int:
    """Rofi script-mode entry point.

    Without a selection, prints the menu rows. When rofi calls back with a
    selection, ROFI_INFO holds the entry id of the chosen row.

    Returns:
        0 on success, 1 on error
    """
    try:
        async with open_engine(args) as engine:
            entries = await engine.list_entries()
            rows = list(menu_rows(entries))

            if args.selection is None:
                print("\0prompt\x1fRestore window")
                if not rows:
                    print("\0message\x1fNo minimized windows")
                for row in rows:
                    print(format_rofi_row(row))
                return 0

            info = os.environ.get("ROFI_INFO", "").strip()
            if info.isascii() and info.isdigit():
                entry_id = int(info)
            else:
                match = next((row for row in rows if row.label == args.selection), None)
                if match is None:
                    raise NotFound(args.selection)
                entry_id = match.entry_id

            result = await engine.restore(entry_id)
        logger.info(_describe(result))
        return 0

    except MinhyprError as e:
        return report_error(e)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        return 1


async def cmd_list(args: argparse.Namespace) -> int:
    """List minimized windows as a table or JSON.

    Returns:
        0 on success, 1 on error
    """
    from ..displays.minimized_windows import display_minimized_windows

    try:
        async with open_engine(args) as engine:
            entries = await engine.list_entries()
        display_minimized_windows(entries, format="json" if args.json else "table")
        return 0

    except MinhyprError as e:
        return report_error(e)
    except Exception as e:
        print_error(f"Error listing minimized windows: {e}")
        return 1


async def cmd_setup_rofi(args: argparse.Namespace) -> int:
    """Write the rofi theme and helper scripts and print suggested keybinds.

    Returns:
        0 on success, 1 on error
    """
    from ..setup.rofi import HYPRLAND_BINDS, SWAY_BINDS, generate_rofi_config

    try:
        config = load_config(_config_path(args))
        generated = generate_rofi_config(config.config_dir, config.rofi_theme)
    except MinhyprError as e:
        return report_error(e)
    except OSError as e:
        print_error(f"Failed to write rofi configuration: {e}")
        return 1

    print_success(f"Rofi configuration generated in {config.config_dir}")
    print(f"  {generated.theme}")
    for script in generated.scripts:
        print(f"  {script}")

    print(f"\n{Colors.BOLD}Hyprland keybinds:{Colors.RESET}")
    for bind in HYPRLAND_BINDS:
        print(f"  {bind}")
    print(f"\n{Colors.BOLD}Sway keybinds:{Colors.RESET}")
    for bind in SWAY_BINDS:
        print(f"  {bind}")
    return 0


# ============================================================================
# Entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minhypr",
        description="Window minimization for tiling Wayland compositors (Hyprland, Sway)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"minhypr {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging (INFO level)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level, includes verbose)"
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Configuration file (default: ~/.config/minhypr/config.json)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # minhypr minimize [--address HANDLE]
    parser_minimize = subparsers.add_parser(
        "minimize",
        help="Minimize the focused window",
        description="Move the focused window to the hidden workspace and record it"
    )
    parser_minimize.add_argument(
        "--address",
        metavar="HANDLE",
        help="Minimize this window instead of the focused one"
    )

    # minhypr restore [TARGET]
    parser_restore = subparsers.add_parser(
        "restore",
        help="Restore a minimized window",
        description="Restore an entry by id or window handle; without one, pick from a rofi menu"
    )
    parser_restore.add_argument(
        "target",
        nargs="?",
        help="Entry id or window handle"
    )

    subparsers.add_parser(
        "restore-all",
        help="Restore every minimized window",
        description="Restore every minimized window, oldest first"
    )

    subparsers.add_parser(
        "restore-last",
        help="Restore the most recently minimized window"
    )

    subparsers.add_parser(
        "show",
        help="Print the status-bar JSON payload",
        description="Print one JSON line for a Waybar custom module (return-type: json)"
    )

    parser_show_rofi = subparsers.add_parser(
        "show-rofi",
        help="Rofi script-mode menu",
        description="Print menu rows for rofi script mode, or restore the row rofi passes back"
    )
    parser_show_rofi.add_argument(
        "selection",
        nargs="?",
        help="Row selected in rofi (set by rofi)"
    )

    parser_list = subparsers.add_parser(
        "list",
        help="List minimized windows"
    )
    parser_list.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format"
    )

    subparsers.add_parser(
        "setup-rofi",
        help="Write rofi theme and helper scripts",
        description="Write minhypr.rasi and launcher scripts to the config directory"
    )

    return parser


def cli_main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, debug=args.debug)
    if args.debug:
        logger.debug("Debug logging enabled")

    # No command = show help
    if not args.command:
        parser.print_help()
        return 0

    command_handlers = {
        "minimize": cmd_minimize,
        "restore": cmd_restore,
        "restore-all": cmd_restore_all,
        "restore-last": cmd_restore_last,
        "show": cmd_show,
        "show-rofi": cmd_show_rofi,
        "list": cmd_list,
        "setup-rofi": cmd_setup_rofi,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return asyncio.run(handler(args))
    else:
        print_error(f"Unknown command: {args.command}")
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(cli_main())
