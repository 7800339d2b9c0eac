"""Display module for the minimized windows list.

Supported formats:
- table: Rich table, oldest entry first
- json: Machine-readable JSON output
"""

import json
import time
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from ..models.window import MinimizedWindow


def format_age(timestamp: float, now: Optional[float] = None) -> str:
    """Format a timestamp as a short relative age ("42s ago", "3h ago")."""
    if now is None:
        now = time.time()
    diff = max(0.0, now - timestamp)
    if diff < 60:
        return f"{int(diff)}s ago"
    if diff < 3600:
        return f"{int(diff / 60)}m ago"
    if diff < 86400:
        return f"{int(diff / 3600)}h ago"
    return f"{int(diff / 86400)}d ago"


def display_table(entries: List[MinimizedWindow], console: Optional[Console] = None) -> None:
    """Display minimized windows in table format.

    Args:
        entries: Entries in insertion order
        console: Rich console (creates new if None)
    """
    if console is None:
        console = Console()

    if not entries:
        console.print("[yellow]No minimized windows[/yellow]")
        return

    table = Table(title="Minimized Windows", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", justify="right", no_wrap=True)
    table.add_column("App", style="green")
    table.add_column("Title", style="white")
    table.add_column("Workspace", style="yellow")
    table.add_column("Handle", style="dim", no_wrap=True)
    table.add_column("Minimized", style="dim")

    for entry in entries:
        workspace = entry.source_workspace or "[dim]adopted[/dim]"
        table.add_row(
            str(entry.id),
            f"{entry.icon} {entry.app_class}".strip(),
            entry.title,
            workspace,
            entry.window_handle,
            format_age(entry.minimized_at),
        )

    console.print(table)
    console.print(f"\n[bold]Total minimized windows:[/bold] {len(entries)}")


def entries_to_json(entries: List[MinimizedWindow]) -> dict:
    return {
        "windows": [entry.model_dump(mode="json") for entry in entries],
        "total": len(entries),
    }


def display_json(entries: List[MinimizedWindow], console: Optional[Console] = None, pretty: bool = True) -> None:
    """Display minimized windows in JSON format.

    Args:
        entries: Entries in insertion order
        console: Rich console (creates new if None)
        pretty: Pretty-print JSON with indentation
    """
    if console is None:
        console = Console()

    output = entries_to_json(entries)
    if pretty:
        console.print_json(data=output)
    else:
        console.print(json.dumps(output, ensure_ascii=False))


def display_minimized_windows(
    entries: List[MinimizedWindow],
    format: str = "table",
    console: Optional[Console] = None,
) -> None:
    """Display minimized windows using the specified format ("table" or "json")."""
    if format == "json":
        display_json(entries, console=console)
    else:
        display_table(entries, console=console)
