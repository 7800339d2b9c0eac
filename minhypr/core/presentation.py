"""Read-only projections of the minimized set.

The menu projection feeds an external picker (rofi); the status projection
feeds a Waybar custom module. Neither touches the lock or the compositor.
"""

from typing import Iterable, Iterator, NamedTuple, Optional

from ..models.state import MinimizedSet
from ..models.status import StatusPayload
from ..models.window import MinimizedWindow
from .icons import DEFAULT_ICON, get_app_icon


class MenuRow(NamedTuple):
    """One selectable row of the restore menu."""

    label: str
    thumbnail: Optional[str]
    entry_id: int
    icon_name: str


def menu_label(entry: MinimizedWindow) -> str:
    """Format "{icon} {class} - {title} [abcd]" for an entry."""
    icon = entry.icon or get_app_icon(entry.app_class) or DEFAULT_ICON
    app_class = entry.app_class or "unknown"
    title = " ".join(entry.title.split()) or "untitled"
    return f"{icon} {app_class} - {title} [{entry.short_handle}]"


def menu_rows(entries: Iterable[MinimizedWindow]) -> Iterator[MenuRow]:
    """Lazily project entries into menu rows, preserving their order."""
    for entry in entries:
        yield MenuRow(
            label=menu_label(entry),
            thumbnail=entry.thumbnail_path,
            entry_id=entry.id,
            icon_name=(entry.app_class or "application-x-executable").lower(),
        )


def format_rofi_row(row: MenuRow) -> str:
    """Render a row using rofi's extended row protocol.

    The icon is the thumbnail when one exists, otherwise the icon-theme
    name derived from the window class; ``info`` carries the entry id.
    """
    icon = row.thumbnail or row.icon_name
    return f"{row.label}\0icon\x1f{icon}\x1finfo\x1f{row.entry_id}"


def neutral_status(icon: str = "󰘸") -> StatusPayload:
    return StatusPayload(
        text=icon,
        tooltip="No minimized windows",
        css_class="empty",
        count=0,
    )


def status_payload(state: MinimizedSet, icon: str = "󰘸") -> StatusPayload:
    """Summarize the set for the status bar."""
    if state.count == 0:
        return neutral_status(icon)

    lines = [f"{state.count} minimized windows"]
    lines.extend(entry.title or entry.app_class or "untitled" for entry in state.entries())
    return StatusPayload(
        text=f"{icon} {state.count}",
        tooltip="\n".join(lines),
        css_class="has-windows",
        count=state.count,
    )
