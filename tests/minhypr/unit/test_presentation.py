"""Unit tests for menu and status projections."""

import json

from minhypr.core.icons import DEFAULT_ICON, ICONS, get_app_icon
from minhypr.core.presentation import (
    MenuRow,
    format_rofi_row,
    menu_label,
    menu_rows,
    neutral_status,
    status_payload,
)
from minhypr.models.state import MinimizedSet
from minhypr.models.window import ClientWindow


def build_state():
    state = MinimizedSet()
    state.add(
        ClientWindow(handle="0x55d1c2a0", title="Mozilla Firefox", app_class="firefox", workspace="1"),
        icon=get_app_icon("firefox"),
        thumbnail_path="/tmp/previews/0x55d1c2a0.thumb.png",
    )
    state.add(
        ClientWindow(handle="0x55d1beef", title="vim  notes.md", app_class="Alacritty", workspace="2"),
        icon=get_app_icon("Alacritty"),
    )
    return state


class TestIcons:
    """Test application icon lookup."""

    def test_exact_and_substring_match(self):
        assert get_app_icon("kitty") == ICONS["kitty"]
        assert get_app_icon("org.mozilla.firefox") == ICONS["firefox"]
        assert get_app_icon("Google-chrome") == ICONS["chrome"]

    def test_unknown_class_uses_default(self):
        assert get_app_icon("gimp") == DEFAULT_ICON
        assert get_app_icon("") == DEFAULT_ICON


class TestMenuProjection:
    """Test menu rows and the rofi row format."""

    def test_label_format(self):
        entry = build_state().get(1)
        assert menu_label(entry) == f"{ICONS['firefox']} firefox - Mozilla Firefox [c2a0]"

    def test_label_collapses_whitespace(self):
        entry = build_state().get(2)
        assert menu_label(entry).endswith("Alacritty - vim notes.md [beef]")

    def test_rows_preserve_order(self):
        rows = list(menu_rows(build_state().entries()))

        assert [row.entry_id for row in rows] == [1, 2]
        assert rows[0].thumbnail == "/tmp/previews/0x55d1c2a0.thumb.png"
        assert rows[1].thumbnail is None
        assert rows[1].icon_name == "alacritty"

    def test_rows_are_lazy(self):
        rows = menu_rows(build_state().entries())
        assert next(rows).entry_id == 1

    def test_rofi_row_uses_thumbnail(self):
        row = MenuRow(label="A", thumbnail="/p/t.png", entry_id=3, icon_name="kitty")
        assert format_rofi_row(row) == "A\0icon\x1f/p/t.png\x1finfo\x1f3"

    def test_rofi_row_falls_back_to_class_icon(self):
        row = MenuRow(label="A", thumbnail=None, entry_id=3, icon_name="kitty")
        assert format_rofi_row(row) == "A\0icon\x1fkitty\x1finfo\x1f3"


class TestStatusProjection:
    """Test the status-bar payload."""

    def test_non_empty(self):
        payload = status_payload(build_state())

        assert payload.text == "󰘸 2"
        assert payload.css_class == "has-windows"
        assert payload.count == 2
        assert payload.tooltip.splitlines() == ["2 minimized windows", "Mozilla Firefox", "vim  notes.md"]

    def test_empty(self):
        payload = status_payload(MinimizedSet())

        assert payload.to_json()["text"] == "󰘸"
        assert payload.to_json()["class"] == "empty"
        assert payload.tooltip == "No minimized windows"
        assert payload == neutral_status()

    def test_custom_icon(self):
        line = status_payload(build_state(), icon="M").to_line()
        assert json.loads(line)["text"] == "M 2"


class TestListDisplay:
    """Test the rich table and JSON list output."""

    def test_format_age(self):
        from minhypr.displays.minimized_windows import format_age

        assert format_age(100.0, now=142.0) == "42s ago"
        assert format_age(0.0, now=7200.0) == "2h ago"
        assert format_age(0.0, now=3 * 86400.0) == "3d ago"

    def test_table(self):
        from rich.console import Console
        from minhypr.displays.minimized_windows import display_table

        console = Console(record=True, width=160)
        display_table(list(build_state().entries()), console=console)

        text = console.export_text()
        assert "Minimized Windows" in text
        assert "0x55d1c2a0" in text
        assert "Total minimized windows: 2" in text

    def test_empty_table(self):
        from rich.console import Console
        from minhypr.displays.minimized_windows import display_table

        console = Console(record=True)
        display_table([], console=console)

        assert "No minimized windows" in console.export_text()
