"""Rofi theme and launcher scripts written by ``minhypr setup-rofi``.

Files land in the config directory (~/.config/minhypr by default):

- minhypr.rasi: theme used by the picker and the script-mode menu
- launch-menu.sh: rofi script-mode menu with thumbnails (show-rofi)
- simple-menu.sh: plain dmenu picker (``minhypr restore``)
- restore-all.sh: restores every minimized window
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)


THEME = """/**
 * minhypr rofi theme
 */

configuration {
    show-icons: true;
    display-minhypr: "Minimized";
}

* {
    background:     #2E3440;
    background-alt: #3B4252;
    foreground:     #ECEFF4;
    selected:       #88C0D0;
    urgent:         #BF616A;
    border:         #4C566A;
}

window {
    width: 650px;
    border: 2px;
    border-color: @border;
    border-radius: 6px;
    padding: 12px;
    background-color: @background;
}

inputbar {
    children: [ prompt, textbox-prompt-colon, entry ];
    padding: 12px;
}

prompt {
    text-color: @selected;
}

textbox-prompt-colon {
    expand: false;
    str: ":";
    margin: 0px 4px 0px 0px;
    text-color: @foreground;
}

entry {
    text-color: @foreground;
}

listview {
    fixed-height: 0;
    border: 2px 0px 0px;
    border-color: @border;
    spacing: 4px;
    scrollbar: true;
    padding: 10px 5px 0px;
}

element {
    border-radius: 4px;
    padding: 8px 12px;
}

element normal.normal {
    background-color: inherit;
    text-color: @foreground;
}

element selected.normal {
    background-color: @background-alt;
    text-color: @selected;
}

element-icon {
    size: 64px;
    margin: 0 8px 0 0;
}

element-text {
    background-color: inherit;
    text-color: inherit;
    vertical-align: 0.5;
}
"""

FIND_MINHYPR = """# Find minhypr executable
if [ -x "$HOME/.local/bin/minhypr" ]; then
    MINHYPR="$HOME/.local/bin/minhypr"
elif command -v minhypr > /dev/null 2>&1; then
    MINHYPR="$(command -v minhypr)"
else
    notify-send "minhypr" "Unable to find minhypr executable"
    exit 1
fi
"""

LAUNCH_MENU = """#!/usr/bin/env bash
# Rofi script-mode menu for minimized windows (generated by minhypr setup-rofi)

{find}
THEME="{theme}"

exec rofi \\
  -show minhypr \\
  -modi "minhypr:$MINHYPR show-rofi" \\
  -show-icons \\
  -theme "$THEME"
"""

SIMPLE_MENU = """#!/usr/bin/env bash
# Plain picker for minimized windows (generated by minhypr setup-rofi)

{find}
if "$MINHYPR" show | grep -q '"class": "empty"'; then
    notify-send "minhypr" "No minimized windows"
    exit 0
fi

exec "$MINHYPR" restore
"""

RESTORE_ALL = """#!/usr/bin/env bash
# Restore every minimized window (generated by minhypr setup-rofi)

{find}
if ! "$MINHYPR" restore-all; then
    notify-send "minhypr" "Some windows could not be restored"
    exit 1
fi
"""

HYPRLAND_BINDS = [
    "bind = ALT, M, exec, minhypr minimize",
    "bind = ALT SHIFT, M, exec, $HOME/.config/minhypr/launch-menu.sh",
    "bind = ALT CTRL, M, exec, $HOME/.config/minhypr/simple-menu.sh",
    "bind = ALT SHIFT, R, exec, $HOME/.config/minhypr/restore-all.sh",
]

SWAY_BINDS = [
    "bindsym Mod1+m exec minhypr minimize",
    "bindsym Mod1+Shift+m exec ~/.config/minhypr/launch-menu.sh",
    "bindsym Mod1+Ctrl+m exec ~/.config/minhypr/simple-menu.sh",
    "bindsym Mod1+Shift+r exec ~/.config/minhypr/restore-all.sh",
]


@dataclass
class GeneratedFiles:
    """Paths written by generate_rofi_config()."""

    theme: Path
    scripts: List[Path] = field(default_factory=list)


def _write_file(path: Path, content: str, executable: bool = False) -> None:
    """Write a file atomically (temp file + rename)."""
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        mode = 0o755 if executable else 0o644
        os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except BaseException:
        if Path(temp_path).exists():
            os.unlink(temp_path)
        raise
    logger.info(f"Wrote {path}")


def generate_rofi_config(config_dir: Path, theme_path: Optional[Path] = None) -> GeneratedFiles:
    """Write the rofi theme and helper scripts.

    Args:
        config_dir: Directory receiving the scripts
        theme_path: Theme location (default: <config_dir>/minhypr.rasi)

    Returns:
        GeneratedFiles listing everything written
    """
    config_dir.mkdir(parents=True, exist_ok=True)
    if theme_path is None:
        theme_path = config_dir / "minhypr.rasi"
    theme_path.parent.mkdir(parents=True, exist_ok=True)

    _write_file(theme_path, THEME)
    generated = GeneratedFiles(theme=theme_path)

    scripts = {
        "launch-menu.sh": LAUNCH_MENU.format(find=FIND_MINHYPR, theme=theme_path),
        "simple-menu.sh": SIMPLE_MENU.format(find=FIND_MINHYPR),
        "restore-all.sh": RESTORE_ALL.format(find=FIND_MINHYPR),
    }
    for name, content in scripts.items():
        path = config_dir / name
        _write_file(path, content, executable=True)
        generated.scripts.append(path)

    return generated
