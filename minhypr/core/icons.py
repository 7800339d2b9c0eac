"""Nerd Font glyphs for application classes shown in the restore menu."""

DEFAULT_ICON = "󰖲"

# Keys are matched case-insensitively as substrings of the window class
ICONS = {
    "firefox": "",     # nf-fa-firefox
    "alacritty": "",   # nf-fa-terminal
    "kitty": "",
    "discord": "󰙯",
    "steam": "",       # nf-fa-steam
    "chromium": "",    # nf-fa-chrome
    "chrome": "",
    "code": "󰨞",
    "spotify": "",     # nf-fa-spotify
}


def get_app_icon(app_class: str) -> str:
    """Pick a glyph for a window class.

    Examples:
        >>> get_app_icon("org.mozilla.firefox") == ICONS["firefox"]
        True
        >>> get_app_icon("Gimp") == DEFAULT_ICON
        True
    """
    lowered = app_class.lower()
    if lowered in ICONS:
        return ICONS[lowered]
    for key, icon in ICONS.items():
        if key in lowered:
            return icon
    return DEFAULT_ICON
