"""Status payload for Waybar custom modules (return-type: json)."""

import json
from dataclasses import dataclass


@dataclass
class StatusPayload:
    """One status update for a polling status-bar widget.

    See: https://github.com/Alexays/Waybar/wiki/Module:-Custom
    """

    text: str               # Text shown in the bar
    tooltip: str            # Hover tooltip
    css_class: str          # CSS class: has-windows or empty
    count: int = 0          # Number of minimized windows

    @property
    def alt(self) -> str:
        """Waybar format-icons key; mirrors the CSS class."""
        return self.css_class

    def to_json(self) -> dict:
        """Convert to the Waybar JSON shape."""
        return {
            "text": self.text,
            "tooltip": self.tooltip,
            "class": self.css_class,
            "alt": self.alt,
            "count": self.count,
        }

    def to_line(self) -> str:
        """Serialize as a single line of JSON."""
        return json.dumps(self.to_json(), ensure_ascii=False)
