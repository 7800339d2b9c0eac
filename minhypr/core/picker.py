"""Rofi picker for the interactive restore menu."""

import logging
from pathlib import Path
from typing import List, Optional

from .errors import AdapterFailure
from .presentation import MenuRow, format_rofi_row
from .process import run_command


logger = logging.getLogger(__name__)

# rofi exits 1 when the user dismisses the menu
CANCELLED_STATUS = 1


class RofiPicker:
    """Shows menu rows in ``rofi -dmenu`` and returns the chosen entry id."""

    name = "picker"

    def __init__(self, theme: Optional[Path] = None, prompt: str = "Restore window", timeout: float = 300.0):
        self.theme = theme
        self.prompt = prompt
        self.timeout = timeout

    def build_command(self) -> List[str]:
        command = ["rofi", "-dmenu", "-i", "-show-icons", "-format", "i", "-no-custom", "-p", self.prompt]
        if self.theme is not None and self.theme.exists():
            command.extend(["-theme", str(self.theme)])
        return command

    async def choose(self, rows: List[MenuRow]) -> Optional[int]:
        """Let the user pick a row.

        Returns:
            The selected entry id, or None if the menu was cancelled

        Raises:
            AdapterFailure: If rofi fails or returns an index outside the rows
        """
        if not rows:
            return None

        payload = "\n".join(format_rofi_row(row) for row in rows) + "\n"
        result = await run_command(self.build_command(), self.name, self.timeout, input=payload.encode("utf-8"))

        if result.returncode == CANCELLED_STATUS:
            logger.info("Restore menu cancelled")
            return None
        if not result.ok:
            raise AdapterFailure(self.name, result.error_text or f"exit status {result.returncode}", result.command)

        selection = result.text.strip()
        if not selection:
            return None
        if not (selection.isascii() and selection.isdigit()) or int(selection) >= len(rows):
            raise AdapterFailure(self.name, f"unexpected selection '{selection}'", result.command)
        return rows[int(selection)].entry_id
