"""Status-bar refresh after state changes."""

import logging
from typing import Optional

from .errors import AdapterFailure
from .process import run_command


logger = logging.getLogger(__name__)


class StatusBarNotifier:
    """Sends SIGRTMIN+n to waybar so a signal-driven module refreshes at once.

    Failures are logged and ignored; the module's polling interval catches up.
    """

    def __init__(self, signal: Optional[int] = 8, process_name: str = "waybar", timeout: float = 2.0):
        self.signal = signal
        self.process_name = process_name
        self.timeout = timeout

    async def notify(self) -> None:
        if self.signal is None:
            return
        command = ["pkill", f"-RTMIN+{self.signal}", "-x", self.process_name]
        try:
            result = await run_command(command, "notifier", self.timeout)
        except AdapterFailure as e:
            logger.debug(f"Status bar refresh skipped: {e}")
            return
        # pkill exits 1 when no process matched
        if result.returncode not in (0, 1):
            logger.debug(f"pkill exited with {result.returncode}: {result.error_text}")
