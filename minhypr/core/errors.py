"""Exception hierarchy for minhypr.

Every error that can reach the CLI derives from MinhyprError and carries a
human-readable message. Capture failures are not part of this hierarchy's
fatal path: the capture adapter logs them and degrades to a missing thumbnail.
"""

from pathlib import Path
from typing import Optional, Sequence


class MinhyprError(Exception):
    """Base class for all minhypr errors."""

    remediation: Optional[str] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoActiveWindow(MinhyprError):
    """Raised when there is no window that can be minimized."""

    remediation = "Focus a regular application window and try again"


class AlreadyMinimized(MinhyprError):
    """Raised when the target window already has a minimized entry."""

    def __init__(self, handle: str, entry_id: int):
        super().__init__(f"Window {handle} is already minimized (entry {entry_id})")
        self.handle = handle
        self.entry_id = entry_id


class NotFound(MinhyprError):
    """Raised when a restore target does not match any minimized entry."""

    remediation = "Use 'minhypr list' to see minimized windows"

    def __init__(self, token: object):
        super().__init__(f"No minimized window matches '{token}'")
        self.token = token


class EmptySet(MinhyprError):
    """Raised by operations that need at least one minimized entry."""

    def __init__(self):
        super().__init__("No minimized windows")


class CorruptState(MinhyprError):
    """Raised when the persisted state file cannot be parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"State file {path} is corrupt: {reason}")
        self.path = path
        self.reason = reason


class AdapterFailure(MinhyprError):
    """Raised when the compositor, capture tool or picker fails."""

    def __init__(self, adapter: str, detail: str, command: Optional[Sequence[str]] = None):
        if command:
            message = f"{adapter} failed running '{' '.join(command)}': {detail}"
        else:
            message = f"{adapter} failed: {detail}"
        super().__init__(message)
        self.adapter = adapter
        self.detail = detail
        self.command = list(command) if command else None


class LockTimeout(MinhyprError):
    """Raised when the state lock cannot be acquired in time."""

    remediation = "Another minhypr command is still running; retry in a moment"

    def __init__(self, path: Path, timeout: float, holder_pid: Optional[int] = None):
        holder = f" (held by pid {holder_pid})" if holder_pid else ""
        super().__init__(f"Timed out after {timeout:.1f}s waiting for {path}{holder}")
        self.path = path
        self.timeout = timeout
        self.holder_pid = holder_pid


class ConfigError(MinhyprError):
    """Raised when config.json cannot be read or validated."""

    remediation = "Fix or remove ~/.config/minhypr/config.json"
