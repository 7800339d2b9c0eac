"""Async execution of external tools (hyprctl, grim, magick, rofi, pkill)."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..cli.logging_config import log_subprocess_call
from .errors import AdapterFailure


logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of one external command."""

    command: list
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def error_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace").strip()


async def run_command(
    command: Sequence[str],
    adapter: str,
    timeout: float = 5.0,
    input: Optional[bytes] = None,
) -> CommandResult:
    """Run a command and capture its output.

    A non-zero exit status is returned, not raised; callers decide whether
    it is fatal.

    Args:
        command: argv list
        adapter: Adapter name used in error messages
        timeout: Seconds before the process is killed
        input: Bytes fed to stdin

    Raises:
        AdapterFailure: If the executable is missing or the command times out
    """
    command = list(command)
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE if input is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        raise AdapterFailure(adapter, f"{command[0]} not found in PATH", command)
    except OSError as e:
        raise AdapterFailure(adapter, str(e), command)

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(input), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise AdapterFailure(adapter, f"timed out after {timeout:.1f}s", command)

    log_subprocess_call(command, process.returncode, logger, stdout=stdout, stderr=stderr)
    return CommandResult(
        command=command,
        returncode=process.returncode,
        stdout=stdout or b"",
        stderr=stderr or b"",
    )
