"""Logging configuration for the minhypr CLI.

Provides:
- Configurable log levels (WARNING, INFO with --verbose, DEBUG with --debug)
- Subprocess call logging for hyprctl, grim, magick and rofi
- Operation timing logs
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Optional, Sequence


# Default log format
DEFAULT_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"

ROOT_LOGGER = "minhypr"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format log record with colors."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Configure logging for the minhypr CLI.

    Args:
        verbose: Enable verbose logging (INFO level)
        debug: Enable debug logging (DEBUG level)

    Returns:
        Configured package logger

    Examples:
        >>> logger = setup_logging(verbose=True)
        >>> logger.info("Minimizing active window")
        2026-03-02 10:30:45 [INFO] minhypr: Minimizing active window
    """
    logger = logging.getLogger(ROOT_LOGGER)

    # Remove existing handlers
    logger.handlers.clear()

    if debug:
        logger.setLevel(logging.DEBUG)
        log_format = DEBUG_FORMAT
    elif verbose:
        logger.setLevel(logging.INFO)
        log_format = VERBOSE_FORMAT
    else:
        logger.setLevel(logging.WARNING)
        log_format = DEFAULT_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)

    # Use colored formatter if terminal supports it
    if sys.stderr.isatty():
        formatter = ColoredFormatter(log_format)
    else:
        formatter = logging.Formatter(log_format)

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def _decode(stream: Any) -> str:
    if isinstance(stream, bytes):
        return stream.decode(errors="replace")
    return str(stream)


def log_subprocess_call(
    cmd: Sequence[str],
    returncode: Optional[int],
    logger: logging.Logger,
    stdout: Any = None,
    stderr: Any = None,
) -> None:
    """Log an external command and its result at DEBUG level.

    Args:
        cmd: Command list
        returncode: Process exit status
        logger: Logger instance
        stdout: Captured stdout (bytes or str), truncated to 200 chars
        stderr: Captured stderr (bytes or str), truncated to 200 chars
    """
    logger.debug(f"Subprocess call: {' '.join(cmd)}")
    logger.debug(f"  Return code: {returncode}")

    if stdout:
        logger.debug(f"  stdout: {_decode(stdout)[:200]}")

    if stderr:
        text = _decode(stderr).strip()
        if text:
            logger.debug(f"  stderr: {text[:200]}")


@contextmanager
def log_timing(operation: str, logger: logging.Logger):
    """Context manager for logging operation timing.

    Examples:
        >>> with log_timing("restore-all", logger):
        ...     await engine.restore_all()
        INFO: restore-all completed in 85.32ms
    """
    start = time.perf_counter()
    logger.info(f"Starting: {operation}")

    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{operation} completed in {elapsed_ms:.2f}ms")
