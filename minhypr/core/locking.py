"""Inter-process lock guarding the state file.

Every minhypr invocation is a separate short-lived process, so mutual
exclusion is an flock(2) on a lock file next to windows.json. The holder
records its pid in the file; a waiter that times out while the recorded
holder is no longer running reclaims the lock by replacing the lock file.
"""

import asyncio
import fcntl
import logging
import os
import time
from pathlib import Path
from typing import Optional

import psutil

from .errors import LockTimeout


logger = logging.getLogger(__name__)


class StateLock:
    """Exclusive, bounded-wait lock usable as an async context manager.

    Examples:
        >>> lock = StateLock(Path("/tmp/windows.lock"), timeout=5.0)
        >>> async with lock:
        ...     ...  # load, mutate, save
    """

    def __init__(self, path: Path, timeout: float = 5.0, poll_interval: float = 0.05):
        self.path = path
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._fd: Optional[int] = None

    @property
    def is_held(self) -> bool:
        return self._fd is not None

    def read_holder(self) -> Optional[int]:
        """Return the pid recorded in the lock file, if any."""
        try:
            content = self.path.read_text().strip()
        except OSError:
            return None
        if not (content.isascii() and content.isdigit()):
            return None
        return int(content)

    def _try_lock(self) -> bool:
        fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            os.close(fd)
            return False

        # A reclaim may have replaced the lock file between open() and flock()
        try:
            current = os.stat(self.path)
        except FileNotFoundError:
            current = None
        locked = os.fstat(fd)
        if current is None or (current.st_ino, current.st_dev) != (locked.st_ino, locked.st_dev):
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)
            return False

        os.ftruncate(fd, 0)
        os.write(fd, f"{os.getpid()}\n".encode())
        self._fd = fd
        return True

    def _reclaim(self, holder: int) -> None:
        logger.warning(f"Reclaiming stale lock {self.path} held by dead pid {holder}")
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    async def acquire(self) -> None:
        """Acquire the lock, waiting at most ``timeout`` seconds.

        Raises:
            LockTimeout: If a live process keeps holding the lock
        """
        if self.is_held:
            raise RuntimeError(f"Lock {self.path} is already held by this object")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        deadline = time.monotonic() + self.timeout
        reclaimed = False

        while True:
            if self._try_lock():
                logger.debug(f"Acquired state lock {self.path}")
                return

            if time.monotonic() >= deadline:
                holder = self.read_holder()
                if not reclaimed and holder is not None and not psutil.pid_exists(holder):
                    self._reclaim(holder)
                    reclaimed = True
                    deadline = time.monotonic() + self.poll_interval * 10
                    continue
                raise LockTimeout(self.path, self.timeout, holder)

            await asyncio.sleep(self.poll_interval)

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            os.ftruncate(self._fd, 0)
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None
        logger.debug(f"Released state lock {self.path}")

    async def __aenter__(self) -> "StateLock":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()
