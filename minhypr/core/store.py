"""State store for minimized windows.

The store is the single source of truth for which windows are minimized.
Nothing is cached across invocations: each command loads windows.json,
mutates it under the state lock and persists it again.

Writes are atomic (temp file + fsync + rename), so a reader such as the
status poller sees either the previous or the next complete file.
"""

import logging
import os
import shutil
import tempfile
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Optional, Tuple, TypeVar

from pydantic import ValidationError

from ..models.state import MinimizedSet
from .errors import CorruptState
from .locking import StateLock


logger = logging.getLogger(__name__)

T = TypeVar("T")


class StateStore:
    """Durable, lock-protected MinimizedSet storage.

    Examples:
        >>> store = StateStore(Path("~/.config/minhypr/state/windows.json"))
        >>> async def forget_all(state):
        ...     state.windows.clear()
        ...     return state, None
        >>> await store.with_lock(forget_all)
    """

    def __init__(
        self,
        state_file: Path,
        lock_file: Optional[Path] = None,
        lock_timeout: float = 5.0,
    ):
        self.state_file = state_file
        self.lock_file = lock_file or state_file.with_suffix(".lock")
        self.lock_timeout = lock_timeout

    def load(self) -> MinimizedSet:
        """Load the minimized set from disk.

        Returns:
            MinimizedSet (empty if the file doesn't exist yet)

        Raises:
            CorruptState: If the file cannot be parsed or breaks set invariants
        """
        if not self.state_file.exists():
            return MinimizedSet()

        try:
            content = self.state_file.read_text(encoding="utf-8")
        except OSError as e:
            raise CorruptState(self.state_file, str(e))
        except UnicodeDecodeError as e:
            raise CorruptState(self.state_file, f"not valid UTF-8: {e.reason} at byte {e.start}")

        if not content.strip():
            raise CorruptState(self.state_file, "file is empty")

        try:
            return MinimizedSet.model_validate_json(content)
        except ValidationError as e:
            raise CorruptState(self.state_file, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}")

    def backup_corrupt(self, move: bool = False) -> Optional[Path]:
        """Set the current state file aside so it can be inspected later.

        Args:
            move: Rename the file instead of copying it

        Returns:
            Backup path, or None if there was nothing to back up or it failed
        """
        if not self.state_file.exists():
            return None
        stamp = time.strftime("%Y%m%d-%H%M%S")
        backup_path = self.state_file.with_name(f"{self.state_file.name}.corrupt-{stamp}")
        try:
            if move:
                os.replace(self.state_file, backup_path)
            else:
                shutil.copy2(self.state_file, backup_path)
        except OSError as e:
            logger.error(f"Failed to back up corrupt state file {self.state_file}: {e}")
            return None
        return backup_path

    def load_or_recover(self, persist: bool = False) -> MinimizedSet:
        """Load the set; on corruption back the file up and start empty.

        Args:
            persist: Move the corrupt file aside and write the empty set in its
                place. Only safe while holding the state lock.

        Raises:
            CorruptState: If persist is set and the corrupt file could not be
                backed up (the file is left untouched)
        """
        try:
            return self.load()
        except CorruptState as e:
            backup_path = self.backup_corrupt(move=persist)
            if backup_path is None:
                if persist:
                    raise CorruptState(self.state_file, f"{e.reason}; backup failed, file left in place")
                logger.warning(f"{e.message}; using an empty set")
                return MinimizedSet()

            logger.warning(f"{e.message}; backed up to {backup_path}, starting with an empty set")
            state = MinimizedSet()
            if persist:
                self.save(state)
            return state

    def save(self, state: MinimizedSet) -> None:
        """Persist the set atomically.

        Creates the parent directory if it doesn't exist. Performs atomic
        write using temp file + rename; the temp file is removed on error.
        """
        self.state_file.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=self.state_file.parent,
            prefix=".windows-",
            suffix=".json.tmp",
        )

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(state.model_dump_json(indent=2))
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())

            os.replace(temp_path, self.state_file)
            logger.debug(f"Saved {state.count} minimized window(s) to {self.state_file}")

        except BaseException:
            if Path(temp_path).exists():
                os.unlink(temp_path)
            raise

    @asynccontextmanager
    async def locked(self) -> AsyncIterator[MinimizedSet]:
        """Hold the state lock and yield the loaded set.

        Nothing is saved automatically; callers persist with save() as often
        as the operation needs while the lock is held.
        """
        lock = StateLock(self.lock_file, timeout=self.lock_timeout)
        async with lock:
            yield self.load_or_recover(persist=True)

    async def with_lock(
        self,
        fn: Callable[[MinimizedSet], Awaitable[Tuple[MinimizedSet, T]]],
    ) -> T:
        """Run load -> fn -> save under the state lock.

        Args:
            fn: Coroutine function receiving the loaded set and returning
                (new_set, result)

        Returns:
            The result returned by fn. The set is only written when it changed;
            if fn raises nothing is written.
        """
        async with self.locked() as state:
            before = state.model_copy(deep=True)
            new_state, result = await fn(state)
            if new_state != before:
                self.save(new_state)
            return result
