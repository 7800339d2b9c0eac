"""Minimization engine.

Orchestrates minimize and restore operations over the state store and the
compositor/capture adapters. Every mutating operation runs inside one lock
scope: load, reap, compositor side effects, persist.

Ordering rules:
- minimize only records an entry after the compositor confirmed the move
- restore only removes an entry after the window was moved back and focused
- restore-all persists after each individual success
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from ..compositor.base import Compositor
from ..models.state import MinimizedSet
from ..models.window import ClientWindow, MinimizedWindow
from .capture import ThumbnailCapture
from .config import MinhyprConfig
from .errors import AdapterFailure, AlreadyMinimized, EmptySet, MinhyprError, NoActiveWindow, NotFound
from .icons import get_app_icon
from .notifier import StatusBarNotifier
from .store import StateStore


logger = logging.getLogger(__name__)


@dataclass
class RestoreResult:
    """Outcome of restoring one entry."""

    entry: MinimizedWindow
    workspace: str
    fell_back: bool = False     # source workspace was gone or unknown


@dataclass
class RestoreFailure:
    entry: MinimizedWindow
    error: MinhyprError


@dataclass
class RestoreAllReport:
    """Aggregate result of restore-all."""

    restored: List[RestoreResult] = field(default_factory=list)
    failures: List[RestoreFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total(self) -> int:
        return len(self.restored) + len(self.failures)


@dataclass
class ReapReport:
    """Entries dropped and adopted by one reconciliation pass."""

    removed: List[MinimizedWindow] = field(default_factory=list)
    adopted: List[MinimizedWindow] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.removed or self.adopted)


class MinimizationEngine:
    """Minimize/restore state machine over a StateStore.

    Examples:
        >>> engine = MinimizationEngine(store, compositor, capture, config)
        >>> entry = await engine.minimize()
        >>> await engine.restore(entry.id)
    """

    def __init__(
        self,
        store: StateStore,
        compositor: Compositor,
        capture: Optional[ThumbnailCapture] = None,
        config: Optional[MinhyprConfig] = None,
        notifier: Optional[StatusBarNotifier] = None,
    ):
        self.store = store
        self.compositor = compositor
        self.capture = capture
        self.config = config or MinhyprConfig()
        self.notifier = notifier

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _reconcile(self, state: MinimizedSet, windows: Iterable[ClientWindow]) -> ReapReport:
        """Drop entries whose window is gone or visible again; adopt orphans."""
        by_handle = {window.handle: window for window in windows}
        report = ReapReport()

        for entry in state.entries():
            window = by_handle.get(entry.window_handle)
            if window is None or not self.compositor.is_hidden(window):
                reason = "closed" if window is None else f"on workspace {window.workspace}"
                logger.info(f"Reaping entry {entry.id} ({entry.window_handle}): window {reason}")
                state.remove(entry.id)
                report.removed.append(entry)

        if self.config.adopt_orphans:
            for window in by_handle.values():
                if not self.compositor.is_hidden(window) or self.config.is_ignored(window.app_class):
                    continue
                if state.find_by_handle(window.handle) is None:
                    report.adopted.append(self._adopt(state, window))

        return report

    def _adopt(self, state: MinimizedSet, window: ClientWindow) -> MinimizedWindow:
        logger.warning(f"Adopting untracked hidden window {window.handle} ({window.app_class})")
        return state.add(window, icon=get_app_icon(window.app_class), adopted=True)

    async def _reap_locked(self, state: MinimizedSet) -> ReapReport:
        """Reconcile and persist. Caller must hold the state lock."""
        report = self._reconcile(state, await self.compositor.list_windows())
        if report.changed:
            self.store.save(state)
            self._discard_previews(report.removed)
        return report

    async def reap_stale(self) -> ReapReport:
        """Remove entries for vanished windows and adopt untracked hidden ones."""
        async with self.store.locked() as state:
            report = await self._reap_locked(state)
        if report.changed:
            await self._notify()
        return report

    async def list_entries(self) -> List[MinimizedWindow]:
        """Reap, then return the entries in insertion order."""
        async with self.store.locked() as state:
            report = await self._reap_locked(state)
            entries = list(state.entries())
        if report.changed:
            await self._notify()
        return entries

    def resolve(self, token: str) -> int:
        """Map a CLI token (entry id or window handle) to an entry id.

        Ids win over handles. An unknown numeric token is returned as an id
        so that restore() reports it after reaping.

        Raises:
            NotFound: If a non-numeric token matches no entry
        """
        token = token.strip()
        entry = self.store.load_or_recover().resolve(token)
        if entry is not None:
            return entry.id
        if token.isascii() and token.isdigit():
            return int(token)
        raise NotFound(token)

    # ------------------------------------------------------------------
    # Minimize
    # ------------------------------------------------------------------

    async def _target_window(self, handle: Optional[str], windows: List[ClientWindow]) -> ClientWindow:
        if handle is None:
            window = await self.compositor.active_window()
            if window is None:
                raise NoActiveWindow("No focused window to minimize")
        else:
            window = next((w for w in windows if w.handle == handle), None)
            if window is None:
                raise NoActiveWindow(f"No window with handle {handle}")

        if self.config.is_ignored(window.app_class):
            raise NoActiveWindow(f"Refusing to minimize {window.app_class} window")
        return window

    async def _capture(self, window: ClientWindow) -> Optional[str]:
        if self.capture is None:
            return None
        path = await self.capture.capture(window)
        return str(path) if path is not None else None

    async def minimize(self, handle: Optional[str] = None) -> MinimizedWindow:
        """Minimize the focused window, or the window with the given handle.

        Raises:
            NoActiveWindow: Nothing focused, unknown handle, ignored class, or an
                untracked hidden window while adoption is disabled
            AlreadyMinimized: The window already has an entry
            AdapterFailure: The compositor refused the move (nothing recorded)
        """
        reaped: List[MinimizedWindow] = []

        async def _minimize(state: MinimizedSet):
            windows = await self.compositor.list_windows()
            window = await self._target_window(handle, windows)
            report = self._reconcile(state, windows)
            reaped.extend(report.removed)

            existing = state.find_by_handle(window.handle)
            if existing is not None:
                if existing in report.adopted:
                    return state, existing
                raise AlreadyMinimized(window.handle, existing.id)

            if self.compositor.is_hidden(window):
                if not self.config.adopt_orphans:
                    raise NoActiveWindow(f"Window {window.handle} is already hidden and adoption is disabled")
                return state, self._adopt(state, window)

            thumbnail = await self._capture(window)
            try:
                await self.compositor.hide_window(window.handle)
            except AdapterFailure:
                if self.capture is not None:
                    self.capture.delete(window.handle)
                raise

            entry = state.add(
                window,
                icon=get_app_icon(window.app_class),
                thumbnail_path=thumbnail,
                source_workspace=window.workspace,
            )
            return state, entry

        entry = await self.store.with_lock(_minimize)
        self._discard_previews(reaped)
        logger.info(f"Minimized {entry.window_handle} ({entry.app_class}) as entry {entry.id}")
        await self._notify()
        return entry

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    async def _restore_target(self, entry: MinimizedWindow) -> tuple:
        source = entry.source_workspace
        if source is not None:
            if await self.compositor.workspace_exists(source):
                return source, False
            if self.config.restore_fallback == "source":
                logger.info(f"Recreating workspace {source} for entry {entry.id}")
                return source, False
        current = await self.compositor.active_workspace()
        logger.info(f"Source workspace of entry {entry.id} unavailable, restoring to {current}")
        return current, True

    async def _restore_entry(self, entry: MinimizedWindow) -> RestoreResult:
        workspace, fell_back = await self._restore_target(entry)
        await self.compositor.move_window(entry.window_handle, workspace, floating=entry.floating)
        await self.compositor.focus_window(entry.window_handle)
        return RestoreResult(entry=entry, workspace=workspace, fell_back=fell_back)

    async def _restore_one(self, select: Callable[[MinimizedSet], MinimizedWindow]) -> RestoreResult:
        changed = False
        try:
            async with self.store.locked() as state:
                changed = (await self._reap_locked(state)).changed
                entry = select(state)
                result = await self._restore_entry(entry)
                state.remove(entry.id)
                self.store.save(state)
                changed = True
                self._discard_previews([entry])
        finally:
            if changed:
                await self._notify()
        logger.info(f"Restored entry {result.entry.id} to workspace {result.workspace}")
        return result

    async def restore(self, entry_id: int) -> RestoreResult:
        """Restore one entry to its source workspace (or the fallback).

        Raises:
            NotFound: No entry with this id after reaping
            AdapterFailure: The compositor refused; the entry is kept
        """
        def _select(state: MinimizedSet) -> MinimizedWindow:
            entry = state.get(entry_id)
            if entry is None:
                raise NotFound(entry_id)
            return entry

        return await self._restore_one(_select)

    async def restore_last(self) -> RestoreResult:
        """Restore the most recently minimized entry.

        Raises:
            EmptySet: Nothing is minimized
        """
        def _select(state: MinimizedSet) -> MinimizedWindow:
            entry = state.latest()
            if entry is None:
                raise EmptySet()
            return entry

        return await self._restore_one(_select)

    async def restore_all(self) -> RestoreAllReport:
        """Restore every entry oldest first, collecting per-entry failures."""
        report = RestoreAllReport()
        changed = False
        try:
            async with self.store.locked() as state:
                changed = (await self._reap_locked(state)).changed
                for entry in state.oldest_first():
                    try:
                        result = await self._restore_entry(entry)
                    except MinhyprError as e:
                        logger.warning(f"Failed to restore entry {entry.id}: {e.message}")
                        report.failures.append(RestoreFailure(entry=entry, error=e))
                        continue
                    state.remove(entry.id)
                    self.store.save(state)
                    changed = True
                    self._discard_previews([entry])
                    report.restored.append(result)
        finally:
            if changed:
                await self._notify()
        logger.info(f"Restored {len(report.restored)}/{report.total} window(s)")
        return report

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    def _discard_previews(self, entries: Iterable[MinimizedWindow]) -> None:
        if self.capture is None:
            return
        for entry in entries:
            self.capture.delete(entry.window_handle)

    async def _notify(self) -> None:
        if self.notifier is not None:
            await self.notifier.notify()
