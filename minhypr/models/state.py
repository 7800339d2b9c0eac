"""
Minimized Set Model

The persisted collection of minimized windows. The on-disk form is a
self-describing JSON envelope; unknown keys are ignored so newer writers can
add fields without breaking older readers.
"""

from typing import Iterator, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .window import ClientWindow, MinimizedWindow


STATE_FORMAT = "minhypr-state"
STATE_VERSION = 1


class MinimizedSet(BaseModel):
    """All minimized-window entries, in insertion order."""

    model_config = {"extra": "ignore"}

    format: Literal["minhypr-state"] = STATE_FORMAT

    version: int = Field(STATE_VERSION, ge=1, description="State schema version")

    next_id: int = Field(1, ge=1, description="Next entry id; only ever grows")

    windows: List[MinimizedWindow] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_entries(self) -> "MinimizedSet":
        """Reject duplicate ids/handles and ids at or beyond next_id."""
        seen_ids = set()
        seen_handles = set()
        for entry in self.windows:
            if entry.id in seen_ids:
                raise ValueError(f"Duplicate entry id: {entry.id}")
            if entry.window_handle in seen_handles:
                raise ValueError(f"Window handle minimized twice: {entry.window_handle}")
            if entry.id >= self.next_id:
                raise ValueError(f"Entry id {entry.id} not below next_id {self.next_id}")
            seen_ids.add(entry.id)
            seen_handles.add(entry.window_handle)
        return self

    @property
    def count(self) -> int:
        return len(self.windows)

    def entries(self) -> Iterator[MinimizedWindow]:
        """Iterate over a snapshot of the entries in insertion order."""
        return iter(list(self.windows))

    def get(self, entry_id: int) -> Optional[MinimizedWindow]:
        for entry in self.windows:
            if entry.id == entry_id:
                return entry
        return None

    def find_by_handle(self, handle: str) -> Optional[MinimizedWindow]:
        handle = handle.strip()
        for entry in self.windows:
            if entry.window_handle == handle:
                return entry
        return None

    def resolve(self, token: str) -> Optional[MinimizedWindow]:
        """Look up an entry by id ("3") or by window handle ("0x55d1c2a0")."""
        token = token.strip()
        if token.isascii() and token.isdigit():
            entry = self.get(int(token))
            if entry is not None:
                return entry
        return self.find_by_handle(token)

    def add(
        self,
        window: ClientWindow,
        icon: str = "",
        thumbnail_path: Optional[str] = None,
        source_workspace: Optional[str] = None,
        adopted: bool = False,
        minimized_at: Optional[float] = None,
    ) -> MinimizedWindow:
        """Allocate an id and append an entry for a window.

        Raises:
            ValueError: If the window handle already has an entry
        """
        if self.find_by_handle(window.handle) is not None:
            raise ValueError(f"Window handle minimized twice: {window.handle}")

        fields = {}
        if minimized_at is not None:
            fields["minimized_at"] = minimized_at

        entry = MinimizedWindow(
            id=self.next_id,
            window_handle=window.handle,
            title=window.title,
            app_class=window.app_class,
            icon=icon,
            thumbnail_path=thumbnail_path,
            source_workspace=source_workspace,
            floating=window.floating,
            adopted=adopted,
            **fields,
        )
        self.next_id += 1
        self.windows.append(entry)
        return entry

    def remove(self, entry_id: int) -> Optional[MinimizedWindow]:
        entry = self.get(entry_id)
        if entry is not None:
            self.windows = [w for w in self.windows if w.id != entry_id]
        return entry

    def latest(self) -> Optional[MinimizedWindow]:
        """Most recently minimized entry."""
        if not self.windows:
            return None
        return max(self.windows, key=MinimizedWindow.sort_key)

    def oldest_first(self) -> List[MinimizedWindow]:
        return sorted(self.windows, key=MinimizedWindow.sort_key)
