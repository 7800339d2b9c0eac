"""Base interface for compositor adapters."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.window import ClientWindow


class Compositor(ABC):
    """Abstract compositor adapter.

    Implementations raise AdapterFailure when the compositor is unreachable
    or rejects a command.
    """

    name: str = "compositor"

    @property
    @abstractmethod
    def special_workspace(self) -> str:
        """Name of the hidden workspace that holds minimized windows."""

    @abstractmethod
    async def list_windows(self) -> List[ClientWindow]:
        """Return every mapped window, hidden ones included."""

    @abstractmethod
    async def active_window(self) -> Optional[ClientWindow]:
        """Return the focused window, or None when nothing is focused."""

    @abstractmethod
    async def active_workspace(self) -> str:
        """Return the name of the focused workspace."""

    @abstractmethod
    async def workspace_exists(self, workspace: str) -> bool:
        """Return True if a workspace with this name currently exists."""

    @abstractmethod
    async def move_window(self, handle: str, workspace: str, floating: Optional[bool] = None) -> None:
        """Move a window to a workspace without following it.

        Args:
            handle: Window to move
            workspace: Target workspace name
            floating: Floating state to apply after the move, where the
                compositor does not preserve it itself
        """

    @abstractmethod
    async def focus_window(self, handle: str) -> None:
        """Focus a window, switching workspace if needed."""

    async def close(self) -> None:
        """Release any IPC connection."""

    async def get_window(self, handle: str) -> Optional[ClientWindow]:
        for window in await self.list_windows():
            if window.handle == handle:
                return window
        return None

    async def window_exists(self, handle: str) -> bool:
        return await self.get_window(handle) is not None

    async def hide_window(self, handle: str) -> None:
        """Move a window into the special workspace."""
        await self.move_window(handle, self.special_workspace)

    def is_hidden(self, window: ClientWindow) -> bool:
        return window.workspace == self.special_workspace
