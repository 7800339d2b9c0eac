"""Sway adapter built on i3ipc.aio.

Sway's scratchpad (the hidden ``__i3_scratch`` workspace) serves as the
special workspace. Windows leave the scratchpad with ``scratchpad show``
followed by a move and an explicit floating state, since everything in
the scratchpad is floating.
"""

import logging
from typing import List, Optional

import i3ipc.aio

from ..core.errors import AdapterFailure
from ..models.window import ClientWindow, Geometry
from .base import Compositor


logger = logging.getLogger(__name__)

SCRATCHPAD_WORKSPACE = "__i3_scratch"


def _is_window(con) -> bool:
    # Include both X11 (con.window) and Wayland (con.app_id) windows
    if con.type not in ("con", "floating_con") or con.nodes:
        return False
    return con.window is not None or bool(getattr(con, "app_id", None))


def con_to_window(con) -> ClientWindow:
    """Convert an i3ipc container to a ClientWindow."""
    workspace = con.workspace()
    rect = con.rect
    geometry = None
    if rect is not None and rect.width > 0 and rect.height > 0:
        geometry = Geometry(x=rect.x, y=rect.y, width=rect.width, height=rect.height)
    return ClientWindow(
        handle=str(con.id),
        title=con.name or "",
        app_class=getattr(con, "app_id", None) or con.window_class or "",
        workspace=workspace.name if workspace else SCRATCHPAD_WORKSPACE,
        geometry=geometry,
        floating=con.type == "floating_con" or (con.floating or "").endswith("_on"),
        pid=getattr(con, "pid", None),
    )


def quote_workspace(name: str) -> str:
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'


class SwayCompositor(Compositor):
    """Compositor adapter for Sway (and i3) over the IPC socket."""

    name = "sway"

    def __init__(self, connection: Optional[i3ipc.aio.Connection] = None):
        self._connection = connection

    @property
    def special_workspace(self) -> str:
        return SCRATCHPAD_WORKSPACE

    async def _conn(self) -> i3ipc.aio.Connection:
        if self._connection is None:
            try:
                logger.debug("Connecting to Sway IPC socket")
                self._connection = await i3ipc.aio.Connection(auto_reconnect=False).connect()
            except Exception as e:
                raise AdapterFailure(self.name, f"failed to connect to IPC socket: {e}")
        return self._connection

    async def close(self) -> None:
        if self._connection is not None:
            self._connection.main_quit()
            self._connection = None

    async def _command(self, cmd: str) -> None:
        conn = await self._conn()
        logger.debug(f"IPC command: {cmd}")
        try:
            replies = await conn.command(cmd)
        except Exception as e:
            raise AdapterFailure(self.name, str(e), [cmd])
        for reply in replies:
            if not reply.success:
                raise AdapterFailure(self.name, reply.error or "command failed", [cmd])

    async def _tree(self):
        conn = await self._conn()
        try:
            return await conn.get_tree()
        except Exception as e:
            raise AdapterFailure(self.name, f"GET_TREE failed: {e}")

    async def list_windows(self) -> List[ClientWindow]:
        tree = await self._tree()
        return [con_to_window(con) for con in tree.descendants() if _is_window(con)]

    async def active_window(self) -> Optional[ClientWindow]:
        tree = await self._tree()
        focused = tree.find_focused()
        if focused is None or not _is_window(focused):
            return None
        return con_to_window(focused)

    async def _workspaces(self):
        conn = await self._conn()
        try:
            return await conn.get_workspaces()
        except Exception as e:
            raise AdapterFailure(self.name, f"GET_WORKSPACES failed: {e}")

    async def active_workspace(self) -> str:
        for ws in await self._workspaces():
            if ws.focused:
                return ws.name
        raise AdapterFailure(self.name, "no focused workspace reported")

    async def workspace_exists(self, workspace: str) -> bool:
        return any(ws.name == workspace for ws in await self._workspaces())

    async def move_window(self, handle: str, workspace: str, floating: Optional[bool] = None) -> None:
        if workspace == SCRATCHPAD_WORKSPACE:
            await self._command(f"[con_id={handle}] move scratchpad")
            return

        window = await self.get_window(handle)
        if window is None:
            raise AdapterFailure(self.name, f"window {handle} no longer exists")

        parts = []
        if self.is_hidden(window):
            parts.append("scratchpad show")
        parts.append(f"move container to workspace {quote_workspace(workspace)}")
        if floating is not None:
            parts.append("floating enable" if floating else "floating disable")
        await self._command(f"[con_id={handle}] " + ", ".join(parts))

    async def focus_window(self, handle: str) -> None:
        await self._command(f"[con_id={handle}] focus")
