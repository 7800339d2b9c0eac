"""Hyprland adapter built on the hyprctl JSON interface.

Queries use ``hyprctl -j <request>``; actions use ``hyprctl dispatch``,
which prints ``ok`` on success (and an error message, sometimes with exit
status 0, on failure).
"""

import json
import logging
from typing import Any, Dict, List, Optional

from ..core.errors import AdapterFailure
from ..core.process import run_command
from ..models.window import ClientWindow, Geometry
from .base import Compositor


logger = logging.getLogger(__name__)


def parse_client(data: Dict[str, Any]) -> Optional[ClientWindow]:
    """Convert one ``hyprctl -j clients`` entry to a ClientWindow.

    Returns None for entries without an address (e.g. ``activewindow``
    returning ``{}`` when nothing is focused).
    """
    address = str(data.get("address") or "").strip()
    if not address or address == "0x0":
        return None

    geometry = None
    at = data.get("at")
    size = data.get("size")
    if isinstance(at, list) and isinstance(size, list) and len(at) == 2 and len(size) == 2:
        if size[0] > 0 and size[1] > 0:
            geometry = Geometry(x=at[0], y=at[1], width=size[0], height=size[1])

    workspace = data.get("workspace") or {}
    return ClientWindow(
        handle=address,
        title=data.get("title") or "",
        app_class=data.get("class") or data.get("initialClass") or "",
        workspace=str(workspace.get("name") or workspace.get("id") or ""),
        geometry=geometry,
        floating=bool(data.get("floating", False)),
        pid=data.get("pid") if isinstance(data.get("pid"), int) and data.get("pid") > 0 else None,
    )


def workspace_selector(workspace: str) -> str:
    """Format a workspace name as a dispatcher argument.

    Examples:
        >>> workspace_selector("3")
        '3'
        >>> workspace_selector("special:minimized")
        'special:minimized'
        >>> workspace_selector("web")
        'name:web'
    """
    if workspace.lstrip("-").isdigit() or workspace.startswith(("special:", "name:")):
        return workspace
    return f"name:{workspace}"


class HyprlandCompositor(Compositor):
    """Compositor adapter for Hyprland."""

    name = "hyprland"

    def __init__(self, special_name: str = "minimized", timeout: float = 5.0):
        self._special = f"special:{special_name}"
        self.timeout = timeout

    @property
    def special_workspace(self) -> str:
        return self._special

    async def _query(self, request: str) -> Any:
        result = await run_command(["hyprctl", "-j", request], self.name, self.timeout)
        if not result.ok:
            raise AdapterFailure(self.name, result.error_text or f"exit status {result.returncode}", result.command)
        try:
            return json.loads(result.text)
        except json.JSONDecodeError as e:
            raise AdapterFailure(self.name, f"invalid JSON from hyprctl: {e}", result.command)

    async def _dispatch(self, *args: str) -> None:
        result = await run_command(["hyprctl", "dispatch", *args], self.name, self.timeout)
        reply = result.text.strip()
        if not result.ok or reply.lower() != "ok":
            raise AdapterFailure(self.name, reply or result.error_text or "dispatch rejected", result.command)

    async def list_windows(self) -> List[ClientWindow]:
        clients = await self._query("clients")
        if not isinstance(clients, list):
            raise AdapterFailure(self.name, "unexpected clients reply", ["hyprctl", "-j", "clients"])
        windows = []
        for client in clients:
            if not isinstance(client, dict) or client.get("mapped") is False:
                continue
            window = parse_client(client)
            if window is not None:
                windows.append(window)
        logger.debug(f"hyprctl reported {len(windows)} window(s)")
        return windows

    async def active_window(self) -> Optional[ClientWindow]:
        data = await self._query("activewindow")
        if not isinstance(data, dict):
            return None
        return parse_client(data)

    async def active_workspace(self) -> str:
        data = await self._query("activeworkspace")
        if not isinstance(data, dict) or not (data.get("name") or data.get("id")):
            raise AdapterFailure(self.name, "no active workspace reported", ["hyprctl", "-j", "activeworkspace"])
        return str(data.get("name") or data.get("id"))

    async def workspace_exists(self, workspace: str) -> bool:
        workspaces = await self._query("workspaces")
        names = {str(ws.get("name")) for ws in workspaces if isinstance(ws, dict)}
        ids = {str(ws.get("id")) for ws in workspaces if isinstance(ws, dict)}
        return workspace in names or workspace in ids

    async def move_window(self, handle: str, workspace: str, floating: Optional[bool] = None) -> None:
        # Hyprland keeps the floating state across special workspaces
        logger.info(f"Moving {handle} to workspace {workspace}")
        await self._dispatch("movetoworkspacesilent", f"{workspace_selector(workspace)},address:{handle}")

    async def focus_window(self, handle: str) -> None:
        await self._dispatch("focuswindow", f"address:{handle}")
