"""Compositor adapters and backend selection."""

import logging
import os

from ..core.config import MinhyprConfig
from ..core.errors import AdapterFailure
from .base import Compositor
from .hyprland import HyprlandCompositor


logger = logging.getLogger(__name__)


def detect_backend() -> str:
    """Guess the running compositor from the session environment."""
    if os.environ.get("HYPRLAND_INSTANCE_SIGNATURE"):
        return "hyprland"
    if os.environ.get("SWAYSOCK") or os.environ.get("I3SOCK"):
        return "sway"
    raise AdapterFailure(
        "compositor",
        "neither HYPRLAND_INSTANCE_SIGNATURE nor SWAYSOCK is set; "
        "set 'compositor' in config.json or MINHYPR_COMPOSITOR",
    )


def create_compositor(config: MinhyprConfig) -> Compositor:
    """Build the compositor adapter selected by the configuration."""
    backend = config.compositor
    if backend == "auto":
        backend = detect_backend()
        logger.debug(f"Detected compositor backend: {backend}")

    if backend == "sway":
        # i3ipc is only imported for Sway sessions
        from .sway import SwayCompositor
        return SwayCompositor()
    return HyprlandCompositor(special_name=config.special_workspace, timeout=config.command_timeout)


__all__ = ["Compositor", "HyprlandCompositor", "create_compositor", "detect_backend"]
