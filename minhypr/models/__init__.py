"""Data models for minhypr."""

from .state import STATE_FORMAT, STATE_VERSION, MinimizedSet
from .status import StatusPayload
from .window import ClientWindow, Geometry, MinimizedWindow

__all__ = [
    "ClientWindow",
    "Geometry",
    "MinimizedSet",
    "MinimizedWindow",
    "STATE_FORMAT",
    "STATE_VERSION",
    "StatusPayload",
]
