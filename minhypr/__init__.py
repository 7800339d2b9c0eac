"""minhypr - Window minimization for tiling Wayland compositors.

This package provides:
- Minimize/restore of windows through a hidden special workspace
- Durable, lock-protected state shared by concurrent invocations
- Window thumbnails for the restore menu
- A Rofi restore menu and a Waybar status feed
"""

__version__ = "0.2.0"
__author__ = "minhypr contributors"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__license__"]
