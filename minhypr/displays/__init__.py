"""Terminal displays for minhypr."""

from .minimized_windows import display_minimized_windows

__all__ = ["display_minimized_windows"]
