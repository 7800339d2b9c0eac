"""
Window Models

Pydantic models for live compositor windows and minimized-window entries.
"""

import time
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Geometry(BaseModel):
    """Window position and size in global layout coordinates."""

    x: int
    y: int
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    def to_region(self) -> str:
        """Format as a grim/slurp region string ("x,y wxh")."""
        return f"{self.x},{self.y} {self.width}x{self.height}"


class ClientWindow(BaseModel):
    """A window as currently reported by the compositor."""

    handle: str = Field(..., min_length=1, description="Compositor-native window identifier")
    title: str = Field("", description="Window title")
    app_class: str = Field("", description="Application class / app_id")
    workspace: str = Field("", description="Name of the workspace holding the window")
    geometry: Optional[Geometry] = Field(None, description="Window geometry, if known")
    floating: bool = Field(False, description="Whether the window is floating")
    pid: Optional[int] = Field(None, description="Owning process id")


class MinimizedWindow(BaseModel):
    """Represents one minimized window tracked in the state file."""

    model_config = {"extra": "ignore"}

    id: int = Field(..., gt=0, description="Stable entry id used by 'restore <id>'")

    window_handle: str = Field(
        ...,
        min_length=1,
        description="Compositor-native window identifier (Hyprland address, Sway con_id)",
    )

    title: str = Field("", description="Window title at minimize time")

    app_class: str = Field("", description="Application class at minimize time")

    icon: str = Field("", description="Nerd Font glyph derived from the application class")

    thumbnail_path: Optional[str] = Field(
        None,
        description="Captured thumbnail; absent when capture failed",
    )

    minimized_at: float = Field(
        default_factory=time.time,
        description="Unix timestamp of the minimize operation",
    )

    source_workspace: Optional[str] = Field(
        None,
        description="Workspace the window lived on; None for adopted windows",
    )

    floating: bool = Field(False, description="Floating state before minimization")

    adopted: bool = Field(
        False,
        description="True when reconciliation created the entry for an untracked hidden window",
    )

    @field_validator("window_handle")
    @classmethod
    def validate_window_handle(cls, v: str) -> str:
        """Strip whitespace that hyprctl occasionally leaves around addresses."""
        v = v.strip()
        if not v:
            raise ValueError("Window handle must not be blank")
        return v

    @property
    def short_handle(self) -> str:
        """Last four characters of the handle, used to tell same-titled windows apart."""
        return self.window_handle[-4:]

    def sort_key(self) -> tuple:
        """Ordering key for restore-last/restore-all (age, then id)."""
        return (self.minimized_at, self.id)
