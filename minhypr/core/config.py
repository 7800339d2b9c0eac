"""Configuration management for minhypr.

Settings live in ~/.config/minhypr/config.json. Every key is optional;
unknown keys are ignored. A few settings can be overridden from the
environment:

- MINHYPR_CONFIG: alternative config.json path
- MINHYPR_STATE_DIR: directory for windows.json and its lock
- MINHYPR_COMPOSITOR: auto, hyprland or sway
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ConfigError


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "minhypr"


class MinhyprConfig(BaseModel):
    """Effective runtime configuration."""

    model_config = {"extra": "ignore"}

    compositor: Literal["auto", "hyprland", "sway"] = Field(
        "auto",
        description="Compositor backend; auto picks from the session environment",
    )

    special_workspace: str = Field(
        "minimized",
        min_length=1,
        description="Name of the Hyprland special workspace (special:<name>)",
    )

    config_dir: Path = Field(DEFAULT_CONFIG_DIR, description="Rofi theme and helper scripts")
    state_dir: Optional[Path] = Field(None, description="Defaults to <config_dir>/state")
    preview_dir: Optional[Path] = Field(None, description="Defaults to <config_dir>/previews")

    lock_timeout: float = Field(5.0, gt=0, le=60, description="Seconds to wait for the state lock")
    command_timeout: float = Field(5.0, gt=0, le=60, description="Seconds before an external tool is abandoned")

    capture_enabled: bool = Field(True, description="Capture thumbnails on minimize")
    thumbnail_size: str = Field("200x150", pattern=r"^\d+x\d+$")
    icon_size: str = Field("64x64", pattern=r"^\d+x\d+$")

    ignored_classes: List[str] = Field(
        default_factory=lambda: ["wofi", "rofi"],
        description="Window classes that are never minimized (menus, launchers)",
    )

    restore_fallback: Literal["current", "source"] = Field(
        "current",
        description="Target when the source workspace no longer exists",
    )

    adopt_orphans: bool = Field(
        True,
        description="Track untracked windows found in the special workspace",
    )

    waybar_signal: Optional[int] = Field(
        8,
        ge=1,
        le=30,
        description="Real-time signal sent to waybar after changes (RTMIN+n); null disables",
    )

    status_icon: str = Field("󰘸", description="Glyph shown by the status module")

    rofi_theme: Optional[Path] = Field(None, description="Defaults to <config_dir>/minhypr.rasi")

    @model_validator(mode="after")
    def fill_derived_paths(self) -> "MinhyprConfig":
        self.config_dir = self.config_dir.expanduser()
        if self.state_dir is None:
            self.state_dir = self.config_dir / "state"
        if self.preview_dir is None:
            self.preview_dir = self.config_dir / "previews"
        if self.rofi_theme is None:
            self.rofi_theme = self.config_dir / "minhypr.rasi"
        self.state_dir = self.state_dir.expanduser()
        self.preview_dir = self.preview_dir.expanduser()
        self.rofi_theme = self.rofi_theme.expanduser()
        return self

    @property
    def state_file(self) -> Path:
        return self.state_dir / "windows.json"

    @property
    def lock_file(self) -> Path:
        return self.state_dir / "windows.lock"

    def is_ignored(self, app_class: str) -> bool:
        lowered = app_class.lower()
        return any(lowered == ignored.lower() for ignored in self.ignored_classes)


def default_config_file() -> Path:
    override = os.environ.get("MINHYPR_CONFIG")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_DIR / "config.json"


def load_config(config_file: Optional[Path] = None) -> MinhyprConfig:
    """Load configuration from disk and the environment.

    Args:
        config_file: Path to config.json (default: MINHYPR_CONFIG or
            ~/.config/minhypr/config.json)

    Returns:
        MinhyprConfig with derived paths filled in

    Raises:
        ConfigError: If the file exists but is not valid JSON or has invalid values
    """
    if config_file is None:
        config_file = default_config_file()

    data = {}
    if config_file.exists():
        try:
            with config_file.open("r") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Failed to read {config_file}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"{config_file} must contain a JSON object")
        logger.debug(f"Loaded configuration from {config_file}")
    else:
        logger.debug(f"No configuration file at {config_file}, using defaults")

    state_dir = os.environ.get("MINHYPR_STATE_DIR")
    if state_dir:
        data["state_dir"] = state_dir
    compositor = os.environ.get("MINHYPR_COMPOSITOR")
    if compositor:
        data["compositor"] = compositor

    try:
        return MinhyprConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_file}: {e}")
