"""Window thumbnail capture.

A minimize grabs the window region with grim (PNG on stdout) and pipes it
through ImageMagick twice: a menu thumbnail and a small icon for rofi.
Capture is best-effort; any failure leaves the entry without a thumbnail.
"""

import logging
import re
import shutil
from pathlib import Path
from typing import List, Optional

from ..models.window import ClientWindow
from .errors import AdapterFailure
from .process import run_command


logger = logging.getLogger(__name__)


def _safe_name(handle: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]", "_", handle)


class ThumbnailCapture:
    """Captures and deletes window thumbnails in the preview directory."""

    name = "capture"

    def __init__(
        self,
        preview_dir: Path,
        thumbnail_size: str = "200x150",
        icon_size: str = "64x64",
        timeout: float = 5.0,
        enabled: bool = True,
    ):
        self.preview_dir = preview_dir
        self.thumbnail_size = thumbnail_size
        self.icon_size = icon_size
        self.timeout = timeout
        self.enabled = enabled

    def thumbnail_path(self, handle: str) -> Path:
        return self.preview_dir / f"{_safe_name(handle)}.thumb.png"

    def icon_path(self, handle: str) -> Path:
        return self.preview_dir / f"{_safe_name(handle)}.icon.png"

    def _converter(self) -> List[str]:
        # ImageMagick 7 ships "magick"; version 6 only has "convert"
        if shutil.which("magick"):
            return ["magick"]
        return ["convert"]

    async def capture_region(self, window: ClientWindow) -> bytes:
        """Screenshot the window's region and return PNG bytes.

        Raises:
            AdapterFailure: If the window has no geometry or grim fails
        """
        if window.geometry is None:
            raise AdapterFailure(self.name, f"window {window.handle} has no geometry")
        result = await run_command(
            ["grim", "-g", window.geometry.to_region(), "-t", "png", "-"],
            self.name,
            self.timeout,
        )
        if not result.ok or not result.stdout:
            raise AdapterFailure(self.name, result.error_text or "grim produced no image", result.command)
        return result.stdout

    async def _resize(self, image: bytes, size: str, output: Path) -> None:
        command = self._converter() + [
            "png:-",
            "-resize", f"{size}^",
            "-gravity", "center",
            "-extent", size,
            "-quality", "90",
            str(output),
        ]
        result = await run_command(command, self.name, self.timeout, input=image)
        if not result.ok:
            raise AdapterFailure(self.name, result.error_text or f"exit status {result.returncode}", result.command)

    async def write_thumbnail(self, image: bytes, handle: str) -> Path:
        """Post-process captured PNG bytes into thumbnail and icon files."""
        self.preview_dir.mkdir(parents=True, exist_ok=True)
        thumb = self.thumbnail_path(handle)
        await self._resize(image, self.thumbnail_size, thumb)
        await self._resize(image, self.icon_size, self.icon_path(handle))
        return thumb

    async def capture(self, window: ClientWindow) -> Optional[Path]:
        """Capture a thumbnail for a window.

        Returns:
            Path to the thumbnail, or None if capture is disabled or failed
        """
        if not self.enabled:
            return None
        try:
            image = await self.capture_region(window)
            thumb = await self.write_thumbnail(image, window.handle)
        except (AdapterFailure, OSError) as e:
            logger.warning(f"Thumbnail capture failed for {window.handle}: {e}")
            self.delete(window.handle)
            return None
        logger.debug(f"Captured thumbnail {thumb}")
        return thumb

    def delete(self, handle: str) -> None:
        """Remove a window's thumbnail files, ignoring errors."""
        for path in (self.thumbnail_path(handle), self.icon_path(handle)):
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Failed to remove {path}: {e}")
