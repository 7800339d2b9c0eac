"""Thumbnail capture stand-in that writes placeholder files."""

from pathlib import Path
from typing import List, Optional

from minhypr.models.window import ClientWindow


class FakeCapture:
    """Writes a tiny placeholder per capture; can be told to fail."""

    def __init__(self, preview_dir: Path, fail: bool = False):
        self.preview_dir = preview_dir
        self.fail = fail
        self.captured: List[str] = []
        self.deleted: List[str] = []

    def thumbnail_path(self, handle: str) -> Path:
        return self.preview_dir / f"{handle}.thumb.png"

    async def capture(self, window: ClientWindow) -> Optional[Path]:
        if self.fail:
            return None
        self.preview_dir.mkdir(parents=True, exist_ok=True)
        path = self.thumbnail_path(window.handle)
        path.write_bytes(b"\x89PNG fake")
        self.captured.append(window.handle)
        return path

    def delete(self, handle: str) -> None:
        self.deleted.append(handle)
        self.thumbnail_path(handle).unlink(missing_ok=True)
