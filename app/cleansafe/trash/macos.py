"""macOS trash provider.

Uses Finder through osascript so that "Put Back" works, and falls back to
a manual move into ~/.Trash.
"""

import logging
import os
import time
from pathlib import Path

from cleansafe.safety.sizing import path_size
from cleansafe.trash.base import (
    TrashError,
    TrashProvider,
    TrashStrategy,
    command_available,
    move_path,
    path_exists,
    split_name,
)

logger = logging.getLogger(__name__)


def _applescript_string(value: str) -> str:
    """Quote a value as an AppleScript string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class MacOSTrash(TrashProvider):
    """Trash provider for macOS.

    Strategies, in order:
        1. finder: ``osascript`` asking Finder to delete the POSIX file.
        2. manual: move into ``~/.Trash`` with a collision-free name.
    """

    platform = "darwin"

    def __init__(self, timeout: float = 10.0, trash_dir: Path | None = None) -> None:
        """Initialize the provider.

        Args:
            timeout: Timeout in seconds for each osascript call.
            trash_dir: Trash directory. Defaults to ~/.Trash.
        """
        super().__init__(timeout=timeout)
        self.trash_dir = trash_dir or Path.home() / ".Trash"

    def strategies(self) -> list[TrashStrategy]:
        return [
            TrashStrategy("finder", self._finder_delete, command_available("osascript")),
            TrashStrategy("manual", self._manual_move),
        ]

    async def _finder_delete(self, path: str) -> None:
        script = f"tell application \"Finder\" to delete POSIX file {_applescript_string(path)}"
        await self._run_trash_command(["osascript", "-e", script])

    async def _manual_move(self, path: str) -> None:
        if not self.trash_dir.is_dir():
            raise TrashError(f"Trash directory not found: {self.trash_dir}")

        target = await self._unique_target(os.path.basename(path))
        await move_path(path, str(target))
        logger.debug("Moved %s to %s", path, target)

    async def _unique_target(self, name: str) -> Path:
        """Pick a free name in the trash: <stem>_<epoch-ms>_<counter><suffix>."""
        target = self.trash_dir / name
        if not await path_exists(str(target)):
            return target

        stem, suffix = split_name(name)
        stamp = int(time.time() * 1000)
        counter = 1
        while True:
            target = self.trash_dir / f"{stem}_{stamp}_{counter}{suffix}"
            if not await path_exists(str(target)):
                return target
            counter += 1

    async def get_trash_size(self) -> int:
        try:
            return await path_size(str(self.trash_dir))
        except OSError as e:
            logger.debug("Cannot size %s: %s", self.trash_dir, e)
            return 0
