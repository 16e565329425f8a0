"""Linux trash provider.

Follows the freedesktop.org Trash specification: tries ``gio trash``, then
``trash-put``, then moves the path into $XDG_DATA_HOME/Trash itself,
writing the .trashinfo sidecar that desktop file managers read.
"""

import asyncio
import logging
import os
from datetime import datetime
from pathlib import Path
from urllib.parse import quote

from cleansafe.core.paths import get_user_data_dir
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

TRASHINFO_SUFFIX = ".trashinfo"


def format_trashinfo(original_path: str, deleted_at: datetime) -> str:
    """Render a .trashinfo sidecar.

    Args:
        original_path: Absolute path the entry was trashed from.
        deleted_at: Local deletion time.

    Returns:
        File content in the freedesktop.org format.
    """
    return (
        "[Trash Info]\n"
        f"Path={quote(os.fsencode(original_path))}\n"
        f"DeletionDate={deleted_at.strftime('%Y-%m-%dT%H:%M:%S')}\n"
    )


class LinuxTrash(TrashProvider):
    """Trash provider for Linux desktops.

    Strategies, in order:
        1. gio: ``gio trash <path>`` (GLib, present on most desktops).
        2. trash-cli: ``trash-put <path>``.
        3. manual: freedesktop.org move into the home trash.

    Attributes:
        trash_dir: Home trash directory containing files/ and info/.
    """

    platform = "linux"

    def __init__(self, timeout: float = 10.0, trash_dir: Path | None = None) -> None:
        """Initialize the provider.

        Args:
            timeout: Timeout in seconds for each external command.
            trash_dir: Home trash directory. Defaults to $XDG_DATA_HOME/Trash.
        """
        super().__init__(timeout=timeout)
        self.trash_dir = trash_dir or get_user_data_dir() / "Trash"

    @property
    def files_dir(self) -> Path:
        return self.trash_dir / "files"

    @property
    def info_dir(self) -> Path:
        return self.trash_dir / "info"

    def strategies(self) -> list[TrashStrategy]:
        return [
            TrashStrategy("gio", self._gio_trash, command_available("gio")),
            TrashStrategy("trash-cli", self._trash_put, command_available("trash-put")),
            TrashStrategy("manual", self._manual_move),
        ]

    async def _gio_trash(self, path: str) -> None:
        await self._run_trash_command(["gio", "trash", path])

    async def _trash_put(self, path: str) -> None:
        await self._run_trash_command(["trash-put", path])

    async def _manual_move(self, path: str) -> None:
        try:
            await asyncio.to_thread(self.files_dir.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(self.info_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise TrashError(f"Cannot create trash directory {self.trash_dir}: {e}") from e

        original = os.path.abspath(path)
        name = await self._unique_name(os.path.basename(original))
        info_path = self.info_dir / f"{name}{TRASHINFO_SUFFIX}"

        await asyncio.to_thread(info_path.write_text, format_trashinfo(original, datetime.now()), "utf-8")
        try:
            await move_path(original, str(self.files_dir / name))
        except OSError:
            info_path.unlink(missing_ok=True)
            raise

        logger.debug("Moved %s to %s", original, self.files_dir / name)

    async def _unique_name(self, name: str) -> str:
        """Pick a name free in both files/ and info/: <stem>_<counter><suffix>."""
        candidate = name
        stem, suffix = split_name(name)
        counter = 1
        while await path_exists(str(self.files_dir / candidate)) or await path_exists(
            str(self.info_dir / f"{candidate}{TRASHINFO_SUFFIX}")
        ):
            candidate = f"{stem}_{counter}{suffix}"
            counter += 1
        return candidate

    async def get_trash_size(self) -> int:
        try:
            return await path_size(str(self.files_dir))
        except OSError as e:
            logger.debug("Cannot size %s: %s", self.files_dir, e)
            return 0
