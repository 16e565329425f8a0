"""Windows Recycle Bin provider.

Sends paths to the Recycle Bin through PowerShell and the
Microsoft.VisualBasic FileSystem API, with send2trash as the alternate
relocation helper.
"""

import asyncio
import logging
import os

from send2trash import send2trash
from send2trash.exceptions import TrashPermissionError

from cleansafe.trash.base import TrashError, TrashProvider, TrashStrategy, command_available
from cleansafe.utils.shell import run_command

logger = logging.getLogger(__name__)

POWERSHELL = "powershell"

# Shell.Application namespace 10 is the Recycle Bin.
_TRASH_SIZE_SCRIPT = (
    "$shell = New-Object -ComObject Shell.Application; "
    "$bin = $shell.NameSpace(10); "
    "$total = 0; "
    "foreach ($item in $bin.Items()) { $total += $item.Size }; "
    "Write-Output $total"
)


def _powershell_string(value: str) -> str:
    """Quote a value as a single-quoted PowerShell literal."""
    return "'" + value.replace("'", "''") + "'"


def _recycle_script(path: str, is_dir: bool) -> str:
    method = "DeleteDirectory" if is_dir else "DeleteFile"
    return (
        "Add-Type -AssemblyName Microsoft.VisualBasic; "
        f"[Microsoft.VisualBasic.FileIO.FileSystem]::{method}("
        f"{_powershell_string(path)}, 'OnlyErrorDialogs', 'SendToRecycleBin')"
    )


class WindowsTrash(TrashProvider):
    """Trash provider for Windows.

    Strategies, in order:
        1. powershell: VisualBasic FileSystem with SendToRecycleBin.
        2. send2trash: the send2trash library's native shell call.
    """

    platform = "win32"

    def strategies(self) -> list[TrashStrategy]:
        return [
            TrashStrategy("powershell", self._powershell_recycle, command_available(POWERSHELL)),
            TrashStrategy("send2trash", self._send2trash),
        ]

    async def _powershell_recycle(self, path: str) -> None:
        is_dir = os.path.isdir(path) and not os.path.islink(path)
        await self._run_trash_command(
            [POWERSHELL, "-NoProfile", "-NonInteractive", "-Command", _recycle_script(path, is_dir)]
        )

    async def _send2trash(self, path: str) -> None:
        try:
            await asyncio.to_thread(send2trash, path)
        except TrashPermissionError as e:
            raise TrashError(f"send2trash refused {path}: {e}") from e

    async def get_trash_size(self) -> int:
        try:
            result = await run_command(
                [POWERSHELL, "-NoProfile", "-NonInteractive", "-Command", _TRASH_SIZE_SCRIPT],
                timeout=self.timeout,
            )
        except (FileNotFoundError, TimeoutError) as e:
            logger.debug("Cannot query Recycle Bin size: %s", e)
            return 0

        if not result.success:
            return 0
        try:
            return int(float(result.stdout.strip() or 0))
        except ValueError:
            logger.debug("Unexpected Recycle Bin size output: %r", result.stdout)
            return 0
