"""OS trash providers for cleansafe.

Each supported platform has a TrashProvider subclass. The factory picks
one for the running platform.
"""

import sys

from cleansafe.trash.base import (
    DEFAULT_TRASH_TIMEOUT,
    TrashError,
    TrashProvider,
    TrashReport,
    TrashStrategy,
    UnsupportedPlatformError,
)
from cleansafe.trash.linux import LinuxTrash
from cleansafe.trash.macos import MacOSTrash
from cleansafe.trash.windows import WindowsTrash

__all__ = [
    "LinuxTrash",
    "MacOSTrash",
    "TrashError",
    "TrashProvider",
    "TrashReport",
    "TrashStrategy",
    "UnsupportedPlatformError",
    "WindowsTrash",
    "create_trash_provider",
]


def create_trash_provider(
    platform: str | None = None,
    timeout: float = DEFAULT_TRASH_TIMEOUT,
) -> TrashProvider:
    """Create the trash provider for a platform.

    Args:
        platform: Value in the form of sys.platform. If None, uses the
            running platform.
        timeout: Timeout in seconds for external trash commands.

    Returns:
        TrashProvider for the platform.

    Raises:
        UnsupportedPlatformError: If no provider exists for the platform.
    """
    platform = platform or sys.platform

    if platform == "darwin":
        return MacOSTrash(timeout=timeout)
    if platform == "win32":
        return WindowsTrash(timeout=timeout)
    if platform.startswith("linux"):
        return LinuxTrash(timeout=timeout)

    msg = f"No trash provider for platform: {platform}"
    raise UnsupportedPlatformError(msg)
