"""Recursive size computation for files and directory trees.

Directory sizes are byte sums over every non-directory entry below the
root. Children of one directory are sized concurrently and joined before
returning; symlinks are counted as links and never followed.
"""

import asyncio
import logging
import os
import stat

logger = logging.getLogger(__name__)


async def path_size(path: str) -> int:
    """Compute the size of a path in bytes.

    Args:
        path: File, symlink, or directory to measure.

    Returns:
        Size in bytes (recursive for directories).

    Raises:
        OSError: If the path itself cannot be inspected. Unreadable
            entries below a directory are skipped instead.
    """
    st = await asyncio.to_thread(os.lstat, path)
    if stat.S_ISDIR(st.st_mode):
        return await _directory_size(path)
    return st.st_size


async def _directory_size(path: str) -> int:
    """Sum the sizes of a directory's children, fanning out per child."""
    try:
        children = await asyncio.to_thread(_list_children, path)
    except OSError as e:
        logger.debug("Cannot list %s: %s", path, e)
        return 0

    sizes = await asyncio.gather(*(_child_size(child) for child in children))
    return sum(sizes)


async def _child_size(path: str) -> int:
    try:
        return await path_size(path)
    except OSError as e:
        logger.debug("Cannot size %s: %s", path, e)
        return 0


def _list_children(path: str) -> list[str]:
    with os.scandir(path) as it:
        return [entry.path for entry in it]


async def count_children(path: str) -> int:
    """Count the immediate children of a directory.

    Raises:
        OSError: If the directory cannot be listed.
    """
    return len(await asyncio.to_thread(os.listdir, path))
