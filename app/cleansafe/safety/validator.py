"""Path safety validation.

Classifies candidate paths as system-protected (blocking), critical,
large, or in use (warnings) without ever modifying the filesystem.
"""

import asyncio
import errno
import logging
import os

from cleansafe.safety.models import ValidationResult
from cleansafe.safety.protected import SystemPathPolicy
from cleansafe.safety.sizing import count_children

logger = logging.getLogger(__name__)

DEFAULT_LARGE_DIRECTORY_THRESHOLD = 1000

# errno values reported when a file is held open exclusively.
_BUSY_ERRNOS = frozenset({errno.EBUSY, errno.ETXTBSY})
# ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
_BUSY_WINERRORS = frozenset({32, 33})


def canonicalize(path: str) -> str:
    """Resolve a path to its absolute canonical form.

    The parent directory is resolved through symlinks while the final
    component is kept as-is, so a symlink is judged as the link that
    would be moved rather than as its target.

    Args:
        path: Path as supplied by the caller.

    Returns:
        Absolute canonical path.
    """
    absolute = os.path.abspath(os.path.expanduser(path))
    parent, name = os.path.split(absolute)
    if not name:
        return absolute
    return os.path.join(os.path.realpath(parent), name)


class PathValidator:
    """Validates candidate paths against a SystemPathPolicy.

    Attributes:
        policy: Deny-list configuration shared with the caller.
        large_directory_threshold: Immediate child count above which a
            directory is reported as large.
    """

    def __init__(
        self,
        policy: SystemPathPolicy,
        large_directory_threshold: int = DEFAULT_LARGE_DIRECTORY_THRESHOLD,
    ) -> None:
        """Initialize the validator.

        Args:
            policy: Deny-list configuration to validate against.
            large_directory_threshold: Child count that marks a directory as large.
        """
        self.policy = policy
        self.large_directory_threshold = large_directory_threshold

    async def validate(self, paths: list[str]) -> ValidationResult:
        """Validate a batch of paths.

        Each path is checked independently. System paths are blockers and
        make the result invalid; every other finding is a warning. Paths
        that do not exist or cannot be inspected degrade to warnings.

        Args:
            paths: Paths as supplied by the caller.

        Returns:
            ValidationResult referencing the caller's path strings.
        """
        result = ValidationResult()

        for path in paths:
            resolved = canonicalize(path)

            if self.policy.is_system_path(resolved):
                result.system_paths.append(path)
                result.blockers.append(f"System path detected: {path}")
                result.is_valid = False
                continue

            if not await asyncio.to_thread(os.path.lexists, resolved):
                result.missing_paths.append(path)
                result.warnings.append(f"Path does not exist: {path}")
                continue

            if self.policy.is_critical_path(resolved):
                result.critical_paths.append(path)
                result.warnings.append(f"Critical directory detected: {path}")

            if await self._is_large_directory(resolved):
                result.large_paths.append(path)
                result.warnings.append(f"Large directory detected: {path} (may take time to process)")

            if await self._is_active_file(resolved):
                result.active_paths.append(path)
                result.warnings.append(f"File may be in use: {path}")

        if result.system_paths:
            logger.warning("Blocked %d system path(s)", len(result.system_paths))

        return result

    async def is_system_path(self, path: str) -> bool:
        """Check a single path against the system deny-list."""
        return self.policy.is_system_path(canonicalize(path))

    async def _is_large_directory(self, path: str) -> bool:
        if os.path.islink(path) or not os.path.isdir(path):
            return False
        try:
            return await count_children(path) > self.large_directory_threshold
        except OSError as e:
            logger.debug("Cannot list %s: %s", path, e)
            return False

    async def _is_active_file(self, path: str) -> bool:
        if os.path.islink(path) or not os.path.isfile(path):
            return False
        return await asyncio.to_thread(_check_busy, path)


def _check_busy(path: str) -> bool:
    """Open a file for read/write to detect whether it is held busy.

    The file is opened without truncation and closed immediately.
    """
    try:
        with open(path, "r+b"):
            return False
    except OSError as e:
        if e.errno in _BUSY_ERRNOS:
            return True
        return getattr(e, "winerror", None) in _BUSY_WINERRORS
