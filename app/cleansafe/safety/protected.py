"""Protected filesystem locations for the deletion safety layer.

This module defines the platform deny-lists of system directories that
must never be deleted, and the critical user locations that warrant a
warning. They are bundled into an immutable SystemPathPolicy which is
built once and handed to the validator.
"""

import fnmatch
import os
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath

# System roots per platform. Anything at or below these is blocked.
SYSTEM_ROOTS: dict[str, tuple[str, ...]] = {
    "linux": (
        "/bin",
        "/sbin",
        "/usr",
        "/etc",
        "/var/log",
        "/var/lib",
        "/boot",
        "/dev",
        "/proc",
        "/sys",
        "/root",
        "/lib",
        "/lib32",
        "/lib64",
        "/libx32",
        "/run",
        "/snap",
    ),
    "darwin": (
        "/System",
        "/Library",
        "/Applications",
        "/bin",
        "/sbin",
        "/usr",
        "/etc",
        "/dev",
        "/private/etc",
        "/private/var/log",
        "/private/var/db",
        "/cores",
    ),
    "win32": (
        "C:\\Windows",
        "C:\\Program Files",
        "C:\\Program Files (x86)",
        "C:\\ProgramData",
        "C:\\System Volume Information",
        "C:\\Recovery",
        "C:\\$Recycle.Bin",
    ),
}

# Root-level directory names treated as system directories on POSIX
# even when the static list above misses them.
SYSTEM_ROOT_NAMES: frozenset[str] = frozenset(
    {"bin", "sbin", "usr", "etc", "boot", "dev", "proc", "sys", "lib", "lib64", "var", "opt", "root"}
)

# Hierarchies that are never system paths (besides the user's home).
EXEMPT_ROOTS: tuple[str, ...] = ("/tmp", "/var/folders")

# Critical user locations (glob-style). Patterns starting with ~ are
# expanded to the user's home directory before matching.
CRITICAL_PATH_PATTERNS: tuple[str, ...] = (
    # Personal data
    "~/Documents",
    "~/Desktop",
    "~/Downloads",
    "~/Pictures",
    "~/Music",
    "~/Videos",
    # Credentials
    "~/.ssh",
    "~/.ssh/*",
    "~/.gnupg",
    "~/.gnupg/*",
    "~/.aws",
    "~/.kube",
    # Application state
    "~/.config",
    "~/Library/Application Support",
    "~/AppData/Roaming",
    "~/AppData/Local",
)

# Project and IDE markers, matched on the final path component.
CRITICAL_NAMES: frozenset[str] = frozenset(
    {
        ".git",
        "node_modules",
        ".vscode",
        ".idea",
        "package.json",
        "package-lock.json",
        "yarn.lock",
        "Cargo.toml",
        "requirements.txt",
        "pyproject.toml",
        "pom.xml",
    }
)


def current_platform() -> str:
    """Return the deny-list key for the running interpreter."""
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


@dataclass(frozen=True, slots=True)
class SystemPathPolicy:
    """Immutable deny-list configuration for one platform.

    Attributes:
        platform: Platform key ("linux", "darwin", "win32").
        system_roots: Directories that are blocked along with their contents.
        root_names: Single-segment names blocked directly under "/".
        exempt_roots: Hierarchies that are never treated as system paths.
        home: The user's home directory.
        critical_patterns: Glob patterns for critical user locations.
        critical_names: Final path components that mark critical entries.
    """

    platform: str
    system_roots: tuple[str, ...]
    root_names: frozenset[str]
    exempt_roots: tuple[str, ...]
    home: str
    critical_patterns: tuple[str, ...] = CRITICAL_PATH_PATTERNS
    critical_names: frozenset[str] = field(default=CRITICAL_NAMES)

    @classmethod
    def for_platform(
        cls,
        platform: str | None = None,
        home: str | None = None,
        extra_system_paths: tuple[str, ...] | list[str] = (),
    ) -> "SystemPathPolicy":
        """Build the policy for a platform.

        Args:
            platform: Platform key. If None, uses the running platform.
            home: Home directory. If None, uses the current user's home.
            extra_system_paths: Additional roots to block.

        Returns:
            A SystemPathPolicy for the platform. Unknown platforms get
            an empty static deny-list but keep the root-name check.
        """
        platform = platform or current_platform()
        home = home or str(Path.home())

        exempt = [*EXEMPT_ROOTS, tempfile.gettempdir()]
        if platform != "win32":
            exempt = [os.path.realpath(p) for p in exempt] + exempt

        return cls(
            platform=platform,
            system_roots=SYSTEM_ROOTS.get(platform, ()) + tuple(extra_system_paths),
            root_names=SYSTEM_ROOT_NAMES if platform != "win32" else frozenset(),
            exempt_roots=tuple(dict.fromkeys(exempt)),
            home=home,
        )

    def _pure(self, path: str) -> PurePath:
        if self.platform == "win32":
            return PureWindowsPath(path.lower())
        return PurePosixPath(path)

    def _is_under(self, path: PurePath, root: str) -> bool:
        return path.is_relative_to(self._pure(root))

    def is_exempt(self, path: str) -> bool:
        """Check if a canonical path lies in the home or temp hierarchies."""
        pure = self._pure(path)
        home = self._pure(self.home)
        if len(home.parts) > 1 and pure.is_relative_to(home):
            return True
        return any(self._is_under(pure, root) for root in self.exempt_roots)

    def is_system_path(self, path: str) -> bool:
        """Check if a canonical path is a protected system path.

        The home and temp hierarchies are never system paths. Otherwise a
        path is blocked when it is the filesystem root, when it lies at or
        below a system root, or when it is a single segment under "/" with a
        known system directory name.

        Args:
            path: Absolute, canonical path to check.

        Returns:
            True if the path must not be deleted.
        """
        if self.is_exempt(path):
            return False

        pure = self._pure(path)
        if any(self._is_under(pure, root) for root in self.system_roots):
            return True

        parts = pure.parts
        if len(parts) == 1:
            # The filesystem root or a bare drive.
            return True
        return len(parts) == 2 and parts[0] == "/" and parts[1] in self.root_names

    def is_critical_path(self, path: str) -> bool:
        """Check if a canonical path is a critical user location.

        Uses fnmatch on home-expanded patterns, plus a match of the final
        path component against project and IDE markers.

        Args:
            path: Absolute, canonical path to check.

        Returns:
            True if deleting the path deserves an explicit warning.
        """
        if os.path.basename(path) in self.critical_names:
            return True

        for pattern in self.critical_patterns:
            expanded = self.home + pattern[1:] if pattern.startswith("~") else pattern
            if fnmatch.fnmatch(path, expanded):
                return True

        return False
