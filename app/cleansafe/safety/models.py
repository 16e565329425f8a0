"""Value objects for the deletion safety layer.

This module defines the transient data structures exchanged between the
validator, the orchestrator, the confirmation protocol, and callers.
None of them are persisted.
"""

import os
import stat
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum


class PathKind(str, Enum):
    """Kind of filesystem entry.

    Attributes:
        FILE: Regular file (or anything that is not a directory or link).
        DIRECTORY: Real directory.
        SYMLINK: Symbolic link, live or dead.
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"

    @classmethod
    def of(cls, path: str) -> "PathKind":
        """Classify a path without following a final symlink.

        Raises:
            OSError: If the path cannot be inspected.
        """
        mode = os.lstat(path).st_mode
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        return cls.FILE


class DeletionMethod(str, Enum):
    """Mechanism used to remove paths.

    Attributes:
        TRASH: OS-native trash or recycle bin.
        QUARANTINE: cleansafe's private quarantine directory.
    """

    TRASH = "trash"
    QUARANTINE = "quarantine"


@dataclass(frozen=True, slots=True)
class CandidatePath:
    """A path proposed for deletion by the scanner.

    Attributes:
        path: Absolute filesystem path.
        size_bytes: Cached size in bytes (recursive for directories).
        kind: Entry kind.
    """

    path: str
    size_bytes: int
    kind: PathKind

    def __post_init__(self) -> None:
        """Validate candidate data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @classmethod
    def from_path(cls, path: str, size_bytes: int = 0) -> "CandidatePath":
        """Build a candidate from a path string, inspecting its kind.

        Raises:
            OSError: If the path cannot be inspected.
        """
        absolute = os.path.abspath(os.path.expanduser(path))
        return cls(path=absolute, size_bytes=size_bytes, kind=PathKind.of(absolute))


@dataclass(slots=True)
class ValidationResult:
    """Outcome of validating a batch of paths.

    Attributes:
        is_valid: False iff at least one system path was found.
        warnings: Non-blocking messages to surface to the user.
        blockers: Blocking messages, one per system path.
        system_paths: Input paths classified as system paths.
        critical_paths: Input paths inside critical user locations.
        large_paths: Input directories with many immediate children.
        active_paths: Input files that appear to be in use.
        missing_paths: Input paths that do not exist.
    """

    is_valid: bool = True
    warnings: list[str] = field(default_factory=list)
    blockers: list[str] = field(default_factory=list)
    system_paths: list[str] = field(default_factory=list)
    critical_paths: list[str] = field(default_factory=list)
    large_paths: list[str] = field(default_factory=list)
    active_paths: list[str] = field(default_factory=list)
    missing_paths: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DeletionOptions:
    """Caller options for a deletion request.

    Attributes:
        dry_run: Report what would happen without touching the filesystem.
        use_trash: Prefer the OS trash over the quarantine.
        skip_confirmation: Bypass the confirmation callback and proceed
            even when system paths were found (they are still skipped).
        retain_in_quarantine: Send the batch to the quarantine even when
            the OS trash is available.
        interactive: Ask the confirmation callback before deleting.
    """

    dry_run: bool = False
    use_trash: bool = True
    skip_confirmation: bool = False
    retain_in_quarantine: bool = False
    interactive: bool = False


@dataclass(frozen=True, slots=True)
class ConfirmationPrompt:
    """Human-readable summary of a pending deletion.

    Attributes:
        message: Headline question including count, size, and method.
        details: One line per path (truncated for long batches).
        warnings: Validation and size warnings.
        total_size: Total size in bytes of the paths that would be deleted.
        item_count: Number of paths that would be deleted.
        method: Mechanism that will be attempted.
    """

    message: str
    details: list[str]
    warnings: list[str]
    total_size: int
    item_count: int
    method: DeletionMethod


@dataclass(frozen=True, slots=True)
class ConfirmationResult:
    """Decision returned by a confirmation callback.

    Attributes:
        confirmed: Whether the user agreed to proceed.
        skip_future: Stop asking for the rest of the session.
    """

    confirmed: bool
    skip_future: bool = False


@dataclass(slots=True)
class ConfirmationSession:
    """Caller-owned confirmation state shared across deletion calls.

    Pass the same session to consecutive calls; once the user answers
    "don't ask again", later calls sharing it skip the callback.

    Attributes:
        skip_confirmation: Set when the user chose to skip future prompts.
    """

    skip_confirmation: bool = False


@dataclass(slots=True)
class DeletionResult:
    """Outcome of one orchestrator invocation.

    Attributes:
        success: True when every non-system path was processed.
        processed_paths: Paths moved to the trash or the quarantine
            (or, in a dry run, the paths that would be).
        failed_paths: System paths that were skipped plus paths that
            could not be processed.
        total_size: Size in bytes of the non-system paths.
        method: Mechanism reported for the batch. QUARANTINE whenever
            any path ended up in the quarantine.
        dry_run: Whether this was a simulation.
        errors: Error messages collected along the way.
        trashed_paths: Paths taken by the OS trash.
        quarantined_paths: Paths moved into the quarantine.
        quarantine_ids: Ids of the quarantine entries created.
    """

    method: DeletionMethod
    success: bool = False
    processed_paths: list[str] = field(default_factory=list)
    failed_paths: list[str] = field(default_factory=list)
    total_size: int = 0
    dry_run: bool = False
    errors: list[str] = field(default_factory=list)
    trashed_paths: list[str] = field(default_factory=list)
    quarantined_paths: list[str] = field(default_factory=list)
    quarantine_ids: list[str] = field(default_factory=list)


ConfirmationCallback = Callable[[ConfirmationPrompt], Awaitable[ConfirmationResult]]

# Called before each path is attempted with (path, index, total).
# Returning False stops new per-path work for the rest of the batch.
ProgressCallback = Callable[[str, int, int], bool | None]
