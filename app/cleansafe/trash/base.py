"""Abstract base class for OS trash providers.

This module defines the TrashProvider interface every platform
implementation follows, and the ordered strategy runner that tries a
platform's mechanisms in sequence for each path.
"""

import asyncio
import logging
import os
import shutil
import sys
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from cleansafe.core.errors import CleansafeError
from cleansafe.safety.models import ProgressCallback
from cleansafe.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

DEFAULT_TRASH_TIMEOUT = 10.0


class TrashError(CleansafeError):
    """Raised when a trash mechanism fails for a path."""


class UnsupportedPlatformError(TrashError):
    """Raised when no trash provider exists for the running platform."""


def _always_available() -> bool:
    return True


@dataclass(frozen=True, slots=True)
class TrashStrategy:
    """One mechanism for moving a single path to the trash.

    Attributes:
        name: Short identifier used in logs and reports.
        attempt: Coroutine function that trashes one path, raising
            TrashError (or OSError) on failure.
        is_available: Whether the mechanism can run at all on this host.
    """

    name: str
    attempt: Callable[[str], Awaitable[None]]
    is_available: Callable[[], bool] = _always_available


@dataclass(slots=True)
class TrashReport:
    """Per-path outcome of a trash batch.

    Attributes:
        trashed: Paths some strategy accepted.
        failed: Paths every strategy rejected.
        skipped: Paths never attempted because the caller cancelled.
        errors: One message per failed path.
        strategy_used: Strategy name that succeeded, keyed by path.
    """

    trashed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    strategy_used: dict[str, str] = field(default_factory=dict)

    @property
    def any_succeeded(self) -> bool:
        """Check if at least one path went to the trash."""
        return bool(self.trashed)

    @property
    def complete(self) -> bool:
        """Check if every path went to the trash."""
        return not self.failed and not self.skipped


async def run_strategies(strategies: list[TrashStrategy], path: str) -> str:
    """Try strategies in order until one trashes the path.

    Args:
        strategies: Ordered fallback chain.
        path: Path to trash.

    Returns:
        Name of the strategy that succeeded.

    Raises:
        TrashError: If no available strategy succeeded.
    """
    failures: list[str] = []

    for strategy in strategies:
        if not strategy.is_available():
            logger.debug("Strategy %s unavailable, skipping", strategy.name)
            continue
        try:
            await strategy.attempt(path)
        except (TrashError, OSError, TimeoutError, UnicodeError) as e:
            logger.debug("Strategy %s failed for %s: %s", strategy.name, path, e)
            failures.append(f"{strategy.name}: {e}")
            continue
        return strategy.name

    detail = "; ".join(failures) if failures else "no trash mechanism available"
    raise TrashError(f"Failed to move {path} to trash ({detail})")


class TrashProvider(ABC):
    """Abstract base class for all trash providers.

    A provider moves paths into the platform's native trash. Each
    platform supplies an ordered list of strategies; the base class runs
    them per path so that one failing path never aborts the batch.

    Attributes:
        timeout: Timeout in seconds for each external command.

    Example:
        >>> provider = create_trash_provider()
        >>> if provider.is_supported():
        ...     report = await provider.trash(["/tmp/old.log"])
        ...     print(report.trashed, report.failed)
    """

    platform: ClassVar[str]

    def __init__(self, timeout: float = DEFAULT_TRASH_TIMEOUT) -> None:
        """Initialize the provider.

        Args:
            timeout: Timeout in seconds for each external command.
        """
        self.timeout = timeout

    @abstractmethod
    def strategies(self) -> list[TrashStrategy]:
        """Return the platform's mechanisms in fallback order."""

    @abstractmethod
    async def get_trash_size(self) -> int:
        """Return the current size of the trash in bytes (0 on failure)."""

    def is_supported(self) -> bool:
        """Check if this provider matches the running platform."""
        return sys.platform.startswith(self.platform)

    async def trash(
        self,
        paths: list[str],
        progress: ProgressCallback | None = None,
    ) -> TrashReport:
        """Move paths to the trash, each one independently.

        Args:
            paths: Paths to trash.
            progress: Called before each path; returning False stops
                further paths from being attempted.

        Returns:
            TrashReport describing the outcome of every path.
        """
        report = TrashReport()
        strategies = self.strategies()

        for index, path in enumerate(paths):
            if progress is not None and progress(path, index, len(paths)) is False:
                report.skipped.extend(paths[index:])
                logger.info("Trash batch cancelled, %d path(s) skipped", len(paths) - index)
                break

            try:
                used = await run_strategies(strategies, path)
            except TrashError as e:
                report.failed.append(path)
                report.errors.append(str(e))
                continue

            report.trashed.append(path)
            report.strategy_used[path] = used
            logger.info("Moved %s to trash via %s", path, used)

        return report

    async def move_to_trash(self, paths: list[str]) -> bool:
        """Move paths to the trash.

        Args:
            paths: Paths to trash.

        Returns:
            True for an empty batch or when at least one path was trashed;
            False only if no mechanism succeeded for any path.
        """
        if not paths:
            return True
        report = await self.trash(paths)
        return report.any_succeeded

    async def _run_trash_command(self, args: list[str]) -> None:
        """Run an external trash command, raising TrashError on failure."""
        try:
            result = await run_command(args, timeout=self.timeout)
        except FileNotFoundError as e:
            raise TrashError(f"{args[0]} not found") from e
        except TimeoutError as e:
            raise TrashError(f"{args[0]} timed out after {self.timeout}s") from e

        if not result.success:
            raise TrashError(result.stderr.strip() or f"{args[0]} exited with {result.returncode}")


def command_available(name: str) -> Callable[[], bool]:
    """Build an availability check for an external command."""
    return lambda: command_exists(name)


async def move_path(source: str, target: str) -> None:
    """Move a file or directory, falling back to copy+delete across devices."""
    await asyncio.to_thread(shutil.move, source, target)


async def path_exists(path: str) -> bool:
    """Check if a path exists, counting dead symlinks as existing."""
    return await asyncio.to_thread(os.path.lexists, path)


def split_name(name: str) -> tuple[str, str]:
    """Split a file name into stem and suffix ("a.tar.gz" -> ("a.tar", ".gz"))."""
    pure = Path(name)
    return pure.stem, pure.suffix
