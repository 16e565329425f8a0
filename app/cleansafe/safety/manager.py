"""Deletion orchestrator.

SafetyManager validates candidate paths, sizes them, asks for
confirmation when requested, and removes them through the OS trash with
the quarantine as fallback. Every outcome is reported in a
DeletionResult; per-path failures never abort a batch.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from cleansafe.core.config import SafetyConfig
from cleansafe.quarantine import QuarantineEntry, QuarantineError, QuarantineStore
from cleansafe.safety.confirmation import build_prompt
from cleansafe.safety.models import (
    ConfirmationCallback,
    ConfirmationPrompt,
    ConfirmationSession,
    DeletionMethod,
    DeletionOptions,
    DeletionResult,
    ProgressCallback,
    ValidationResult,
)
from cleansafe.safety.protected import SystemPathPolicy
from cleansafe.safety.sizing import path_size
from cleansafe.safety.validator import PathValidator
from cleansafe.trash import TrashError, TrashProvider, UnsupportedPlatformError, create_trash_provider

logger = logging.getLogger(__name__)


def _resolve(path: str) -> str:
    return os.path.abspath(os.path.expanduser(path))


@dataclass(slots=True)
class _Plan:
    """Validated and sized subset of a request."""

    validation: ValidationResult
    paths: list[str]
    total_size: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(slots=True)
class _Outcome:
    """Per-path bookkeeping while a batch is processed."""

    processed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    trashed: list[str] = field(default_factory=list)
    quarantined: list[str] = field(default_factory=list)
    entries: list[QuarantineEntry] = field(default_factory=list)

    def cancel(self, paths: list[str]) -> None:
        for path in paths:
            self.failed.append(path)
            self.errors.append(f"Cancelled before processing: {path}")


class SafetyManager:
    """Mediates every destructive operation on candidate paths.

    Attributes:
        config: Safety configuration in effect.
        policy: System path deny-list shared with the validator.
        validator: Path validator.
        quarantine: Quarantine store used as fallback and for restores.
        trash_provider: OS trash provider, or None when the platform has none.

    Example:
        >>> manager = SafetyManager()
        >>> result = await manager.safe_delete(["/tmp/build-cache"])
        >>> result.success, result.method
        (True, <DeletionMethod.TRASH: 'trash'>)
    """

    def __init__(
        self,
        quarantine_root: Path | None = None,
        *,
        trash_provider: TrashProvider | None = None,
        policy: SystemPathPolicy | None = None,
        config: SafetyConfig | None = None,
    ) -> None:
        """Initialize SafetyManager.

        Args:
            quarantine_root: Quarantine root. Defaults to the configured root.
            trash_provider: Trash provider. If None, one is created for the
                running platform; unsupported platforms are quarantine-only.
            policy: System path policy. If None, built for the running platform.
            config: Safety configuration. If None, defaults are used.
        """
        self.config = config or SafetyConfig()
        self.policy = policy or SystemPathPolicy.for_platform(
            extra_system_paths=tuple(self.config.extra_system_paths)
        )
        self.validator = PathValidator(self.policy, self.config.large_directory_threshold)
        self.quarantine = QuarantineStore(quarantine_root or self.config.effective_quarantine_root)

        if trash_provider is None:
            try:
                trash_provider = create_trash_provider(timeout=self.config.trash_timeout_seconds)
            except UnsupportedPlatformError as e:
                logger.warning("%s; deletions will use the quarantine", e)
        self.trash_provider = trash_provider

    @property
    def trash_available(self) -> bool:
        """Check if an OS trash provider supports the running platform."""
        return self.trash_provider is not None and self.trash_provider.is_supported()

    def select_method(self, options: DeletionOptions) -> DeletionMethod:
        """Pick the mechanism a request will attempt first."""
        if options.use_trash and self.trash_available and not options.retain_in_quarantine:
            return DeletionMethod.TRASH
        return DeletionMethod.QUARANTINE

    # -- validation and planning -------------------------------------------

    async def validate_paths(self, paths: list[str]) -> ValidationResult:
        """Validate paths without touching the filesystem."""
        return await self.validator.validate(paths)

    async def _size(self, plan: _Plan) -> None:
        sizes = await asyncio.gather(
            *(path_size(_resolve(path)) for path in plan.paths),
            return_exceptions=True,
        )
        for path, size in zip(plan.paths, sizes, strict=True):
            if isinstance(size, OSError):
                plan.errors.append(f"Failed to calculate size for {path}: {size}")
            elif isinstance(size, BaseException):
                raise size
            else:
                plan.total_size += size

    async def _plan(self, paths: list[str]) -> _Plan:
        validation = await self.validate_paths(paths)
        system = set(validation.system_paths)
        # Repeats of one target are handled once, under the first spelling.
        seen: set[str] = set()
        unique: list[str] = []
        for path in paths:
            target = _resolve(path)
            if path in system or target in seen:
                continue
            seen.add(target)
            unique.append(path)
        return _Plan(validation=validation, paths=unique)

    # -- deletion ----------------------------------------------------------

    async def safe_delete(
        self,
        paths: list[str],
        options: DeletionOptions | None = None,
        progress: ProgressCallback | None = None,
    ) -> DeletionResult:
        """Delete paths through the safest available mechanism.

        System paths are never touched. When validation finds any, the
        request fails unless skip_confirmation is set, in which case they
        are skipped and reported in failed_paths.

        Args:
            paths: Paths to delete.
            options: Deletion options. Defaults to DeletionOptions().
            progress: Called before each path is attempted; returning False
                stops further paths from being attempted.

        Returns:
            DeletionResult describing what happened to every path.
        """
        options = options or DeletionOptions()
        result = DeletionResult(method=self.select_method(options), dry_run=options.dry_run)

        if not paths:
            result.success = True
            return result

        plan = await self._plan(paths)
        system_paths = list(plan.validation.system_paths)

        if not plan.validation.is_valid and not options.skip_confirmation:
            result.failed_paths = system_paths
            result.errors.append("Validation failed: " + ", ".join(plan.validation.blockers))
            return result

        await self._size(plan)
        result.total_size = plan.total_size
        result.errors.extend(plan.errors)

        if options.dry_run:
            result.success = True
            result.processed_paths = list(plan.paths)
            result.failed_paths = system_paths
            return result

        if not plan.paths:
            result.failed_paths = list(paths)
            result.errors.append("No valid paths to process")
            return result

        outcome = await self._process(plan.paths, result.method, progress)

        if outcome.quarantined:
            result.method = DeletionMethod.QUARANTINE
        result.processed_paths = outcome.processed
        result.trashed_paths = outcome.trashed
        result.quarantined_paths = outcome.quarantined
        result.quarantine_ids = [entry.id for entry in outcome.entries]
        result.failed_paths = system_paths + outcome.failed
        result.errors.extend(outcome.errors)
        result.success = not outcome.failed

        logger.info(
            "Deleted %d of %d path(s) via %s",
            len(outcome.processed),
            len(plan.paths),
            result.method.value,
        )
        return result

    async def _process(
        self,
        paths: list[str],
        method: DeletionMethod,
        progress: ProgressCallback | None,
    ) -> _Outcome:
        outcome = _Outcome()
        by_target = {_resolve(path): path for path in paths}
        targets = list(by_target)

        if method is DeletionMethod.TRASH and self.trash_provider is not None:
            leftovers = await self._trash(self.trash_provider, targets, by_target, progress, outcome)
            # Paths already went through the progress callback once.
            await self._quarantine(leftovers, by_target, None, outcome)
        else:
            await self._quarantine(targets, by_target, progress, outcome)

        return outcome

    async def _trash(
        self,
        provider: TrashProvider,
        targets: list[str],
        by_target: dict[str, str],
        progress: ProgressCallback | None,
        outcome: _Outcome,
    ) -> list[str]:
        """Send targets to the trash, returning those that must fall back."""
        failed: list[str]
        reasons: dict[str, str] = {}
        try:
            report = await provider.trash(targets, progress)
        except (TrashError, OSError, UnicodeError) as e:
            logger.warning("Trash operation failed, falling back to quarantine: %s", e)
            outcome.errors.append(f"Trash operation failed: {e}")
            failed = list(targets)
        else:
            for target in report.trashed:
                outcome.processed.append(by_target[target])
                outcome.trashed.append(by_target[target])
            outcome.cancel([by_target[t] for t in report.skipped])
            failed = list(report.failed)
            reasons = dict(zip(report.failed, report.errors, strict=False))

        leftovers: list[str] = []
        for target in failed:
            if await asyncio.to_thread(os.path.lexists, target):
                leftovers.append(target)
                continue
            outcome.failed.append(by_target[target])
            outcome.errors.append(reasons.get(target, f"Path no longer exists: {by_target[target]}"))

        if leftovers:
            logger.warning("Trash did not take %d path(s), quarantining them", len(leftovers))
        return leftovers

    async def _quarantine(
        self,
        targets: list[str],
        by_target: dict[str, str],
        progress: ProgressCallback | None,
        outcome: _Outcome,
    ) -> None:
        if not targets:
            return

        try:
            report = await self.quarantine.quarantine_batch(targets, progress)
        except QuarantineError as e:
            logger.error("Quarantine operation failed: %s", e)
            outcome.errors.append(f"Quarantine operation failed: {e}")
            outcome.failed.extend(by_target[t] for t in targets)
            return

        for target in report.quarantined:
            outcome.processed.append(by_target[target])
            outcome.quarantined.append(by_target[target])
        outcome.entries.extend(report.entries)
        outcome.failed.extend(by_target[t] for t in report.failed)
        outcome.errors.extend(report.errors)
        outcome.cancel([by_target[t] for t in report.skipped])

    # -- confirmation ------------------------------------------------------

    async def generate_confirmation_prompt(
        self,
        paths: list[str],
        options: DeletionOptions | None = None,
    ) -> ConfirmationPrompt:
        """Describe what a deletion request would do.

        Args:
            paths: Paths to delete.
            options: Deletion options, used to pick the reported method.

        Returns:
            ConfirmationPrompt covering the non-system subset of paths.
        """
        options = options or DeletionOptions()
        plan = await self._plan(paths)
        await self._size(plan)

        return build_prompt(
            plan.paths,
            plan.total_size,
            self.select_method(options),
            plan.validation.warnings,
            system_path_count=len(plan.validation.system_paths),
            size_warning_bytes=self.config.size_warning_bytes,
        )

    async def safe_delete_with_confirmation(
        self,
        paths: list[str],
        options: DeletionOptions | None = None,
        callback: ConfirmationCallback | None = None,
        session: ConfirmationSession | None = None,
        progress: ProgressCallback | None = None,
    ) -> DeletionResult:
        """Ask for confirmation, then delete.

        The callback is consulted only for interactive requests that are
        not already confirmed through options or the session. Answering
        with skip_future marks the session so later calls sharing it go
        straight to deletion.

        Args:
            paths: Paths to delete.
            options: Deletion options. Defaults to DeletionOptions().
            callback: Coroutine function that receives the prompt.
            session: Caller-owned confirmation state.
            progress: Forwarded to safe_delete.

        Returns:
            DeletionResult; a declined prompt yields a failed result with
            nothing modified.
        """
        options = options or DeletionOptions()
        already_confirmed = options.skip_confirmation or (session is not None and session.skip_confirmation)

        if options.interactive and callback is not None and not already_confirmed:
            prompt = await self.generate_confirmation_prompt(paths, options)

            if prompt.item_count == 0:
                return DeletionResult(
                    method=prompt.method,
                    failed_paths=list(paths),
                    dry_run=options.dry_run,
                    errors=["No valid items to delete"],
                )

            confirmation = await callback(prompt)
            if not confirmation.confirmed:
                logger.info("Deletion of %d path(s) declined", len(paths))
                return DeletionResult(
                    method=prompt.method,
                    failed_paths=list(paths),
                    total_size=prompt.total_size,
                    dry_run=options.dry_run,
                    errors=["Operation cancelled by user"],
                )

            if confirmation.skip_future and session is not None:
                session.skip_confirmation = True

        return await self.safe_delete(paths, options, progress)

    # -- quarantine and trash queries --------------------------------------

    async def restore(self, entry_id: str) -> bool:
        """Restore a quarantined entry to its original location."""
        return await self.quarantine.restore(entry_id)

    async def list_quarantine(self) -> list[QuarantineEntry]:
        """List quarantined entries, newest first."""
        return await self.quarantine.list_quarantine()

    async def get_last_operation(self) -> QuarantineEntry | None:
        """Get the most recently quarantined entry."""
        return await self.quarantine.get_last_operation()

    async def get_quarantine_size(self) -> int:
        """Total recorded size of the quarantine in bytes."""
        return await self.quarantine.get_total_size()

    async def cleanup_quarantine(self, retention_days: int | None = None) -> int:
        """Purge expired quarantine entries.

        Args:
            retention_days: Age limit in days. Defaults to the configured
                retention period.

        Returns:
            Number of entries purged.
        """
        days = retention_days if retention_days is not None else self.config.retention_days
        return await self.quarantine.cleanup(days)

    async def clear_quarantine(self) -> int:
        """Permanently delete everything in the quarantine."""
        return await self.quarantine.clear_all()

    async def get_trash_size(self) -> int:
        """Current OS trash size in bytes (0 when there is no provider)."""
        if self.trash_provider is None or not self.trash_provider.is_supported():
            return 0
        return await self.trash_provider.get_trash_size()
