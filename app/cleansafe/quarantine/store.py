"""Quarantine store: reversible deletion into a private directory.

Each quarantined object is moved to <root>/quarantine/<id>/<name>, keeping
its own name inside a per-entry directory, and is tracked in
<root>/quarantine-index.json. The index is loaded fully, mutated in memory,
and rewritten atomically on every structural change. Objects only stay in
the quarantine once the index that records them has been written.

Storage location: ~/.local/state/cleansafe/ (or the configured root)
"""

import asyncio
import json
import logging
import os
import shutil
import stat
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from tempfile import NamedTemporaryFile

from pydantic import ValidationError

from cleansafe.core.errors import CleansafeError
from cleansafe.core.paths import get_quarantine_dir, get_quarantine_index_path, get_state_dir
from cleansafe.quarantine.models import INDEX_VERSION, EntryMetadata, QuarantineEntry, QuarantineIndex
from cleansafe.safety.models import PathKind, ProgressCallback
from cleansafe.safety.sizing import path_size

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30

_CURRENT_MAJOR = int(INDEX_VERSION.split(".", 1)[0])


class QuarantineError(CleansafeError):
    """Raised when the quarantine directory or index cannot be written."""


@dataclass(slots=True)
class QuarantineReport:
    """Per-path outcome of a quarantine batch.

    Attributes:
        entries: Entries created, in input order.
        quarantined: Input paths that were moved into the quarantine.
        failed: Input paths that could not be moved.
        skipped: Input paths never attempted because the caller cancelled.
        errors: One message per failed path.
    """

    entries: list[QuarantineEntry] = field(default_factory=list)
    quarantined: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _capture_metadata(path: str) -> EntryMetadata:
    st = os.lstat(path)
    return EntryMetadata(
        kind=PathKind.of(path),
        permissions=format(stat.S_IMODE(st.st_mode), "o"),
        last_modified=datetime.fromtimestamp(st.st_mtime, UTC),
    )


def _remove_object(path: str) -> None:
    """Permanently delete a file, link, or directory tree.

    A path that is already gone counts as removed.
    """
    try:
        st = os.lstat(path)
    except FileNotFoundError:
        return
    if stat.S_ISDIR(st.st_mode):
        shutil.rmtree(path)
    else:
        os.remove(path)


def _remove_slot(slot: str) -> None:
    """Remove an emptied per-entry directory, logging if it stays behind."""
    try:
        os.rmdir(slot)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning("Leaving quarantine directory %s in place: %s", slot, e)


def restore_target(original_path: str) -> str:
    """Pick the restore destination for an entry.

    Returns the original path when it is free, otherwise
    <stem>_restored_<N><suffix> in the same directory with the smallest
    free N starting at 1.
    """
    if not os.path.lexists(original_path):
        return original_path

    parent, name = os.path.split(original_path)
    stem, suffix = os.path.splitext(name)
    counter = 1
    while True:
        candidate = os.path.join(parent, f"{stem}_restored_{counter}{suffix}")
        if not os.path.lexists(candidate):
            return candidate
        counter += 1


class QuarantineStore:
    """Manages the quarantine directory and its index.

    Attributes:
        root: Quarantine root holding the objects and the index file.
    """

    def __init__(self, root: Path | None = None) -> None:
        """Initialize QuarantineStore.

        Args:
            root: Optional override for the quarantine root.
                  Default: ~/.local/state/cleansafe
        """
        self.root = root if root is not None else get_state_dir()

    @property
    def quarantine_dir(self) -> Path:
        """Directory that holds the quarantined objects."""
        return get_quarantine_dir(self.root)

    @property
    def index_path(self) -> Path:
        """Path to quarantine-index.json."""
        return get_quarantine_index_path(self.root)

    # -- persistence -------------------------------------------------------

    def _load_index(self) -> QuarantineIndex:
        """Read the index, degrading to an empty one if it is unusable."""
        if not self.index_path.exists():
            return QuarantineIndex()

        try:
            raw = self.index_path.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Unreadable quarantine index %s, starting empty: %s", self.index_path, e)
            return QuarantineIndex()

        try:
            index = QuarantineIndex.model_validate(data)
        except ValidationError as e:
            logger.warning("Invalid quarantine index %s, starting empty: %s", self.index_path, e)
            return QuarantineIndex()

        if index.major_version > _CURRENT_MAJOR:
            logger.warning(
                "Quarantine index version %s is newer than %s, reading known fields only",
                index.version,
                INDEX_VERSION,
            )
        return index

    def _save_index(self, index: QuarantineIndex) -> None:
        """Write the index atomically via a temporary file and os.replace().

        Raises:
            QuarantineError: If the index cannot be written.
        """
        index.version = INDEX_VERSION
        index.last_updated = datetime.now(UTC)

        tmp_path: Path | None = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.root,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(index.model_dump_json(indent=2))
            os.replace(str(tmp_path), str(self.index_path))
        except (OSError, ValueError) as e:
            # ValueError covers serialization failures.
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise QuarantineError(f"Failed to write quarantine index: {e}") from e

    async def _load(self) -> QuarantineIndex:
        return await asyncio.to_thread(self._load_index)

    async def _save(self, index: QuarantineIndex) -> None:
        await asyncio.to_thread(self._save_index, index)

    # -- mutations ---------------------------------------------------------

    async def quarantine(
        self,
        paths: list[str],
        progress: ProgressCallback | None = None,
    ) -> list[QuarantineEntry]:
        """Move paths into the quarantine.

        Per-path failures are logged and skipped.

        Args:
            paths: Paths to quarantine.
            progress: Called before each path; returning False stops
                further paths from being attempted.

        Returns:
            Entries created, in input order.

        Raises:
            QuarantineError: If the quarantine directory or index cannot be written.
        """
        report = await self.quarantine_batch(paths, progress)
        return report.entries

    async def quarantine_batch(
        self,
        paths: list[str],
        progress: ProgressCallback | None = None,
    ) -> QuarantineReport:
        """Move paths into the quarantine, reporting every path's outcome.

        Args:
            paths: Paths to quarantine.
            progress: Called before each path; returning False stops
                further paths from being attempted.

        Returns:
            QuarantineReport with created entries and per-path failures.

        Raises:
            QuarantineError: If the quarantine directory or index cannot be written.
                Objects moved by the batch are first returned to their original
                locations.
        """
        report = QuarantineReport()
        if not paths:
            return report

        try:
            await asyncio.to_thread(self.quarantine_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise QuarantineError(f"Cannot create quarantine directory {self.quarantine_dir}: {e}") from e

        index = await self._load()

        for position, path in enumerate(paths):
            if progress is not None and progress(path, position, len(paths)) is False:
                report.skipped.extend(paths[position:])
                logger.info("Quarantine batch cancelled, %d path(s) skipped", len(paths) - position)
                break

            try:
                entry = await self._quarantine_one(path)
            except (OSError, UnicodeError) as e:
                logger.warning("Failed to quarantine %s: %s", path, e)
                report.failed.append(path)
                report.errors.append(f"Failed to quarantine {path}: {e}")
                continue

            index.entries[entry.id] = entry
            report.entries.append(entry)
            report.quarantined.append(path)
            logger.info("Quarantined %s as %s", path, entry.id)

        if report.entries:
            try:
                await self._save(index)
            except QuarantineError:
                await self._roll_back(report.entries)
                raise

        return report

    async def _quarantine_one(self, path: str) -> QuarantineEntry:
        original = os.path.abspath(path)
        metadata = await asyncio.to_thread(_capture_metadata, original)

        entry_id = uuid.uuid4().hex
        slot = self.quarantine_dir / entry_id
        target = slot / os.path.basename(original)
        await asyncio.to_thread(slot.mkdir)
        try:
            await asyncio.to_thread(shutil.move, original, str(target))
        except OSError:
            await asyncio.to_thread(shutil.rmtree, slot, ignore_errors=True)
            raise

        try:
            size = await path_size(str(target))
        except OSError as e:
            logger.debug("Cannot size %s: %s", target, e)
            size = 0

        return QuarantineEntry(
            id=entry_id,
            original_path=original,
            quarantine_path=str(target),
            moved_at=datetime.now(UTC),
            size=size,
            metadata=metadata,
        )

    def _slot(self, entry: QuarantineEntry) -> str | None:
        """Per-entry directory holding the object, None for a bare object."""
        slot = os.path.dirname(entry.quarantine_path)
        if os.path.basename(slot) != entry.id:
            return None
        return slot

    def _discard(self, entry: QuarantineEntry) -> None:
        _remove_object(entry.quarantine_path)
        slot = self._slot(entry)
        if slot is not None:
            _remove_slot(slot)

    def _put_back(self, entry: QuarantineEntry) -> str:
        """Move an entry's object out of the quarantine; return where it went."""
        os.makedirs(os.path.dirname(entry.original_path), exist_ok=True)
        target = restore_target(entry.original_path)
        shutil.move(entry.quarantine_path, target)
        slot = self._slot(entry)
        if slot is not None:
            _remove_slot(slot)
        return target

    def _requarantine(self, entry: QuarantineEntry, current: str) -> None:
        os.makedirs(os.path.dirname(entry.quarantine_path), exist_ok=True)
        shutil.move(current, entry.quarantine_path)

    async def _roll_back(self, entries: list[QuarantineEntry]) -> None:
        """Return the objects of unrecorded entries to where they came from."""
        for entry in entries:
            try:
                target = await asyncio.to_thread(self._put_back, entry)
            except (OSError, UnicodeError) as e:
                logger.error(
                    "Could not return %s, it remains at %s: %s",
                    entry.original_path,
                    entry.quarantine_path,
                    e,
                )
                continue
            logger.info("Returned %s to %s", entry.id, target)

    async def restore(self, entry_id: str) -> bool:
        """Move a quarantined object back to its original location.

        If the original location is occupied, the object is restored next
        to it as <stem>_restored_<N><suffix>.

        Args:
            entry_id: Id of the entry to restore.

        Returns:
            True if the object was restored, False if the entry is unknown,
            its object is missing, the move failed, or the index could not
            be written. On False the entry still describes its object.
        """
        index = await self._load()
        entry = index.entries.get(entry_id)
        if entry is None:
            logger.warning("No quarantine entry with id %s", entry_id)
            return False

        if not await asyncio.to_thread(os.path.lexists, entry.quarantine_path):
            logger.warning("Quarantined object for %s is missing: %s", entry_id, entry.quarantine_path)
            return False

        try:
            target = await asyncio.to_thread(self._put_back, entry)
        except (OSError, UnicodeError) as e:
            logger.error("Failed to restore %s: %s", entry_id, e)
            return False

        del index.entries[entry_id]
        try:
            await self._save(index)
        except QuarantineError as e:
            logger.error("Failed to restore %s: %s", entry_id, e)
            try:
                await asyncio.to_thread(self._requarantine, entry, target)
            except OSError as undo_error:
                logger.error(
                    "Entry %s is stale, its object stays at %s: %s", entry_id, target, undo_error
                )
            return False

        logger.info("Restored %s to %s", entry_id, target)
        return True

    async def cleanup(self, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Permanently delete entries older than the retention period.

        Args:
            retention_days: Entries quarantined more than this many days ago
                are deleted.

        Returns:
            Number of entries deleted. Entries whose deletion fails stay indexed.
        """
        index = await self._load()
        cutoff = datetime.now(UTC) - timedelta(days=retention_days)

        removed: list[str] = []
        for entry_id, entry in index.entries.items():
            if entry.moved_at >= cutoff:
                continue
            try:
                await asyncio.to_thread(self._discard, entry)
            except OSError as e:
                logger.warning("Failed to clean up quarantine entry %s: %s", entry_id, e)
                continue
            removed.append(entry_id)

        for entry_id in removed:
            del index.entries[entry_id]

        if removed:
            await self._save(index)
            logger.info("Cleaned up %d expired quarantine entries", len(removed))

        return len(removed)

    async def clear_all(self) -> int:
        """Permanently delete every quarantined object and reset the index.

        Returns:
            Number of objects deleted.
        """
        index = await self._load()

        cleared = 0
        for entry_id, entry in index.entries.items():
            try:
                await asyncio.to_thread(self._discard, entry)
            except OSError as e:
                logger.warning("Failed to clear quarantine entry %s: %s", entry_id, e)
                continue
            cleared += 1

        await self._save(QuarantineIndex())
        logger.info("Cleared %d quarantined objects", cleared)
        return cleared

    async def reconcile(self) -> list[str]:
        """Drop index entries whose quarantined object no longer exists.

        Returns:
            Ids of the dropped entries.
        """
        index = await self._load()

        dangling = [
            entry_id
            for entry_id, entry in index.entries.items()
            if not await asyncio.to_thread(os.path.lexists, entry.quarantine_path)
        ]
        for entry_id in dangling:
            del index.entries[entry_id]

        if dangling:
            await self._save(index)
            logger.warning("Dropped %d dangling quarantine entries", len(dangling))

        return dangling

    # -- queries -----------------------------------------------------------

    async def list_quarantine(self) -> list[QuarantineEntry]:
        """List all quarantined entries, newest first."""
        index = await self._load()
        return sorted(index.entries.values(), key=lambda e: e.moved_at, reverse=True)

    async def get_entry(self, entry_id: str) -> QuarantineEntry | None:
        """Get a single entry by id, or None if unknown."""
        index = await self._load()
        return index.entries.get(entry_id)

    async def get_total_size(self) -> int:
        """Sum of the recorded sizes of all entries, in bytes."""
        index = await self._load()
        return sum(entry.size for entry in index.entries.values())

    async def get_last_operation(self) -> QuarantineEntry | None:
        """Get the most recently quarantined entry, or None if empty."""
        entries = await self.list_quarantine()
        return entries[0] if entries else None
