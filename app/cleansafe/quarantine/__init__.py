"""Quarantine store for reversible deletions.

This module exports the persisted quarantine models and the store that
moves objects in and out of the quarantine directory.
"""

from cleansafe.quarantine.models import INDEX_VERSION, EntryMetadata, QuarantineEntry, QuarantineIndex
from cleansafe.quarantine.store import QuarantineError, QuarantineReport, QuarantineStore

__all__ = [
    "INDEX_VERSION",
    "EntryMetadata",
    "QuarantineEntry",
    "QuarantineError",
    "QuarantineIndex",
    "QuarantineReport",
    "QuarantineStore",
]
