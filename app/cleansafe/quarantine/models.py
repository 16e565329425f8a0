"""Persisted models for the quarantine index.

This module defines the Pydantic models stored in quarantine-index.json:
one QuarantineEntry per quarantined object plus the index envelope.
"""

import os
from datetime import UTC, datetime
from typing import Annotated
from urllib.parse import quote, unquote_to_bytes

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, field_validator

from cleansafe.safety.models import PathKind

# Current index schema version. Records with a newer major version are
# still read, ignoring unknown fields.
INDEX_VERSION = "1.0.0"

# Prefix of paths stored as percent-encoded OS bytes. Absolute paths never
# start with it.
FSENCODED_PREFIX = "fsencoded:"


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def encode_path(path: str) -> str:
    """Text form of a path that survives JSON.

    Paths that are not valid UTF-8 (undecodable bytes held as surrogates)
    are stored as FSENCODED_PREFIX plus their percent-encoded OS bytes.
    """
    try:
        path.encode("utf-8")
    except UnicodeEncodeError:
        return FSENCODED_PREFIX + quote(os.fsencode(path))
    return path


def decode_path(value: object) -> object:
    """Inverse of encode_path; other values pass through unchanged."""
    if isinstance(value, str) and value.startswith(FSENCODED_PREFIX):
        return os.fsdecode(unquote_to_bytes(value[len(FSENCODED_PREFIX) :]))
    return value


StoredPath = Annotated[
    str,
    BeforeValidator(decode_path),
    PlainSerializer(encode_path, return_type=str, when_used="json"),
]


class EntryMetadata(BaseModel):
    """Filesystem metadata captured before an object is quarantined.

    Attributes:
        kind: Entry kind at quarantine time.
        permissions: Permission bits as an octal string (e.g. "644").
        last_modified: Modification time of the original object.
    """

    model_config = ConfigDict(extra="ignore")

    kind: Annotated[PathKind, Field(description="Entry kind")]
    permissions: Annotated[str | None, Field(description="Permission bits (octal)")] = None
    last_modified: Annotated[datetime | None, Field(description="Original mtime")] = None

    @field_validator("last_modified")
    @classmethod
    def _last_modified_aware(cls, value: datetime | None) -> datetime | None:
        return _ensure_aware(value) if value is not None else None


class QuarantineEntry(BaseModel):
    """A single quarantined object.

    Attributes:
        id: Unique identifier (uuid4 hex).
        original_path: Absolute path the object was moved from.
        quarantine_path: Current location inside the quarantine directory.
        moved_at: When the object was quarantined.
        size: Size in bytes measured after the move.
        metadata: Metadata captured before the move.
    """

    model_config = ConfigDict(extra="ignore")

    id: Annotated[str, Field(min_length=1, description="Entry identifier")]
    original_path: Annotated[StoredPath, Field(description="Original absolute path")]
    quarantine_path: Annotated[StoredPath, Field(description="Location inside the quarantine")]
    moved_at: Annotated[datetime, Field(description="Quarantine timestamp")]
    size: Annotated[int, Field(ge=0, description="Size in bytes")] = 0
    metadata: Annotated[EntryMetadata, Field(description="Captured filesystem metadata")]

    @field_validator("moved_at")
    @classmethod
    def _moved_at_aware(cls, value: datetime) -> datetime:
        return _ensure_aware(value)

    @property
    def name(self) -> str:
        """Base name of the original object."""
        return os.path.basename(self.original_path)


class QuarantineIndex(BaseModel):
    """The quarantine index file.

    Attributes:
        version: Index schema version.
        entries: Entries keyed by id.
        last_updated: When the index was last written.
    """

    model_config = ConfigDict(extra="ignore")

    version: Annotated[str, Field(description="Index schema version")] = INDEX_VERSION
    entries: Annotated[
        dict[str, QuarantineEntry],
        Field(default_factory=dict, description="Entries keyed by id"),
    ]
    last_updated: Annotated[
        datetime,
        Field(default_factory=lambda: datetime.now(UTC), description="Last write time"),
    ]

    @field_validator("last_updated")
    @classmethod
    def _last_updated_aware(cls, value: datetime) -> datetime:
        return _ensure_aware(value)

    @property
    def major_version(self) -> int:
        """Major component of the version string (0 if unparsable)."""
        head = self.version.split(".", 1)[0]
        return int(head) if head.isdigit() else 0
