"""Unit tests for quarantine index models."""

import os
from datetime import UTC, datetime

import pytest
from cleansafe.quarantine.models import EntryMetadata, QuarantineEntry, QuarantineIndex, decode_path, encode_path
from cleansafe.safety.models import PathKind
from pydantic import ValidationError


def _entry(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "id": "abc",
        "original_path": "/home/a/notes.txt",
        "quarantine_path": "/q/abc/notes.txt",
        "moved_at": "2024-01-02T03:04:05",
        "size": 10,
        "metadata": {"kind": "file"},
    }
    data.update(overrides)
    return data


class TestQuarantineEntry:
    """Tests for QuarantineEntry."""

    def test_naive_timestamp_becomes_utc(self) -> None:
        """Timestamps without a zone are read as UTC."""
        entry = QuarantineEntry.model_validate(_entry())

        assert entry.moved_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_name(self) -> None:
        """name is the original base name."""
        assert QuarantineEntry.model_validate(_entry()).name == "notes.txt"

    def test_unknown_fields_ignored(self) -> None:
        """Fields from newer writers are dropped."""
        entry = QuarantineEntry.model_validate(_entry(owner="root", metadata={"kind": "directory", "acl": []}))

        assert entry.metadata.kind is PathKind.DIRECTORY
        assert not hasattr(entry, "owner")

    @pytest.mark.parametrize("bad", [{"id": ""}, {"size": -1}, {"metadata": {"kind": "socket"}}])
    def test_rejects_invalid(self, bad: dict[str, object]) -> None:
        """Empty ids, negative sizes and unknown kinds are rejected."""
        with pytest.raises(ValidationError):
            QuarantineEntry.model_validate(_entry(**bad))


class TestQuarantineIndex:
    """Tests for QuarantineIndex."""

    def test_defaults(self) -> None:
        """A fresh index is empty and versioned."""
        index = QuarantineIndex()

        assert index.version == "1.0.0"
        assert index.entries == {}
        assert index.last_updated.tzinfo is not None

    @pytest.mark.parametrize(("version", "major"), [("1.0.0", 1), ("2.3", 2), ("garbage", 0)])
    def test_major_version(self, version: str, major: int) -> None:
        """The major version is parsed leniently."""
        assert QuarantineIndex(version=version).major_version == major

    def test_json_round_trip_keeps_entries(self) -> None:
        """An index survives serialization."""
        index = QuarantineIndex(entries={"abc": QuarantineEntry.model_validate(_entry())})

        loaded = QuarantineIndex.model_validate_json(index.model_dump_json())

        assert loaded.entries["abc"].original_path == "/home/a/notes.txt"


def test_metadata_optional_fields() -> None:
    """Permissions and mtime are optional."""
    metadata = EntryMetadata(kind=PathKind.SYMLINK)

    assert metadata.permissions is None
    assert metadata.last_modified is None


@pytest.mark.skipif(os.name != "posix", reason="byte paths are POSIX only")
class TestStoredPath:
    """Tests for the JSON form of stored paths."""

    undecodable = os.fsdecode(b"/home/a/bad\xff.log")

    def test_utf8_path_unchanged(self) -> None:
        """Ordinary paths are stored as they are."""
        assert encode_path("/home/a/café.txt") == "/home/a/café.txt"
        assert decode_path("/home/a/café.txt") == "/home/a/café.txt"

    def test_undecodable_path_percent_encoded(self) -> None:
        """Bytes that are not UTF-8 are stored percent-encoded and read back."""
        encoded = encode_path(self.undecodable)

        assert encoded == "fsencoded:/home/a/bad%FF.log"
        assert decode_path(encoded) == self.undecodable

    def test_index_json_keeps_undecodable_paths(self) -> None:
        """An entry with an undecodable name survives an index round trip."""
        entry = QuarantineEntry.model_validate(
            _entry(original_path=self.undecodable, quarantine_path=self.undecodable)
        )
        index = QuarantineIndex(entries={"abc": entry})

        loaded = QuarantineIndex.model_validate_json(index.model_dump_json())

        assert loaded.entries["abc"].original_path == self.undecodable
        assert loaded.entries["abc"].name == os.fsdecode(b"bad\xff.log")
        assert index.entries["abc"].original_path == self.undecodable
