"""Unit tests for cli/display.py.

Tests for shared Rich display functions used by the check, delete and
quarantine commands.
"""

import io
from datetime import UTC, datetime

import pytest
from cleansafe.cli.display import (
    create_deletion_table,
    create_quarantine_table,
    create_validation_table,
    print_deletion_summary,
    print_prompt,
)
from cleansafe.core.theme import get_theme
from cleansafe.quarantine import EntryMetadata, QuarantineEntry
from cleansafe.safety.models import (
    ConfirmationPrompt,
    DeletionMethod,
    DeletionResult,
    PathKind,
    ValidationResult,
)
from rich.console import Console

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mixed_result() -> DeletionResult:
    """A result with a trashed, a quarantined and a failed path."""
    return DeletionResult(
        method=DeletionMethod.QUARANTINE,
        success=False,
        processed_paths=["/home/a/old.iso", "/home/a/cache"],
        failed_paths=["/usr/bin"],
        total_size=2048,
        trashed_paths=["/home/a/old.iso"],
        quarantined_paths=["/home/a/cache"],
        quarantine_ids=["abc"],
        errors=["Validation failed: System path detected: /usr/bin"],
    )


def _render(renderable: object) -> str:
    buf = io.StringIO()
    Console(theme=get_theme(), file=buf, color_system=None, width=200).print(renderable)
    return buf.getvalue()


def _capture_console_output(func: object, *args: object, **kwargs: object) -> str:
    """Capture Rich console output by temporarily replacing the consoles.

    Patches the module-level consoles used by display functions and
    captures output to a StringIO buffer.
    """
    import cleansafe.cli.display as display_mod
    import cleansafe.utils.formatting as fmt_mod

    buf = io.StringIO()
    test_console = Console(theme=get_theme(), file=buf, color_system=None, width=200)

    originals = (display_mod.console, fmt_mod.console, fmt_mod.err_console)
    display_mod.console = test_console
    fmt_mod.console = test_console
    fmt_mod.err_console = test_console
    try:
        func(*args, **kwargs)  # type: ignore[operator]
    finally:
        display_mod.console, fmt_mod.console, fmt_mod.err_console = originals

    return buf.getvalue()


# ===========================================================================
# create_validation_table
# ===========================================================================


class TestCreateValidationTable:
    """Tests for create_validation_table."""

    def test_columns(self) -> None:
        """Table has Status, Path and Notes columns."""
        table = create_validation_table([], ValidationResult())
        assert [col.header for col in table.columns] == ["Status", "Path", "Notes"]

    def test_statuses(self) -> None:
        """Blocked, missing, warned and clean paths are labelled."""
        validation = ValidationResult(
            is_valid=False,
            system_paths=["/etc"],
            missing_paths=["/home/a/gone"],
            large_paths=["/home/a/node_modules"],
        )
        paths = ["/etc", "/home/a/gone", "/home/a/node_modules", "/home/a/ok"]

        output = _render(create_validation_table(paths, validation))

        assert "BLOCKED" in output
        assert "system path" in output
        assert "MISSING" in output
        assert "WARN" in output
        assert "large directory" in output
        assert "OK" in output


# ===========================================================================
# create_deletion_table / print_deletion_summary
# ===========================================================================


class TestDeletionDisplay:
    """Tests for deletion result display."""

    def test_rows_show_method_per_path(self, mixed_result: DeletionResult) -> None:
        """Each processed path shows where it went; failures are listed."""
        table = create_deletion_table(mixed_result)
        assert table.row_count == 3

        output = _render(table)
        assert "trash" in output
        assert "quarantine" in output
        assert "FAIL" in output

    def test_dry_run_title(self) -> None:
        """Dry runs are titled as such."""
        table = create_deletion_table(DeletionResult(method=DeletionMethod.TRASH, dry_run=True))
        assert table.title == "Deletion Results (Dry Run)"

    def test_partial_summary(self, mixed_result: DeletionResult) -> None:
        """A partial result prints counts, errors and the undo hint."""
        output = _capture_console_output(print_deletion_summary, mixed_result)

        assert "2 succeeded" in output
        assert "1 failed" in output
        assert "Validation failed" in output
        assert "cleansafe quarantine undo" in output

    def test_success_summary(self) -> None:
        """A full success prints the processed count and size."""
        result = DeletionResult(
            method=DeletionMethod.TRASH,
            success=True,
            processed_paths=["/a"],
            total_size=1536,
            trashed_paths=["/a"],
        )

        output = _capture_console_output(print_deletion_summary, result)

        assert "All 1 path(s) processed (1.5 KB)." in output
        assert "undo" not in output

    def test_dry_run_summary(self) -> None:
        """A dry run says what would be deleted."""
        result = DeletionResult(method=DeletionMethod.TRASH, success=True, dry_run=True, processed_paths=["/a"])

        output = _capture_console_output(print_deletion_summary, result)

        assert "Dry-run: 1 path(s) (0 B) would be deleted." in output


# ===========================================================================
# print_prompt / create_quarantine_table
# ===========================================================================


def test_print_prompt_shows_details_and_warnings() -> None:
    """Details and warnings are printed."""
    prompt = ConfirmationPrompt(
        message="Delete 2 items (1 KB total)?",
        details=["• /a", "• /b"],
        warnings=["1 system paths will be skipped for safety"],
        total_size=1024,
        item_count=2,
        method=DeletionMethod.TRASH,
    )

    output = _capture_console_output(print_prompt, prompt)

    assert "• /a" in output
    assert "• /b" in output
    assert "1 system paths will be skipped for safety" in output


def test_create_quarantine_table() -> None:
    """One row per entry with kind and size."""
    entry = QuarantineEntry(
        id="deadbeef",
        original_path="/home/a/notes.txt",
        quarantine_path="/q/deadbeef_notes.txt",
        moved_at=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
        size=2048,
        metadata=EntryMetadata(kind=PathKind.FILE),
    )

    output = _render(create_quarantine_table([entry]))

    assert "deadbeef" in output
    assert "2 KB" in output
    assert "file" in output
    assert "/home/a/notes.txt" in output
