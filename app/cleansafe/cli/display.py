"""Shared Rich display functions for validation and deletion results.

Provides reusable table builders and summary printers used by the
check, delete and quarantine commands.
"""

from rich.table import Table

from cleansafe.quarantine import QuarantineEntry
from cleansafe.safety.models import ConfirmationPrompt, DeletionMethod, DeletionResult, ValidationResult
from cleansafe.utils.formatting import console, print_success, print_warning
from cleansafe.utils.units import format_bytes


def create_validation_table(paths: list[str], validation: ValidationResult) -> Table:
    """Create a Rich table showing each path's validation status.

    Args:
        paths: Paths that were validated, in input order.
        validation: Result of validating them.

    Returns:
        Rich Table with one row per path.
    """
    table = Table(
        title="Path Validation",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=9, justify="center")
    table.add_column("Path", no_wrap=True)
    table.add_column("Notes")

    for path in paths:
        notes: list[str] = []
        if path in validation.system_paths:
            status = "[blocked]BLOCKED[/blocked]"
            notes.append("system path")
        elif path in validation.missing_paths:
            status = "[muted]MISSING[/muted]"
        else:
            status = "[success]OK[/success]"
        if path in validation.critical_paths:
            notes.append("critical location")
        if path in validation.large_paths:
            notes.append("large directory")
        if path in validation.active_paths:
            notes.append("may be in use")
        if notes and status == "[success]OK[/success]":
            status = "[warning]WARN[/warning]"

        table.add_row(status, path, f"[muted]{', '.join(notes)}[/muted]")

    return table


def print_prompt(prompt: ConfirmationPrompt) -> None:
    """Print a confirmation prompt's details and warnings."""
    for line in prompt.details:
        console.print(f"  {line}")
    for warning in prompt.warnings:
        print_warning(warning)


def _method_label(method: DeletionMethod) -> str:
    return f"[{method.value}]{method.value}[/{method.value}]"


def create_deletion_table(result: DeletionResult) -> Table:
    """Create a Rich table showing what happened to each path.

    Args:
        result: Deletion result to display.

    Returns:
        Rich Table with one row per processed or failed path.
    """
    title = "Deletion Results (Dry Run)" if result.dry_run else "Deletion Results"
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Method", width=11)
    table.add_column("Path", no_wrap=True)

    for path in result.processed_paths:
        if result.dry_run:
            method = _method_label(result.method)
        elif path in result.quarantined_paths:
            method = _method_label(DeletionMethod.QUARANTINE)
        else:
            method = _method_label(DeletionMethod.TRASH)
        table.add_row("[success]OK[/success]", method, path)

    for path in result.failed_paths:
        table.add_row("[error]FAIL[/error]", "", path)

    return table


def print_deletion_summary(result: DeletionResult) -> None:
    """Print a one-line summary and any errors of a deletion result."""
    size = format_bytes(result.total_size)

    for error in result.errors:
        print_warning(error)

    if result.dry_run:
        console.print(f"\n[info]Dry-run: {len(result.processed_paths)} path(s) ({size}) would be deleted.[/info]")
    elif result.success:
        print_success(f"All {len(result.processed_paths)} path(s) processed ({size}).")
    else:
        console.print(
            f"\n[success]{len(result.processed_paths)} succeeded[/success], "
            f"[error]{len(result.failed_paths)} failed[/error]"
        )

    if result.quarantine_ids and not result.dry_run:
        console.print("[muted]Run 'cleansafe quarantine undo' to restore the most recent item.[/muted]")


def create_quarantine_table(entries: list[QuarantineEntry]) -> Table:
    """Create a Rich table listing quarantined entries.

    Args:
        entries: Entries to list, newest first.

    Returns:
        Rich Table with id, date, size and original path.
    """
    table = Table(
        title="Quarantine",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("ID", no_wrap=True)
    table.add_column("Quarantined", width=16)
    table.add_column("Kind", width=9)
    table.add_column("Size", justify="right", width=10)
    table.add_column("Original Path")

    for entry in entries:
        table.add_row(
            entry.id,
            entry.moved_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            entry.metadata.kind.value,
            format_bytes(entry.size),
            entry.original_path,
        )

    return table
