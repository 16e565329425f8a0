"""Rendering of confirmation prompts.

Turns a planned deletion (paths, total size, method, warnings) into the
human-readable ConfirmationPrompt handed to a confirmation callback.
"""

import os

from cleansafe.core.config import GIB
from cleansafe.safety.models import ConfirmationPrompt, DeletionMethod
from cleansafe.utils.units import format_bytes

# Batches longer than this are truncated in the details list.
MAX_DETAIL_LINES = 10
TRUNCATED_DETAIL_LINES = 8

METHOD_SUFFIXES: dict[DeletionMethod, str] = {
    DeletionMethod.TRASH: " Items will be moved to trash and can be restored from there.",
    DeletionMethod.QUARANTINE: " Items will be quarantined and can be restored using cleansafe.",
}


def headline(paths: list[str], total_size: int, method: DeletionMethod) -> str:
    """Build the prompt question for a batch."""
    if not paths:
        return "No valid items to delete."

    if len(paths) == 1:
        name = os.path.basename(paths[0].rstrip("/\\")) or paths[0]
        question = f'Delete "{name}" ({format_bytes(total_size)})?'
    else:
        question = f"Delete {len(paths)} items ({format_bytes(total_size)} total)?"

    return question + METHOD_SUFFIXES[method]


def detail_lines(paths: list[str]) -> list[str]:
    """List the paths as bullets, truncating long batches."""
    if len(paths) <= MAX_DETAIL_LINES:
        return [f"• {path}" for path in paths]

    shown = [f"• {path}" for path in paths[:TRUNCATED_DETAIL_LINES]]
    shown.append(f"... and {len(paths) - TRUNCATED_DETAIL_LINES} more items")
    return shown


def build_prompt(
    paths: list[str],
    total_size: int,
    method: DeletionMethod,
    validation_warnings: list[str],
    system_path_count: int = 0,
    size_warning_bytes: int = GIB,
) -> ConfirmationPrompt:
    """Assemble a ConfirmationPrompt.

    Args:
        paths: Paths that would be deleted (system paths already removed).
        total_size: Total size of those paths in bytes.
        method: Mechanism that will be attempted.
        validation_warnings: Warnings produced by the validator.
        system_path_count: Number of system paths filtered out of the batch.
        size_warning_bytes: Total size above which a size warning is added.

    Returns:
        The rendered prompt.
    """
    warnings = list(validation_warnings)
    if system_path_count:
        warnings.append(f"{system_path_count} system paths will be skipped for safety")
    if total_size > size_warning_bytes:
        threshold = format_bytes(size_warning_bytes).replace(" ", "")
        warnings.append(f"This operation will free more than {threshold} of space")

    return ConfirmationPrompt(
        message=headline(paths, total_size, method),
        details=detail_lines(paths) if paths else [],
        warnings=warnings,
        total_size=total_size,
        item_count=len(paths),
        method=method,
    )
