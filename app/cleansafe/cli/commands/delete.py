"""Delete command for safe, reversible deletion.

This module provides the `cleansafe delete` command. Paths are validated,
summarized in a confirmation prompt, and moved to the OS trash, falling
back to the cleansafe quarantine.
"""

import asyncio
from typing import Annotated

import typer

from cleansafe.cli.display import create_deletion_table, print_deletion_summary, print_prompt
from cleansafe.cli.runtime import build_manager
from cleansafe.safety.manager import SafetyManager
from cleansafe.safety.models import (
    ConfirmationPrompt,
    ConfirmationResult,
    DeletionOptions,
    DeletionResult,
    ProgressCallback,
)
from cleansafe.utils.formatting import console, print_info

CANCELLED = "Operation cancelled by user"


async def confirm_with_user(prompt: ConfirmationPrompt) -> ConfirmationResult:
    """Show a confirmation prompt in the terminal and ask the user."""
    console.print(f"\n[bold]{prompt.message}[/bold]")
    print_prompt(prompt)
    confirmed = typer.confirm("\nProceed?", default=False)
    return ConfirmationResult(confirmed=confirmed)


def _progress_printer(quiet: bool) -> ProgressCallback:
    def progress(path: str, index: int, total: int) -> bool:
        if not quiet:
            console.print(f"[muted][{index + 1}/{total}] {path}[/muted]")
        return True

    return progress


async def _run(
    manager: SafetyManager,
    paths: list[str],
    options: DeletionOptions,
    quiet: bool,
) -> DeletionResult | None:
    # skip_confirmation also bypasses the callback, so ask here first.
    if options.interactive and options.skip_confirmation:
        prompt = await manager.generate_confirmation_prompt(paths, options)
        if not (await confirm_with_user(prompt)).confirmed:
            return None

    return await manager.safe_delete_with_confirmation(
        paths,
        options,
        callback=confirm_with_user,
        progress=_progress_printer(quiet),
    )


def delete(
    ctx: typer.Context,
    paths: Annotated[
        list[str],
        typer.Argument(help="Paths to delete."),
    ],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show what would be deleted."),
    ] = False,
    no_trash: Annotated[
        bool,
        typer.Option("--no-trash", help="Skip the OS trash and quarantine directly."),
    ] = False,
    keep_in_quarantine: Annotated[
        bool,
        typer.Option(
            "--keep-in-quarantine",
            help="Quarantine items so they can be restored with cleansafe.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    force_system: Annotated[
        bool,
        typer.Option(
            "--force-system",
            help="Proceed even if system paths are given (they are still skipped).",
        ),
    ] = False,
) -> None:
    """Delete paths through the OS trash or the quarantine.

    Examples:
        cleansafe delete ~/Downloads/old.iso          # Confirm, then trash
        cleansafe delete --dry-run build/ dist/       # Preview only
        cleansafe delete -y --keep-in-quarantine tmp/ # Restorable via cleansafe
    """
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    manager = build_manager()

    options = DeletionOptions(
        dry_run=dry_run,
        use_trash=manager.config.use_trash and not no_trash,
        skip_confirmation=force_system,
        retain_in_quarantine=keep_in_quarantine,
        interactive=not yes and not dry_run,
    )

    result = asyncio.run(_run(manager, paths, options, quiet))

    if result is None or CANCELLED in result.errors:
        print_info("Aborted.")
        raise typer.Exit(code=0)

    console.print(create_deletion_table(result))
    print_deletion_summary(result)

    if not result.success:
        raise typer.Exit(code=1)
