"""Quarantine management commands.

Provides commands to list, restore, purge and measure the items that
cleansafe moved into its quarantine.
"""

import asyncio
import json
from typing import Annotated

import typer

from cleansafe.cli.display import create_quarantine_table
from cleansafe.cli.runtime import build_manager
from cleansafe.utils.formatting import console, print_error, print_info, print_success
from cleansafe.utils.units import format_bytes

app = typer.Typer(
    help="Inspect and restore quarantined items.",
    no_args_is_help=True,
)


@app.command("list")
def list_entries(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """List quarantined items, newest first."""
    manager = build_manager()
    entries = asyncio.run(manager.list_quarantine())

    if json_output:
        console.print_json(json.dumps([entry.model_dump(mode="json") for entry in entries]))
        return

    if not entries:
        print_info("Quarantine is empty.")
        return

    console.print(create_quarantine_table(entries))
    total = sum(entry.size for entry in entries)
    console.print(f"\n[dim]{len(entries)} item(s), {format_bytes(total)} total[/dim]")


@app.command()
def restore(
    entry_id: Annotated[
        str,
        typer.Argument(help="Id of the quarantined item."),
    ],
) -> None:
    """Restore a quarantined item to its original location."""
    manager = build_manager()
    entry = asyncio.run(manager.quarantine.get_entry(entry_id))

    if entry is None:
        print_error(f"No quarantined item with id {entry_id}")
        raise typer.Exit(code=1)

    if not asyncio.run(manager.restore(entry_id)):
        print_error(f"Could not restore {entry.original_path}")
        raise typer.Exit(code=1)

    print_success(f"Restored {entry.original_path}")


@app.command()
def undo(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Restore the most recently quarantined item."""
    manager = build_manager()
    entry = asyncio.run(manager.get_last_operation())

    if entry is None:
        print_info("Quarantine is empty, nothing to undo.")
        return

    console.print(f"Last quarantined: [bold]{entry.original_path}[/bold] ({format_bytes(entry.size)})")
    if not yes and not typer.confirm("Restore it?", default=True):
        print_info("Cancelled.")
        return

    if not asyncio.run(manager.restore(entry.id)):
        print_error(f"Could not restore {entry.original_path}")
        raise typer.Exit(code=1)

    print_success(f"Restored {entry.original_path}")


@app.command()
def clean(
    days: Annotated[
        int | None,
        typer.Option("--days", "-d", min=1, help="Retention period in days (default: from config)."),
    ] = None,
) -> None:
    """Permanently delete quarantined items older than the retention period."""
    manager = build_manager()
    removed = asyncio.run(manager.cleanup_quarantine(days))

    if removed:
        print_success(f"Removed {removed} expired item(s) from quarantine.")
    else:
        print_info("No expired items in quarantine.")


@app.command()
def clear(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Permanently delete everything in the quarantine."""
    manager = build_manager()

    if not yes:
        confirmed = typer.confirm("Permanently delete all quarantined items?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    cleared = asyncio.run(manager.clear_quarantine())
    print_success(f"Deleted {cleared} quarantined item(s).")


@app.command()
def size() -> None:
    """Show the total size of the quarantine."""
    manager = build_manager()
    total = asyncio.run(manager.get_quarantine_size())
    console.print(f"Quarantine size: [bold]{format_bytes(total)}[/bold] ({manager.quarantine.root})")
