"""OS trash inspection commands."""

import asyncio
import sys

import typer

from cleansafe.cli.runtime import build_manager
from cleansafe.utils.formatting import console
from cleansafe.utils.units import format_bytes

app = typer.Typer(
    help="Inspect the OS trash.",
    no_args_is_help=True,
)


@app.command()
def info() -> None:
    """Show the trash provider for this platform and the trash size."""
    manager = build_manager()
    provider = manager.trash_provider

    console.print(f"Platform: [bold]{sys.platform}[/bold]")
    if provider is None or not manager.trash_available:
        console.print("Trash: [warning]not supported[/warning] (deletions use the quarantine)")
        return

    names = ", ".join(strategy.name for strategy in provider.strategies())
    size = asyncio.run(manager.get_trash_size())
    console.print(f"Trash: [success]{type(provider).__name__}[/success] ({names})")
    console.print(f"Size: [bold]{format_bytes(size)}[/bold]")
