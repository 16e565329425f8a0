"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer

from cleansafe import __version__
from cleansafe.cli.commands import check, config, delete, quarantine, trash

# Create main Typer app
app = typer.Typer(
    name="cleansafe",
    help="Safe, reversible deletion for cleanup tools.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"cleansafe version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """cleansafe - safe, reversible deletion.

    Validate paths against system deny-lists, move them to the OS trash
    or a private quarantine, and restore them later.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="check")(check.check)
app.command(name="delete")(delete.delete)
app.add_typer(quarantine.app, name="quarantine")
app.add_typer(trash.app, name="trash")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
