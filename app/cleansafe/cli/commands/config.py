"""Configuration commands.

Provides commands to show the effective configuration and to write a
default config file.
"""

from typing import Annotated

import typer
from rich.table import Table

from cleansafe.cli.runtime import load_cli_config
from cleansafe.core.config import ConfigError, SafetyConfig, save_config
from cleansafe.core.paths import get_config_path
from cleansafe.utils.formatting import console, print_error, print_info, print_success
from cleansafe.utils.units import format_bytes

app = typer.Typer(
    help="Show or create the cleansafe configuration.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    config = load_cli_config()
    config_path = get_config_path()

    table = Table(
        title="Configuration",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    table.add_row("quarantine_root", str(config.effective_quarantine_root))
    table.add_row("retention_days", str(config.retention_days))
    table.add_row("trash_timeout_seconds", f"{config.trash_timeout_seconds:g}")
    table.add_row("large_directory_threshold", str(config.large_directory_threshold))
    table.add_row("size_warning_bytes", format_bytes(config.size_warning_bytes))
    table.add_row("use_trash", str(config.use_trash).lower())
    table.add_row("extra_system_paths", ", ".join(config.extra_system_paths) or "-")

    console.print(table)
    source = config_path if config_path.exists() else "defaults (no config file)"
    console.print(f"\n[dim]Source: {source}[/dim]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        print_info(f"Config already exists: {config_path} (use --force to overwrite)")
        return

    try:
        saved = save_config(SafetyConfig(), config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
