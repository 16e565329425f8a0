"""CLI package for cleansafe.

This package contains the Typer application and all subcommands.
"""

from cleansafe.cli.main import app

__all__ = ["app"]
