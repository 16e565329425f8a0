"""CLI commands for cleansafe.

This package contains all subcommand implementations.
"""

from cleansafe.cli.commands import check, config, delete, quarantine, trash

__all__ = ["check", "config", "delete", "quarantine", "trash"]
