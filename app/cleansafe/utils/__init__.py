"""Utility modules for cleansafe.

This module exports commonly used utility functions.
"""

from cleansafe.utils.shell import CommandResult, command_exists, run_command
from cleansafe.utils.units import format_bytes

__all__ = [
    "CommandResult",
    "command_exists",
    "format_bytes",
    "run_command",
]
