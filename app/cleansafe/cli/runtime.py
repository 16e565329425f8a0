"""Shared setup for CLI commands.

Loads the configuration and builds the SafetyManager every command works
through, turning configuration errors into clean CLI exits.
"""

import typer

from cleansafe.core.config import ConfigError, SafetyConfig, load_config_or_default
from cleansafe.safety.manager import SafetyManager
from cleansafe.utils.formatting import print_error


def load_cli_config() -> SafetyConfig:
    """Load the user configuration or exit with an error message."""
    try:
        return load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def build_manager(config: SafetyConfig | None = None) -> SafetyManager:
    """Create the SafetyManager used by CLI commands.

    Args:
        config: Configuration to use. If None, loads the user config.

    Returns:
        SafetyManager wired to the platform trash and the configured quarantine.
    """
    return SafetyManager(config=config or load_cli_config())
