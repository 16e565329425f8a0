"""XDG-compliant path management for cleansafe.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage.

XDG defaults:
- Config: ~/.config/cleansafe/
- State: ~/.local/state/cleansafe/ (quarantine root)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "cleansafe"

QUARANTINE_DIRNAME = "quarantine"
QUARANTINE_INDEX_FILENAME = "quarantine-index.json"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/cleansafe/ (or XDG_CONFIG_HOME/cleansafe/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    The state directory is the default quarantine root: it holds the
    quarantined objects and the quarantine index.

    Returns:
        Path to ~/.local/state/cleansafe/ (or XDG_STATE_HOME/cleansafe/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/cleansafe/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/cleansafe/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_quarantine_dir(root: Path) -> Path:
    """Get the directory holding quarantined objects for a quarantine root."""
    return root / QUARANTINE_DIRNAME


def get_quarantine_index_path(root: Path) -> Path:
    """Get the index file path for a quarantine root."""
    return root / QUARANTINE_INDEX_FILENAME


def get_user_data_dir() -> Path:
    """Get the XDG data home (not application-specific).

    Used to locate the freedesktop trash directory.

    Returns:
        Path to $XDG_DATA_HOME or ~/.local/share.
    """
    base = os.environ.get("XDG_DATA_HOME")
    if base:
        return Path(base)
    return Path.home() / ".local" / "share"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")
