"""Safety layer configuration and settings.

This module provides the configuration model and I/O functions for the
deletion safety layer: where the quarantine lives, how long quarantined
items are retained, and the thresholds used by the path validator.

Configuration is stored in ~/.config/cleansafe/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cleansafe.core.errors import CleansafeError
from cleansafe.core.paths import get_config_path, get_state_dir

logger = logging.getLogger(__name__)

GIB = 1024 * 1024 * 1024


class SafetyConfig(BaseModel):
    """Configuration for the deletion safety layer.

    Attributes:
        quarantine_root: Directory holding the quarantine and its index.
            None means the XDG state directory.
        retention_days: Default age after which quarantined items are purged.
        trash_timeout_seconds: Timeout applied to each external trash command.
        large_directory_threshold: Immediate child count above which a
            directory triggers a "large directory" warning.
        size_warning_bytes: Total size above which a confirmation prompt
            carries a size warning.
        use_trash: Prefer the OS trash over the quarantine by default.
        extra_system_paths: Additional paths to block, on top of the
            platform deny-list.
    """

    model_config = ConfigDict(extra="forbid")

    quarantine_root: Annotated[
        Path | None,
        Field(description="Quarantine root directory (None = XDG state dir)"),
    ] = None
    retention_days: Annotated[
        int,
        Field(ge=1, le=3650, description="Days to keep quarantined items"),
    ] = 30
    trash_timeout_seconds: Annotated[
        float,
        Field(gt=0, le=120, description="Timeout for external trash commands"),
    ] = 10.0
    large_directory_threshold: Annotated[
        int,
        Field(ge=1, description="Child count that marks a directory as large"),
    ] = 1000
    size_warning_bytes: Annotated[
        int,
        Field(ge=0, description="Total size that triggers a size warning"),
    ] = GIB
    use_trash: Annotated[
        bool,
        Field(description="Prefer the OS trash over the quarantine"),
    ] = True
    extra_system_paths: Annotated[
        list[str],
        Field(default_factory=list, description="Additional blocked paths"),
    ]

    @property
    def effective_quarantine_root(self) -> Path:
        """Get the quarantine root, falling back to the XDG state directory."""
        if self.quarantine_root is not None:
            return self.quarantine_root.expanduser()
        return get_state_dir()


class ConfigError(CleansafeError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> SafetyConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated SafetyConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return SafetyConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> SafetyConfig:
    """Load configuration, returning defaults when no file exists.

    Parse and schema errors still propagate so a broken config is never
    silently ignored.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Loaded or default SafetyConfig.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return SafetyConfig()


def save_config(config: SafetyConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The SafetyConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: SafetyConfig) -> dict[str, object]:
    """Convert SafetyConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are omitted.

    Args:
        config: The SafetyConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {
        "retention_days": config.retention_days,
        "trash_timeout_seconds": config.trash_timeout_seconds,
        "large_directory_threshold": config.large_directory_threshold,
        "size_warning_bytes": config.size_warning_bytes,
        "use_trash": config.use_trash,
        "extra_system_paths": list(config.extra_system_paths),
    }

    if config.quarantine_root is not None:
        result["quarantine_root"] = str(config.quarantine_root)

    return result
