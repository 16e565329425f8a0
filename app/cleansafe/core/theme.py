"""Console colors for the cleansafe CLI.

Every style has a built-in color. A [colors] table in
~/.config/cleansafe/theme.toml overrides individual styles.
"""

import logging
import tomllib
from functools import cache
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.theme import Theme

from cleansafe.core.paths import get_theme_path

logger = logging.getLogger(__name__)

HexColor = Annotated[str, Field(pattern=r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")]

# Styles printed in bold on top of their color.
_EMPHASIZED = frozenset({"error", "blocked"})


class ThemeColors(BaseModel):
    """Hex color per console style, one style per deletion outcome."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"
    trash: HexColor = "#0e8ac8"
    quarantine: HexColor = "#d44ebc"
    blocked: HexColor = "#f53263"

    def to_rich(self) -> Theme:
        """Build the Rich theme, adding bold_header and a muted dim."""
        styles = {
            name: f"bold {color}" if name in _EMPHASIZED else color
            for name, color in self.model_dump().items()
        }
        styles["bold_header"] = f"bold {self.header}"
        styles["dim"] = self.muted
        return Theme(styles)


def load_theme_colors(path: Path | None = None) -> ThemeColors:
    """Read color overrides, falling back to the defaults on any problem.

    Args:
        path: Theme file to read. If None, uses ~/.config/cleansafe/theme.toml.
    """
    theme_path = path or get_theme_path()
    try:
        with open(theme_path, "rb") as f:
            overrides = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return ThemeColors()
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable theme file %s: %s", theme_path, e)
        return ThemeColors()

    try:
        return ThemeColors.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Ignoring invalid colors in %s: %s", theme_path, e)
        return ThemeColors()


@cache
def get_theme() -> Theme:
    """Rich theme shared by the CLI consoles, read once per process."""
    return load_theme_colors().to_rich()
