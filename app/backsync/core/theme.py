"""Colour theme for backsync output.

Colours come from the bundled data/theme.toml. Any subset can be
overridden in ~/.config/backsync/theme.toml under a [colors] table.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from backsync.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

# Styles rendered bold on top of their colour
_BOLD_STYLES = frozenset({"error", "problem"})


def _check_hex(value: str) -> str:
    color = value.strip()
    digits = color.removeprefix("#")
    if digits == color:
        msg = f"color must start with '#': {value!r}"
        raise ValueError(msg)
    if len(digits) not in (3, 6):
        msg = f"color must be #RGB or #RRGGBB: {value!r}"
        raise ValueError(msg)
    try:
        int(digits, 16)
    except ValueError:
        msg = f"invalid hex color: {value!r}"
        raise ValueError(msg) from None
    return color


HexColor = Annotated[str, AfterValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Hex colour for every style backsync prints with."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    # One per change type, plus flagged problems
    added: HexColor = "#c1ff62"
    removed: HexColor = "#f53263"
    changed: HexColor = "#0e8ac8"
    problem: HexColor = "#d44ebc"


def get_bundled_theme_path() -> Path:
    """Get the path of the theme shipped with the package."""
    return Path(str(resources.files("backsync.data").joinpath("theme.toml")))


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the [colors] table of a theme file.

    Non-string values are dropped.

    Args:
        path: Theme file to read.

    Returns:
        Colour name to value, or None if the file is missing or unusable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {name: value for name, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Load the bundled colours with user overrides applied on top.

    Returns:
        Validated colours; the built-in defaults if the merged result is
        invalid.
    """
    merged: dict[str, str] = {}
    for path in (get_bundled_theme_path(), get_user_theme_path()):
        merged.update(_load_toml_colors(path) or {})

    try:
        return ThemeColors.model_validate(merged)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build a Rich theme with one style per colour.

    Also defines ``bold_header`` for table headers and ``dim`` as an alias
    of ``muted``.

    Args:
        colors: Colours to use; loaded with load_theme() if None.
    """
    colors = colors or load_theme()
    styles = {
        name: f"bold {value}" if name in _BOLD_STYLES else value
        for name, value in colors.model_dump().items()
    }
    styles["bold_header"] = f"bold {colors.header}"
    styles["dim"] = colors.muted
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Get the Rich theme, built once per process."""
    return get_rich_theme()
