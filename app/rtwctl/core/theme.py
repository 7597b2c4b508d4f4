"""Console color theme.

The bundled palette in ``rtwctl/data/theme.toml`` can be partially
overridden by ``~/.config/rtwctl/theme.toml``; both use a ``[colors]`` table.
"""

import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError
from rich.theme import Theme

from rtwctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)


def _hex_color(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError("color must be a string")
    color = value.strip()
    if not color.startswith("#"):
        raise ValueError(f"color must start with '#': {color!r}")
    digits = color[1:]
    if len(digits) not in (3, 6):
        raise ValueError(f"color must be #RGB or #RRGGBB format: {color!r}")
    try:
        int(digits, 16)
    except ValueError:
        raise ValueError(f"invalid hex color '{color}'") from None
    return color


HexColor = Annotated[str, BeforeValidator(_hex_color)]


class ThemeColors(BaseModel):
    """Palette for installer output. Every value is #RGB or #RRGGBB."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    # Startup banner and copy-pasteable commands in the report
    banner: HexColor = "#03b971"
    command: HexColor = "#faf870"


def get_user_theme_path() -> Path:
    """Path of the optional user override (~/.config/rtwctl/theme.toml)."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Path:
    return resources.files("rtwctl.data").joinpath("theme.toml")  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Returns:
        String-valued color entries, or None if the file is missing,
        unreadable, or not valid TOML.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None
    except OSError as e:
        logger.warning("Could not read theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return None
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Merge user overrides onto the bundled palette.

    An invalid merged palette falls back to the built-in defaults.
    """
    colors = _load_toml_colors(Path(get_bundled_theme_path()))
    if colors is None:
        logger.error("Bundled theme is missing or corrupt, using defaults")
        colors = {}

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides:
        logger.debug("Applying theme overrides from %s", user_path)
        colors = {**colors, **overrides}

    try:
        return ThemeColors(**colors)
    except ValidationError as e:
        logger.warning("Invalid theme, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme used by both consoles.

    Args:
        colors: Palette to use. Loaded from disk if None.
    """
    if colors is None:
        colors = load_theme()

    return Theme(
        {
            "text": colors.text,
            "muted": colors.muted,
            "header": colors.header,
            "border": colors.border,
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "info": colors.info,
            "banner": f"bold {colors.banner}",
            "command": colors.command,
            "bold_header": f"bold {colors.header}",
            "dim": colors.muted,
        }
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the Rich theme, loading it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
