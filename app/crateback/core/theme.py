"""Console color theme.

Colors come from the bundled ``data/theme.toml``; any subset can be
overridden in ``~/.config/crateback/theme.toml``. Plan tables use the
``added``/``removed``/``changed`` styles for install, remove and update.
"""

import logging
import re
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from crateback.core.paths import get_config_dir

logger = logging.getLogger(__name__)

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")

# Styles rendered bold on top of their base color
_BOLD_STYLES = {"error": "error", "bold_header": "header"}


class ThemeColors(BaseModel):
    """Hex colors for every named console style."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#dea584"
    border: str = "#6b4f3a"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # install / remove / update
    added: str = "#c1ff62"
    removed: str = "#f53263"
    changed: str = "#0e8ac8"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Accept ``#RGB`` or ``#RRGGBB`` only."""
        if not isinstance(v, str):
            raise ValueError(f"{info.field_name}: color must be a string")
        color = v.strip()
        if not color.startswith("#"):
            raise ValueError(f"{info.field_name}: color must start with '#'")
        digits = color[1:]
        if len(digits) not in (3, 6):
            raise ValueError(f"{info.field_name}: color must be #RGB or #RRGGBB format")
        if not _HEX_DIGITS.fullmatch(digits):
            raise ValueError(f"{info.field_name}: invalid hex color '{color}'")
        return color


def get_user_theme_path() -> Path:
    """Path of the optional user override file."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Path:
    """Path of the theme shipped inside the package."""
    return Path(str(resources.files("crateback.data").joinpath("theme.toml")))


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Non-string values are ignored.

    Returns:
        Color name to hex value, or None if the file is missing or unusable.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    table = data.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return None
    return {str(k): v for k, v in table.items() if isinstance(v, str)}


def load_theme() -> ThemeColors:
    """Merge user overrides over the bundled colors.

    An invalid merged theme falls back to the built-in defaults.
    """
    colors = _load_toml_colors(get_bundled_theme_path())
    if colors is None:
        logger.error("Bundled theme is missing or invalid; using built-in colors")
        colors = {}

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides:
        logger.debug("Applying %d color override(s) from %s", len(overrides), user_path)
        colors = {**colors, **overrides}

    try:
        return ThemeColors(**colors)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme; loads colors from disk when none are given."""
    colors = colors or load_theme()
    styles = colors.model_dump()
    for style, base in _BOLD_STYLES.items():
        styles[style] = f"bold {styles[base]}"
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Get the Rich theme, loading and caching it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
