"""Theme management for keysync CLI.

Provides color theming with optional user overrides from
~/.config/keysync/theme.toml (``[colors]`` table).
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from keysync.core.paths import get_theme_path

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    """Color configuration for keysync CLI.

    All colors must be valid hex codes (#RRGGBB or #RGB).
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    added: str = "#c1ff62"
    removed: str = "#f53263"
    changed: str = "#0e8ac8"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Validate that all color values are valid hex codes."""
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        color_part = color.removeprefix("#")
        if color_part == color or len(color_part) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(color_part, 16)
        except ValueError:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


def _load_user_colors(path: Path) -> dict[str, str]:
    """Load the colors table from a user theme file.

    Missing or unreadable files yield no overrides.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Failed to load theme file %s: %s", path, e)
        return {}

    colors_raw: object = data.get("colors", {})
    if not isinstance(colors_raw, dict):
        logger.warning("Invalid 'colors' section in %s", path)
        return {}
    return {
        key: value
        for key, value in cast(dict[str, object], colors_raw).items()
        if isinstance(value, str)
    }


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load theme colors, applying user overrides when valid.

    Args:
        path: Theme file path. If None, uses the default theme path.

    Returns:
        ThemeColors instance; defaults if the overrides are invalid.
    """
    overrides = _load_user_colors(path or get_theme_path())
    try:
        return ThemeColors(**overrides)
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Convert ThemeColors to a Rich Theme.

    Args:
        colors: ThemeColors instance to convert. If None, loads theme automatically.

    Returns:
        Rich Theme instance configured with the color scheme.
    """
    if colors is None:
        colors = load_theme()

    styles: dict[str, str] = {
        "text": colors.text,
        "muted": colors.muted,
        "header": colors.header,
        "border": colors.border,
        "success": colors.success,
        "warning": colors.warning,
        "error": f"bold {colors.error}",
        "info": colors.info,
        "added": colors.added,
        "removed": colors.removed,
        "changed": colors.changed,
        "bold_header": f"bold {colors.header}",
    }
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Get the Rich theme, loading and caching it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
