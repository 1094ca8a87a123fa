"""Console colors for vibectl.

The bundled ``data/theme.toml`` supplies every color. A user file at
``$XDG_CONFIG_HOME/vibectl/theme.toml`` may override any subset of them
under a ``[colors]`` table.
"""

import logging
import re
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, field_validator
from rich.theme import Theme

from vibectl.core.paths import get_config_dir

logger = logging.getLogger(__name__)

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")

# Styles rendered bold on top of their base color
_BOLD_STYLES = frozenset({"error", "module_installed"})


class ThemeColors(BaseModel):
    """Hex colors for every named console style (#RRGGBB or #RGB)."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # File rows in add/remove/undo output
    added: str = "#c1ff62"
    removed: str = "#f53263"
    modified: str = "#0e8ac8"

    # Status column of `modules list`
    module_installed: str = "#69B9A1"
    module_available: str = "#226666"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
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
    """Location of the optional user override file."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Path:
    return resources.files("vibectl.data").joinpath("theme.toml")  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Non-string values are ignored. A missing file yields None silently;
    unreadable or malformed files yield None with a warning.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    section: object = data.get("colors", {})
    if not isinstance(section, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {
        name: value
        for name, value in cast(dict[str, object], section).items()
        if isinstance(value, str)
    }


def load_theme() -> ThemeColors:
    """Merge user overrides onto the bundled colors.

    Any invalid color discards the whole merge in favour of the built-in
    defaults, so a broken user file never breaks the CLI.
    """
    colors = _load_toml_colors(Path(get_bundled_theme_path()))
    if colors is None:
        logger.error("Bundled theme is missing or unreadable; using built-in colors")
        colors = {}

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides:
        logger.debug("Applying %d color override(s) from %s", len(overrides), user_path)
        colors = {**colors, **overrides}

    try:
        return ThemeColors(**colors)
    except ValueError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme, one style per ThemeColors field plus two aliases."""
    colors = colors or load_theme()
    styles = {
        name: f"bold {value}" if name in _BOLD_STYLES else value
        for name, value in colors.model_dump().items()
    }
    styles["bold_header"] = f"bold {colors.header}"
    styles["dim"] = colors.muted
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Rich theme shared by the module-level consoles, built on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
