"""Colour palette for better-rm output.

Every line better-rm prints has one role: a removal, a trash diversion,
a skipped entry, a dry-run banner, a diagnostic, or part of the
protected-path table. Each role maps to one palette colour. Users can
recolour roles in ``~/.config/better-rm/theme.toml``::

    [colors]
    trashed = "#00afff"
"""

import logging
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError
from rich.theme import Theme

from betterrm.core.paths import get_user_theme_path
from betterrm.models.options import RemoveOptions

logger = logging.getLogger(__name__)

HexColor = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$"),
]

# Roles rendered bold on top of their colour
BOLD_ROLES = frozenset({"dry_run", "error", "header"})


class Palette(BaseModel):
    """Colour per output role, as #RGB or #RRGGBB."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    removed: HexColor = "#f53263"
    trashed: HexColor = "#0e8ac8"
    skipped: HexColor = "#faf870"
    dry_run: HexColor = "#d44ebc"
    error: HexColor = "#f53263"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    muted: HexColor = "#b2bec3"

    def to_rich_theme(self) -> Theme:
        """Build the Rich theme with one style per role."""
        styles = {
            role: f"bold {color}" if role in BOLD_ROLES else color
            for role, color in self.model_dump().items()
        }
        return Theme(styles)


def read_palette_overrides(path: Path) -> dict[str, object]:
    """Read the ``[colors]`` table of a user theme file.

    Args:
        path: Theme file to read.

    Returns:
        Role to colour overrides; empty if the file is missing or unusable.
    """
    try:
        with open(path, "rb") as f:
            colors = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return colors


def load_palette(path: Path | None = None) -> Palette:
    """Load the palette with user overrides applied.

    An override file that fails validation is ignored as a whole.

    Args:
        path: User theme file. Default: ~/.config/better-rm/theme.toml.

    Returns:
        Validated Palette.
    """
    overrides = read_palette_overrides(path or get_user_theme_path())
    if not overrides:
        return Palette()
    try:
        return Palette.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Invalid theme colours, using defaults: %s", e)
        return Palette()


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Get the Rich theme for the shared consoles, loaded once per process."""
    return load_palette().to_rich_theme()


def progress_style(options: RemoveOptions) -> str:
    """Pick the role for progress lines under the given options.

    Dry-run lines all share the dry-run colour, so a simulated run never
    looks like a real one.
    """
    if options.dry_run:
        return "dry_run"
    return "trashed" if options.use_trash else "removed"
