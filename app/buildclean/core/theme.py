"""Console styles for buildclean output.

The bundled ``data/theme.toml`` defines every style the report tables and
message helpers use. A ``[styles]`` table in the user's theme file replaces
individual entries.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from rich.errors import StyleSyntaxError
from rich.style import Style
from rich.theme import Theme

from buildclean.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)


class OutputStyles(BaseModel):
    """Rich style definitions, one per name used in markup and tables."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    muted: str
    border: str
    bold_header: str
    path: str
    success: str
    warning: str
    error: str
    info: str
    removed: str

    @field_validator("*")
    @classmethod
    def validate_style(cls, v: str) -> str:
        """Reject definitions Rich cannot parse."""
        try:
            Style.parse(v)
        except StyleSyntaxError as e:
            msg = f"invalid style '{v}': {e}"
            raise ValueError(msg) from None
        return v


def _read_styles(source: Any) -> dict[str, Any]:
    with source.open("rb") as f:
        styles = tomllib.load(f).get("styles", {})
    if not isinstance(styles, dict):
        msg = "'styles' must be a table"
        raise ValueError(msg)
    return styles


def load_styles(user_path: Path | None = None) -> OutputStyles:
    """Load the bundled styles and apply the user's overrides.

    An unreadable or invalid user file is logged and ignored as a whole.

    Args:
        user_path: User theme file. Defaults to the XDG location.

    Returns:
        Validated OutputStyles.
    """
    bundled = _read_styles(resources.files("buildclean.data").joinpath("theme.toml"))
    path = user_path or get_user_theme_path()
    if not path.exists():
        return OutputStyles(**bundled)

    try:
        styles = OutputStyles(**{**bundled, **_read_styles(path)})
    except (OSError, ValueError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return OutputStyles(**bundled)

    logger.debug("Loaded theme overrides from %s", path)
    return styles


@cache
def get_theme() -> Theme:
    """Return the Rich theme for the shared consoles, built once."""
    return Theme(load_styles().model_dump())
