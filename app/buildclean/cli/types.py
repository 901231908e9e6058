"""Shared types and utilities for CLI commands.

This module provides common enums, option types and helper functions
used across multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from buildclean.core.config import CleanConfig, ConfigError, load_config
from buildclean.core.paths import get_project_config_path
from buildclean.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


ProjectOption = Annotated[
    Path | None,
    typer.Option(
        "--project",
        "-C",
        help="Project directory relative paths are resolved against. Default: cwd.",
        file_okay=False,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Configuration file. Default: buildclean.toml in the project directory.",
        dir_okay=False,
    ),
]

DirectoryOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--directory",
        "-d",
        help="Additional directory to delete entirely (repeatable).",
    ),
]


def resolve_project_dir(project: Path | None) -> Path:
    """Return the absolute project directory, defaulting to the cwd."""
    return (project or Path.cwd()).absolute()


def load_project_config(project_dir: Path, config_path: Path | None) -> CleanConfig:
    """Load the configuration for a project, exiting on errors.

    An explicitly given configuration file must exist. Without one, the
    project's buildclean.toml is used if present, otherwise defaults.

    Args:
        project_dir: Absolute project directory.
        config_path: Explicit configuration file, or None.

    Returns:
        Validated CleanConfig.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    path = config_path or get_project_config_path(project_dir)
    try:
        return load_config(path, required=config_path is not None)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e
