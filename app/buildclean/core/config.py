"""Clean configuration models and file I/O.

This module defines the Pydantic models for the ``[clean]`` table of a
``buildclean.toml`` file and the functions that load, layer, and save
them. User-level defaults from the XDG config directory are overlaid by
the project file; command-line options are applied by the caller.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from buildclean.core.paths import get_project_config_path, get_user_config_path
from buildclean.engine.models import ErrorPolicy

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORIES: tuple[str, ...] = ("build", "dist")

# Scalar [clean] options a user-level defaults file may provide.
_USER_DEFAULT_KEYS: frozenset[str] = frozenset(
    {"follow_symlinks", "fail_on_error", "retry_on_error", "verbose"}
)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when a configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when a configuration file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when configuration content is invalid."""


class FileSetConfig(BaseModel):
    """A ``[[clean.filesets]]`` entry.

    Attributes:
        directory: Base directory, relative to the project or absolute.
        includes: Ant-style patterns selecting entries to delete.
        excludes: Ant-style patterns protecting entries from deletion.
        use_default_excludes: Also exclude VCS metadata and editor backups.
        follow_symlinks: Recurse into linked directories inside the fileset.
    """

    model_config = ConfigDict(extra="forbid")

    directory: Annotated[str, Field(description="Fileset base directory")]
    includes: Annotated[
        list[str],
        Field(default_factory=list, description="Patterns to delete"),
    ]
    excludes: Annotated[
        list[str],
        Field(default_factory=list, description="Patterns to keep"),
    ]
    use_default_excludes: Annotated[bool, Field(description="Add default excludes")] = True
    follow_symlinks: Annotated[bool, Field(description="Follow linked directories")] = False

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        """Reject an empty base directory."""
        if not v.strip():
            msg = "Fileset directory cannot be empty"
            raise ValueError(msg)
        return v


class CleanConfig(BaseModel):
    """The ``[clean]`` table.

    Attributes:
        directories: Whole-directory targets, relative to the project or absolute.
        exclude_default_directories: Ignore ``directories`` and only run filesets.
        filesets: Selective targets.
        follow_symlinks: Recurse into linked directories of whole-directory targets.
        fail_on_error: Abort on the first failure instead of warning.
        retry_on_error: Retry a failed deletion once.
        skip: Do nothing.
        verbose: Log every deleted entry.
    """

    model_config = ConfigDict(extra="forbid")

    directories: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_DIRECTORIES),
            description="Directories to delete entirely",
        ),
    ]
    exclude_default_directories: Annotated[
        bool, Field(description="Skip the directories list")
    ] = False
    filesets: Annotated[
        list[FileSetConfig],
        Field(default_factory=list, description="Selective deletions"),
    ]
    follow_symlinks: Annotated[bool, Field(description="Follow linked directories")] = False
    fail_on_error: Annotated[bool, Field(description="Abort on first failure")] = True
    retry_on_error: Annotated[bool, Field(description="Retry a failed deletion once")] = False
    skip: Annotated[bool, Field(description="Skip cleaning entirely")] = False
    verbose: Annotated[bool, Field(description="Log every deleted entry")] = False

    @field_validator("directories")
    @classmethod
    def validate_directories(cls, v: list[str]) -> list[str]:
        """Reject empty directory names."""
        for directory in v:
            if not directory.strip():
                msg = "Directory entries cannot be empty"
                raise ValueError(msg)
        return v

    @property
    def policy(self) -> ErrorPolicy:
        """Error policy described by this configuration."""
        return ErrorPolicy(fail_on_error=self.fail_on_error, retry_on_error=self.retry_on_error)


class ProjectConfig(BaseModel):
    """Complete ``buildclean.toml`` document."""

    model_config = ConfigDict(extra="forbid")

    clean: Annotated[CleanConfig, Field(default_factory=CleanConfig)]


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read.
    """
    if not path.exists():
        raise ConfigNotFoundError(f"Configuration not found: {path}")

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read configuration {path}: {e}") from e


def load_user_defaults(path: Path | None = None) -> dict[str, Any]:
    """Load scalar defaults from the user-level configuration.

    A missing file yields no defaults. Unknown keys are dropped with a
    warning so a stale user file never blocks a project build.

    Args:
        path: Path to the user file. If None, uses the XDG location.

    Returns:
        Mapping of ``[clean]`` option names to values.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
    """
    user_path = path or get_user_config_path()
    try:
        data = _read_toml(user_path)
    except ConfigNotFoundError:
        return {}

    clean = data.get("clean", {})
    if not isinstance(clean, dict):
        logger.warning("Ignoring invalid [clean] section in %s", user_path)
        return {}

    defaults: dict[str, Any] = {}
    for key, value in clean.items():
        if key in _USER_DEFAULT_KEYS:
            defaults[key] = value
        else:
            logger.warning("Ignoring unsupported user default %r in %s", key, user_path)
    return defaults


def load_config(
    path: Path | None = None,
    *,
    user_path: Path | None = None,
    required: bool = False,
) -> CleanConfig:
    """Load and validate the clean configuration.

    User defaults are applied first and overlaid by the project file.

    Args:
        path: Project configuration file. If None, uses ./buildclean.toml.
        user_path: User defaults file. If None, uses the XDG location.
        required: Raise if the project file does not exist instead of
            falling back to defaults.

    Returns:
        Validated CleanConfig.

    Raises:
        ConfigNotFoundError: If ``required`` and the project file is missing.
        ConfigParseError: If a TOML file is malformed.
        ConfigValidationError: If the merged content doesn't match the schema.
    """
    config_path = path or get_project_config_path()
    merged: dict[str, Any] = load_user_defaults(user_path)

    try:
        data = _read_toml(config_path)
    except ConfigNotFoundError:
        if required:
            raise
        logger.debug("No project configuration at %s, using defaults", config_path)
        data = {}

    try:
        project = ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {config_path}: {e}") from e

    merged.update(project.clean.model_dump(exclude_unset=True))

    try:
        return CleanConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}") from e


def config_exists(path: Path | None = None) -> bool:
    """Check if a project configuration file exists."""
    return (path or get_project_config_path()).exists()


def save_config(config: CleanConfig, path: Path | None = None) -> Path:
    """Save a configuration to a TOML file.

    The file is written atomically via a temporary file in the same
    directory and os.replace().

    Args:
        config: The configuration to save.
        path: Destination. If None, uses ./buildclean.toml.

    Returns:
        Path where the configuration was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_project_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {"clean": config.model_dump(exclude_defaults=False)}

    tmp_path: Path | None = None
    try:
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
        raise ConfigError(f"Failed to write configuration: {e}") from e

    return config_path
