"""XDG-compliant and project path management for buildclean.

User-level defaults and the theme override live under the XDG config
directory; the project configuration lives next to the project itself.

XDG defaults:
- Config: ~/.config/buildclean/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "buildclean"

# Name of the per-project configuration file
PROJECT_CONFIG_NAME = "buildclean.toml"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the user configuration directory path.

    Returns:
        Path to ~/.config/buildclean/ (or XDG_CONFIG_HOME/buildclean/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_user_config_path() -> Path:
    """Get the user-level defaults file path.

    Returns:
        Path to ~/.config/buildclean/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/buildclean/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """Get the project configuration file path.

    Args:
        project_dir: Project directory. Defaults to the current directory.

    Returns:
        Path to <project_dir>/buildclean.toml.
    """
    return (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
