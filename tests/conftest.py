"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest


def _can_symlink(base: Path) -> bool:
    """Check whether symbolic links can be created under ``base``."""
    probe = base / ".symlink-probe"
    try:
        probe.symlink_to(base, target_is_directory=True)
    except (OSError, NotImplementedError):
        return False
    probe.unlink()
    return True


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo logging setup done by CLI invocations."""
    yield
    logger = logging.getLogger("buildclean")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_tree() -> Callable[[Path, dict[str, str | None]], Path]:
    """Factory creating a directory tree from a mapping.

    Keys are ``/``-separated paths relative to the root. A string value
    creates a file with that content, None creates a directory.
    """

    def _make(root: Path, layout: dict[str, str | None]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in layout.items():
            path = root / relative
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content)
        return root

    return _make


@pytest.fixture
def build_dir(tmp_path: Path, make_tree: Callable[[Path, dict[str, str | None]], Path]) -> Path:
    """A typical build output directory with nested files."""
    return make_tree(
        tmp_path / "project" / "build",
        {
            "classes/App.class": "bytecode",
            "classes/util/Helper.class": "bytecode",
            "reports/index.html": "<html></html>",
            "reports/empty": None,
            "app.jar": "jar",
        },
    )


@pytest.fixture
def symlinks(tmp_path: Path) -> None:
    """Skip the test when symbolic links cannot be created."""
    if not _can_symlink(tmp_path):
        pytest.skip("symbolic links are not supported here")


@pytest.fixture
def no_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory."""
    config_home = tmp_path / "xdg-config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home

