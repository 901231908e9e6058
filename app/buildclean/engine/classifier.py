"""Path kind classification without dereferencing links.

The cleaner needs to know whether a path is itself a link before it
decides to recurse, so classification always starts from ``lstat``.
Links are only followed to tell a link-to-directory from a link-to-file.
"""

import os
import stat
import sys
from pathlib import Path
from typing import Protocol

from buildclean.engine.models import PathEntry, PathKind


class PathClassifier(Protocol):
    """Reports the kind of a filesystem path."""

    def classify(self, path: Path) -> PathEntry:
        """Classify ``path`` without following it if it is a link."""
        ...


def _lstat_kind(path: Path) -> PathKind:
    """Classify ``path`` from its ``lstat`` result."""
    try:
        st = os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        # NotADirectoryError: a parent component is a file
        return PathKind.MISSING

    if stat.S_ISLNK(st.st_mode):
        return _link_kind(path)
    if stat.S_ISDIR(st.st_mode):
        return PathKind.DIRECTORY
    return PathKind.FILE


def _link_kind(path: Path) -> PathKind:
    """Classify an alias node by what it points at."""
    try:
        target = os.stat(path)
    except OSError:
        return PathKind.DANGLING_SYMLINK
    if stat.S_ISDIR(target.st_mode):
        return PathKind.SYMLINK_TO_DIRECTORY
    return PathKind.SYMLINK_TO_FILE


class PosixPathClassifier:
    """Classifier for POSIX systems where symbolic links are the only aliases."""

    def classify(self, path: Path) -> PathEntry:
        return PathEntry(path=path, kind=_lstat_kind(path))


class WindowsPathClassifier:
    """Classifier for Windows, where NTFS junctions behave like directory links.

    ``lstat`` does not report junctions as links, so they are checked first.
    """

    def classify(self, path: Path) -> PathEntry:
        if os.path.isjunction(path):
            return PathEntry(path=path, kind=_link_kind(path))
        return PathEntry(path=path, kind=_lstat_kind(path))


def get_classifier(platform: str | None = None) -> PathClassifier:
    """Return the classifier suited to the running platform.

    Args:
        platform: Platform identifier to select for. Defaults to ``sys.platform``.

    Returns:
        A PathClassifier instance.
    """
    if (platform or sys.platform) == "win32":
        return WindowsPathClassifier()
    return PosixPathClassifier()
