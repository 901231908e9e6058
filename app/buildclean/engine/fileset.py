"""Fileset resolution for selective cleaning.

A fileset names a base directory plus Ant-style include and exclude
patterns. Resolution walks the base directory once and produces the
concrete set of relative paths the cleaner may delete; the cleaner never
evaluates patterns itself.

Pattern syntax:
- ``/``-separated paths relative to the base directory
- ``**`` matches zero or more path segments
- ``*`` and ``?`` match within a single segment
- a trailing ``/`` is shorthand for ``/**``
"""

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

# Version control metadata and editor leftovers, never selected unless
# use_default_excludes is turned off.
DEFAULT_EXCLUDES: tuple[str, ...] = (
    # Editor backups
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    "**/.DS_Store",
    # CVS / RCS / SCCS
    "**/CVS",
    "**/CVS/**",
    "**/.cvsignore",
    "**/RCS",
    "**/RCS/**",
    "**/SCCS",
    "**/SCCS/**",
    # Subversion
    "**/.svn",
    "**/.svn/**",
    # Git
    "**/.git",
    "**/.git/**",
    "**/.gitignore",
    "**/.gitattributes",
    "**/.gitmodules",
    # Mercurial / Bazaar / Darcs
    "**/.hg",
    "**/.hg/**",
    "**/.hgignore",
    "**/.bzr",
    "**/.bzr/**",
    "**/_darcs",
    "**/_darcs/**",
)


@dataclass(frozen=True, slots=True)
class FileSet:
    """Include/exclude patterns applied to one base directory.

    Attributes:
        directory: Absolute base directory the patterns are relative to.
        includes: Patterns to select. Empty means everything (``**``).
        excludes: Patterns to leave alone even when included.
        use_default_excludes: Add DEFAULT_EXCLUDES to ``excludes``.
        follow_symlinks: Descend into linked directories while resolving.
    """

    directory: Path
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    use_default_excludes: bool = True
    follow_symlinks: bool = False

    @property
    def effective_includes(self) -> tuple[str, ...]:
        """Normalized include patterns."""
        return tuple(normalize_pattern(p) for p in self.includes) or ("**",)

    @property
    def effective_excludes(self) -> tuple[str, ...]:
        """Normalized exclude patterns, default excludes included."""
        patterns = [normalize_pattern(p) for p in self.excludes]
        if self.use_default_excludes:
            patterns.extend(DEFAULT_EXCLUDES)
        return tuple(patterns)

    def describe(self) -> str:
        """Short description used in log messages."""
        inc = ", ".join(self.includes) or "**"
        text = f"includes=[{inc}]"
        if self.excludes:
            text += f", excludes=[{', '.join(self.excludes)}]"
        return text


@dataclass(frozen=True, slots=True)
class FileSetSelection:
    """Relative paths selected by a resolved fileset.

    Attributes:
        selected: POSIX-style relative paths (no leading ``./``).
        description: Patterns the selection was resolved from.
    """

    selected: frozenset[str] = field(default_factory=frozenset)
    description: str = ""

    def is_selected(self, relative: str) -> bool:
        """Whether the entry at ``relative`` should be deleted."""
        return relative in self.selected

    def could_hold_selected(self, relative: str) -> bool:
        """Whether a selected entry may lie beneath directory ``relative``."""
        if not relative:
            return bool(self.selected)
        prefix = relative + "/"
        return any(path.startswith(prefix) for path in self.selected)

    def __len__(self) -> int:
        return len(self.selected)


def normalize_pattern(pattern: str) -> str:
    """Normalize a pattern to ``/`` separators with no leading ``./``.

    Args:
        pattern: Raw pattern from configuration.

    Returns:
        Normalized pattern; a trailing separator expands to ``**``.
    """
    normalized = pattern.strip().replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    if normalized.endswith("/"):
        normalized += "**"
    return normalized or "**"


def matches_any(relative: str, patterns: Iterable[str]) -> bool:
    """Check a relative path against patterns.

    Args:
        relative: POSIX-style path relative to the fileset base.
        patterns: Normalized patterns.

    Returns:
        True if any pattern matches the whole path.
    """
    candidate = PurePosixPath(relative)
    for pattern in patterns:
        if candidate.full_match(pattern):
            return True
        # "dir/**" also names "dir" itself
        if pattern.endswith("/**") and candidate.full_match(pattern[:-3]):
            return True
    return False


def resolve_fileset(fileset: FileSet) -> FileSetSelection:
    """Resolve a fileset into the concrete selection of relative paths.

    The base directory itself is never part of the selection. A missing
    base directory resolves to an empty selection.

    Args:
        fileset: The fileset to resolve.

    Returns:
        FileSetSelection with every included, non-excluded entry.
    """
    includes = fileset.effective_includes
    excludes = fileset.effective_excludes
    selected: set[str] = set()

    for relative in _walk_relative(fileset.directory, fileset.follow_symlinks):
        if matches_any(relative, includes) and not matches_any(relative, excludes):
            selected.add(relative)

    logger.debug(
        "Resolved %d entries in %s (%s)",
        len(selected),
        fileset.directory,
        fileset.describe(),
    )
    return FileSetSelection(selected=frozenset(selected), description=fileset.describe())


def _walk_relative(base: Path, follow_symlinks: bool) -> Iterator[str]:
    """Yield POSIX relative paths of every entry under ``base``."""
    if not base.is_dir():
        return

    def _on_error(error: OSError) -> None:
        logger.warning("Cannot read directory while resolving fileset: %s", error)

    walker = os.walk(base, followlinks=follow_symlinks, onerror=_on_error)
    for dirpath, dirnames, filenames in walker:
        dirnames.sort()
        rel_dir = Path(dirpath).relative_to(base).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"
        for name in dirnames:
            yield prefix + name
        for name in sorted(filenames):
            yield prefix + name
