"""Turn a clean configuration into an ordered list of clean targets.

Whole-directory targets come first, in configuration order, followed by
one fileset target per configured fileset. Relative paths are resolved
against the project directory. Every root is checked against the
protected-root guard before any target is returned, so a bad
configuration fails before anything is deleted.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from buildclean.core.config import CleanConfig, FileSetConfig
from buildclean.engine.fileset import FileSet, resolve_fileset
from buildclean.engine.models import CleanTarget, TargetMode
from buildclean.engine.protected import is_protected_root

logger = logging.getLogger(__name__)


class ProtectedPathError(Exception):
    """Raised when a configured clean root is a protected location."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Refusing to clean protected location: {path}")


def _absolute(path: str | Path, project_dir: Path) -> Path:
    """Resolve ``path`` against the project directory without following links."""
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = project_dir / candidate
    return candidate


def plan_targets(
    config: CleanConfig,
    project_dir: Path,
    extra_directories: Iterable[str | Path] = (),
) -> list[CleanTarget]:
    """Build the clean targets for a configuration.

    Args:
        config: Loaded configuration.
        project_dir: Directory relative paths are resolved against.
        extra_directories: Additional whole-directory targets (e.g. from the
            command line), always included even with
            ``exclude_default_directories``.

    Returns:
        Targets in execution order, duplicates removed.

    Raises:
        ProtectedPathError: If any root is a protected location.
    """
    project_dir = project_dir.absolute()
    targets: list[CleanTarget] = []
    seen: set[tuple[Path, TargetMode]] = set()

    directories: list[str | Path] = []
    if config.exclude_default_directories:
        logger.debug("Default directories excluded by configuration")
    else:
        directories.extend(config.directories)
    directories.extend(extra_directories)

    for directory in directories:
        root = _absolute(directory, project_dir)
        _check_protected(root, project_dir)
        key = (root, TargetMode.DIRECTORY)
        if key in seen:
            continue
        seen.add(key)
        targets.append(
            CleanTarget(
                root=root,
                mode=TargetMode.DIRECTORY,
                follow_symlinks=config.follow_symlinks,
            )
        )

    for fileset_config in config.filesets:
        targets.append(_fileset_target(fileset_config, project_dir))

    return targets


def _fileset_target(fileset_config: FileSetConfig, project_dir: Path) -> CleanTarget:
    """Resolve a configured fileset into a selective target."""
    root = _absolute(fileset_config.directory, project_dir)
    _check_protected(root, project_dir, allow_base=True)

    fileset = FileSet(
        directory=root,
        includes=tuple(fileset_config.includes),
        excludes=tuple(fileset_config.excludes),
        use_default_excludes=fileset_config.use_default_excludes,
        follow_symlinks=fileset_config.follow_symlinks,
    )
    return CleanTarget(
        root=root,
        mode=TargetMode.FILESET,
        selection=resolve_fileset(fileset),
        follow_symlinks=fileset_config.follow_symlinks,
        description="fileset",
    )


def _check_protected(root: Path, project_dir: Path, *, allow_base: bool = False) -> None:
    """Raise ProtectedPathError if ``root`` may not be cleaned.

    A fileset never deletes its own base directory, so filesets may be
    rooted at the project directory itself.
    """
    if allow_base and root.resolve() == project_dir.resolve():
        return
    if is_protected_root(root, project_dir):
        raise ProtectedPathError(root)
