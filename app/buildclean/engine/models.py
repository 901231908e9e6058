"""Deletion engine domain models.

This module defines the data structures shared by the classifier, the
fileset resolver and the cleaner: path kinds, clean targets, the error
policy, and the per-target deletion outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildclean.engine.fileset import FileSetSelection


class PathKind(str, Enum):
    """Kind of a filesystem node, determined without following links.

    Attributes:
        FILE: Regular file (or any non-directory, non-link node).
        DIRECTORY: Real directory.
        SYMLINK_TO_FILE: Symbolic link whose target is not a directory.
        SYMLINK_TO_DIRECTORY: Symbolic link or junction pointing at a directory.
        DANGLING_SYMLINK: Symbolic link whose target does not exist.
        MISSING: Nothing exists at the path.
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK_TO_FILE = "symlink_to_file"
    SYMLINK_TO_DIRECTORY = "symlink_to_directory"
    DANGLING_SYMLINK = "dangling_symlink"
    MISSING = "missing"


class TargetMode(str, Enum):
    """How a clean target is processed.

    Attributes:
        DIRECTORY: Delete everything under the root, then the root itself.
        FILESET: Delete only entries selected by a resolved fileset.
    """

    DIRECTORY = "directory"
    FILESET = "fileset"


class FailureKind(str, Enum):
    """Classification of a failed deletion attempt.

    Attributes:
        KIND_MISMATCH: The path is not the kind the deletion required
            (a file where a directory was expected, or the reverse).
        LOCKED_OR_DENIED: The entry is in use or permission was refused.
        IO_ERROR: Any other operating system error.
    """

    KIND_MISMATCH = "kind_mismatch"
    LOCKED_OR_DENIED = "locked_or_denied"
    IO_ERROR = "io_error"


_FAILURE_LABELS: dict[FailureKind, str] = {
    FailureKind.KIND_MISMATCH: "kind mismatch",
    FailureKind.LOCKED_OR_DENIED: "locked or access denied",
    FailureKind.IO_ERROR: "I/O error",
}


@dataclass(frozen=True, slots=True)
class PathEntry:
    """A single filesystem node observed during traversal.

    Attributes:
        path: Absolute path of the node.
        kind: Kind of the node at the time it was classified.
    """

    path: Path
    kind: PathKind

    @property
    def exists(self) -> bool:
        """Whether anything (including a dangling link) exists at the path."""
        return self.kind != PathKind.MISSING

    @property
    def is_link(self) -> bool:
        """Whether the node itself is a symbolic link or junction."""
        return self.kind in (
            PathKind.SYMLINK_TO_FILE,
            PathKind.SYMLINK_TO_DIRECTORY,
            PathKind.DANGLING_SYMLINK,
        )

    @property
    def is_directory(self) -> bool:
        """Whether the node is a real directory (links excluded)."""
        return self.kind == PathKind.DIRECTORY


@dataclass(frozen=True, slots=True)
class ErrorPolicy:
    """Failure handling knobs consulted by the cleaner.

    Attributes:
        fail_on_error: Abort the current target on the first failure when
            True, record a warning and keep going when False.
        retry_on_error: Retry a failed deletion once before treating it
            as a failure.
    """

    fail_on_error: bool = True
    retry_on_error: bool = False


@dataclass(frozen=True, slots=True)
class CleanTarget:
    """A root path to clean and how to clean it.

    Attributes:
        root: Absolute root path of the target.
        mode: Whole-directory or fileset-selective deletion.
        selection: Resolved fileset, required for FILESET mode.
        follow_symlinks: Recurse into linked directories to delete their
            contents (the link target itself is never deleted).
        description: Optional label used in log messages and reports.
    """

    root: Path
    mode: TargetMode = TargetMode.DIRECTORY
    selection: FileSetSelection | None = None
    follow_symlinks: bool = False
    description: str | None = None

    def __post_init__(self) -> None:
        """Validate the target after initialization."""
        if not str(self.root):
            msg = "Target root cannot be empty"
            raise ValueError(msg)
        if self.mode == TargetMode.FILESET and self.selection is None:
            msg = f"Fileset target requires a resolved selection: {self.root}"
            raise ValueError(msg)
        if self.mode == TargetMode.DIRECTORY and self.selection is not None:
            msg = f"Directory target cannot carry a selection: {self.root}"
            raise ValueError(msg)

    @property
    def label(self) -> str:
        """Human readable label for the target."""
        if self.description:
            return f"{self.root} ({self.description})"
        return str(self.root)


@dataclass(frozen=True, slots=True)
class DeletionFailure:
    """A deletion attempt that did not succeed.

    Attributes:
        path: Path that could not be deleted.
        kind: Classification of the failure.
        message: Underlying reason reported by the operating system.
        fatal: Whether the failure aborted the target.
    """

    path: Path
    kind: FailureKind
    message: str
    fatal: bool = False

    def describe(self) -> str:
        """Return a one-line description naming the path and the reason."""
        return f"Failed to delete {self.path} ({_FAILURE_LABELS[self.kind]}): {self.message}"


@dataclass(slots=True)
class DeletionOutcome:
    """Aggregate result of cleaning one target.

    Attributes:
        root: Root of the target that was processed.
        removed: Number of entries removed (or that would be, in dry-run).
        removed_paths: Removed entries in the order they were deleted.
        failures: Failures recorded while processing the target.
        completed: False when a fatal failure stopped the traversal.
        dry_run: Whether the outcome describes a simulated run.
    """

    root: Path
    removed: int = 0
    removed_paths: list[Path] = field(default_factory=list)
    failures: list[DeletionFailure] = field(default_factory=list)
    completed: bool = True
    dry_run: bool = False

    @property
    def succeeded(self) -> bool:
        """True when the target completed without any recorded failure."""
        return self.completed and not self.failures

    @property
    def fatal_failure(self) -> DeletionFailure | None:
        """The failure that aborted the target, if any."""
        if self.completed:
            return None
        return self.failures[-1] if self.failures else None

    def record_removed(self, path: Path) -> None:
        """Count a removed entry."""
        self.removed += 1
        self.removed_paths.append(path)
