"""Unit tests for deletion engine models.

Tests for path entries, clean targets, failures and outcomes.
"""

from pathlib import Path

import pytest
from buildclean.engine.fileset import FileSetSelection
from buildclean.engine.models import (
    CleanTarget,
    DeletionFailure,
    DeletionOutcome,
    ErrorPolicy,
    FailureKind,
    PathEntry,
    PathKind,
    TargetMode,
)


class TestPathEntry:
    """Tests for PathEntry properties."""

    @pytest.mark.parametrize(
        ("kind", "exists", "is_link", "is_directory"),
        [
            (PathKind.FILE, True, False, False),
            (PathKind.DIRECTORY, True, False, True),
            (PathKind.SYMLINK_TO_FILE, True, True, False),
            (PathKind.SYMLINK_TO_DIRECTORY, True, True, False),
            (PathKind.DANGLING_SYMLINK, True, True, False),
            (PathKind.MISSING, False, False, False),
        ],
    )
    def test_kind_properties(
        self, kind: PathKind, exists: bool, is_link: bool, is_directory: bool
    ) -> None:
        """Each kind reports existence, link-ness and directory-ness."""
        entry = PathEntry(path=Path("/x"), kind=kind)
        assert entry.exists is exists
        assert entry.is_link is is_link
        assert entry.is_directory is is_directory

    def test_frozen(self) -> None:
        """PathEntry is immutable."""
        entry = PathEntry(path=Path("/x"), kind=PathKind.FILE)
        with pytest.raises(AttributeError):
            entry.kind = PathKind.DIRECTORY  # type: ignore[misc]


class TestErrorPolicy:
    """Tests for ErrorPolicy defaults."""

    def test_defaults_are_strict_without_retry(self) -> None:
        """The default policy fails fast and does not retry."""
        policy = ErrorPolicy()
        assert policy.fail_on_error is True
        assert policy.retry_on_error is False


class TestCleanTarget:
    """Tests for CleanTarget validation."""

    def test_directory_target(self) -> None:
        """A directory target needs only a root."""
        target = CleanTarget(root=Path("/p/build"))
        assert target.mode == TargetMode.DIRECTORY
        assert target.follow_symlinks is False
        assert target.label == "/p/build"

    def test_fileset_requires_selection(self) -> None:
        """A fileset target without a selection is rejected."""
        with pytest.raises(ValueError, match="requires a resolved selection"):
            CleanTarget(root=Path("/p"), mode=TargetMode.FILESET)

    def test_directory_rejects_selection(self) -> None:
        """A directory target cannot carry a selection."""
        with pytest.raises(ValueError, match="cannot carry a selection"):
            CleanTarget(root=Path("/p"), selection=FileSetSelection())

    def test_label_includes_description(self) -> None:
        """The label appends the description."""
        target = CleanTarget(
            root=Path("/p"),
            mode=TargetMode.FILESET,
            selection=FileSetSelection(),
            description="fileset",
        )
        assert target.label == "/p (fileset)"


class TestDeletionFailure:
    """Tests for DeletionFailure descriptions."""

    @pytest.mark.parametrize(
        ("kind", "label"),
        [
            (FailureKind.KIND_MISMATCH, "kind mismatch"),
            (FailureKind.LOCKED_OR_DENIED, "locked or access denied"),
            (FailureKind.IO_ERROR, "I/O error"),
        ],
    )
    def test_describe_names_path_and_reason(self, kind: FailureKind, label: str) -> None:
        """describe() includes the path, the kind and the message."""
        failure = DeletionFailure(path=Path("/p/build/a"), kind=kind, message="boom")
        assert failure.describe() == f"Failed to delete /p/build/a ({label}): boom"


class TestDeletionOutcome:
    """Tests for DeletionOutcome aggregation."""

    def test_empty_outcome_succeeded(self) -> None:
        """A fresh outcome is successful and has no fatal failure."""
        outcome = DeletionOutcome(root=Path("/p"))
        assert outcome.succeeded is True
        assert outcome.fatal_failure is None

    def test_record_removed(self) -> None:
        """record_removed counts and remembers paths in order."""
        outcome = DeletionOutcome(root=Path("/p"))
        outcome.record_removed(Path("/p/a"))
        outcome.record_removed(Path("/p"))
        assert outcome.removed == 2
        assert outcome.removed_paths == [Path("/p/a"), Path("/p")]

    def test_warning_only_is_not_succeeded(self) -> None:
        """Non-fatal failures keep the outcome complete but unsuccessful."""
        outcome = DeletionOutcome(root=Path("/p"))
        outcome.failures.append(
            DeletionFailure(path=Path("/p/a"), kind=FailureKind.IO_ERROR, message="x")
        )
        assert outcome.completed is True
        assert outcome.succeeded is False
        assert outcome.fatal_failure is None

    def test_fatal_failure_is_last_failure(self) -> None:
        """An incomplete outcome reports its last failure as fatal."""
        failure = DeletionFailure(
            path=Path("/p/a"), kind=FailureKind.LOCKED_OR_DENIED, message="busy", fatal=True
        )
        outcome = DeletionOutcome(root=Path("/p"), failures=[failure], completed=False)
        assert outcome.fatal_failure == failure
