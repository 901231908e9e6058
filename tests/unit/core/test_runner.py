"""Unit tests for clean orchestration."""

import errno
import logging
import os
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from buildclean.core.config import CleanConfig
from buildclean.core.runner import CleanExecutionError, CleanReport, clean_project, run_targets
from buildclean.engine.cleaner import Cleaner
from buildclean.engine.models import (
    CleanTarget,
    DeletionFailure,
    DeletionOutcome,
    ErrorPolicy,
    FailureKind,
)


def _failure(path: str, fatal: bool = False) -> DeletionFailure:
    return DeletionFailure(
        path=Path(path), kind=FailureKind.LOCKED_OR_DENIED, message="busy", fatal=fatal
    )


class TestCleanReport:
    """Tests for CleanReport aggregation."""

    def test_empty(self) -> None:
        """An empty report succeeded with nothing removed."""
        report = CleanReport()
        assert report.removed == 0
        assert report.failures == []
        assert report.succeeded is True

    def test_aggregates_outcomes(self) -> None:
        """Counts and failures are summed over outcomes."""
        first = DeletionOutcome(root=Path("/a"), removed=3)
        second = DeletionOutcome(root=Path("/b"), removed=2, failures=[_failure("/b/x")])
        report = CleanReport(outcomes=[first, second])

        assert report.removed == 5
        assert len(report.failures) == 1
        assert len(report.warnings) == 1
        assert report.succeeded is False


class TestRunTargets:
    """Tests for run_targets()."""

    def test_runs_in_order(self) -> None:
        """Targets are passed to the cleaner in order with the policy."""
        targets = [CleanTarget(root=Path("/a")), CleanTarget(root=Path("/b"))]
        policy = ErrorPolicy(fail_on_error=False)
        cleaner = MagicMock(spec=Cleaner)
        cleaner.dry_run = False
        cleaner.delete.side_effect = lambda t, p: DeletionOutcome(root=t.root, removed=1)

        report = run_targets(targets, policy, cleaner)

        assert [c.args for c in cleaner.delete.call_args_list] == [
            (targets[0], policy),
            (targets[1], policy),
        ]
        assert report.removed == 2

    def test_fatal_outcome_raises_and_stops(self, caplog: pytest.LogCaptureFixture) -> None:
        """An incomplete outcome raises and later targets are skipped."""
        targets = [CleanTarget(root=Path("/a")), CleanTarget(root=Path("/b"))]
        failed = DeletionOutcome(
            root=Path("/a"), failures=[_failure("/a/x", fatal=True)], completed=False
        )
        cleaner = MagicMock(spec=Cleaner)
        cleaner.dry_run = False
        cleaner.delete.return_value = failed

        with (
            caplog.at_level(logging.ERROR, logger="buildclean"),
            pytest.raises(CleanExecutionError) as exc_info,
        ):
            run_targets(targets, ErrorPolicy(), cleaner)

        assert cleaner.delete.call_count == 1
        assert exc_info.value.outcome is failed
        assert exc_info.value.report.outcomes == [failed]
        assert str(exc_info.value) == "Failed to delete /a/x (locked or access denied): busy"
        assert "Failed to delete /a/x" in caplog.text

    def test_warnings_do_not_raise(self) -> None:
        """Complete outcomes with failures are returned."""
        outcome = DeletionOutcome(root=Path("/a"), failures=[_failure("/a/x")])
        cleaner = MagicMock(spec=Cleaner)
        cleaner.dry_run = False
        cleaner.delete.return_value = outcome

        report = run_targets([CleanTarget(root=Path("/a"))], ErrorPolicy(False), cleaner)

        assert report.warnings == outcome.failures

    def test_dry_run_flag_copied(self) -> None:
        """The report records the cleaner's dry-run mode."""
        cleaner = MagicMock(spec=Cleaner)
        cleaner.dry_run = True
        assert run_targets([], ErrorPolicy(), cleaner).dry_run is True


class TestCleanProject:
    """Tests for clean_project()."""

    def test_skip(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """skip=True touches nothing."""
        build = tmp_path / "build"
        build.mkdir()

        with caplog.at_level(logging.INFO, logger="buildclean"):
            report = clean_project(CleanConfig(skip=True), tmp_path)

        assert report.skipped is True
        assert report.outcomes == []
        assert build.exists()
        assert "Clean is skipped." in caplog.messages

    def test_cleans_configured_directories(self, tmp_path: Path) -> None:
        """Configured and extra directories are deleted; others survive."""
        for name in ("build", "dist", "out", "src"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "file").write_text("x")

        report = clean_project(CleanConfig(), tmp_path, extra_directories=["out"])

        assert report.succeeded is True
        assert report.removed == 6
        assert [p.name for p in tmp_path.iterdir()] == ["src"]

    def test_missing_directories_are_fine(self, tmp_path: Path) -> None:
        """Nothing to delete is still a success."""
        report = clean_project(CleanConfig(), tmp_path)

        assert report.succeeded is True
        assert report.removed == 0
        assert len(report.outcomes) == 2

    def test_dry_run(self, tmp_path: Path) -> None:
        """Dry-run reports without deleting."""
        (tmp_path / "build").mkdir()

        report = clean_project(CleanConfig(), tmp_path, dry_run=True)

        assert report.dry_run is True
        assert report.removed == 1
        assert (tmp_path / "build").exists()

    def test_strict_failure_leaves_later_targets(self, tmp_path: Path) -> None:
        """A fatal failure in the first target leaves the second untouched."""
        for name in ("build", "dist"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "file").write_text("x")
        blocked = tmp_path / "build" / "file"
        real_unlink = os.unlink

        def _unlink(path: Any, *args: Any, **kwargs: Any) -> None:
            if os.fspath(path) == os.fspath(blocked):
                raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
            real_unlink(path, *args, **kwargs)

        with (
            patch("buildclean.engine.cleaner.os.unlink", side_effect=_unlink),
            pytest.raises(CleanExecutionError) as exc_info,
        ):
            clean_project(CleanConfig(), tmp_path)

        assert exc_info.value.outcome.root == tmp_path / "build"
        assert (tmp_path / "dist" / "file").exists()

    def test_lenient_failure_continues(self, tmp_path: Path) -> None:
        """Under a lenient policy every target is processed."""
        for name in ("build", "dist"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "file").write_text("x")
        blocked = tmp_path / "build" / "file"
        real_unlink = os.unlink

        def _unlink(path: Any, *args: Any, **kwargs: Any) -> None:
            if os.fspath(path) == os.fspath(blocked):
                raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
            real_unlink(path, *args, **kwargs)

        with patch("buildclean.engine.cleaner.os.unlink", side_effect=_unlink):
            report = clean_project(CleanConfig(fail_on_error=False), tmp_path)

        assert not (tmp_path / "dist").exists()
        assert blocked.exists()
        assert report.warnings[0].path == blocked
