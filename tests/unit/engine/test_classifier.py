"""Unit tests for path classification."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from buildclean.engine.classifier import (
    PosixPathClassifier,
    WindowsPathClassifier,
    get_classifier,
)
from buildclean.engine.models import PathKind


class TestPosixPathClassifier:
    """Tests for PosixPathClassifier."""

    def test_file(self, tmp_path: Path) -> None:
        """Regular files are FILE."""
        path = tmp_path / "a.txt"
        path.write_text("x")
        assert PosixPathClassifier().classify(path).kind == PathKind.FILE

    def test_directory(self, tmp_path: Path) -> None:
        """Real directories are DIRECTORY."""
        assert PosixPathClassifier().classify(tmp_path).kind == PathKind.DIRECTORY

    def test_missing(self, tmp_path: Path) -> None:
        """Nonexistent paths are MISSING."""
        assert PosixPathClassifier().classify(tmp_path / "nope").kind == PathKind.MISSING

    def test_missing_under_file(self, tmp_path: Path) -> None:
        """A path below a regular file is MISSING, not an error."""
        parent = tmp_path / "file"
        parent.write_text("x")
        assert PosixPathClassifier().classify(parent / "child").kind == PathKind.MISSING

    @pytest.mark.usefixtures("symlinks")
    def test_symlink_to_file(self, tmp_path: Path) -> None:
        """A link to a file is SYMLINK_TO_FILE."""
        target = tmp_path / "target.txt"
        target.write_text("x")
        link = tmp_path / "link"
        link.symlink_to(target)
        assert PosixPathClassifier().classify(link).kind == PathKind.SYMLINK_TO_FILE

    @pytest.mark.usefixtures("symlinks")
    def test_symlink_to_directory(self, tmp_path: Path) -> None:
        """A link to a directory is SYMLINK_TO_DIRECTORY."""
        target = tmp_path / "dir"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target, target_is_directory=True)
        assert PosixPathClassifier().classify(link).kind == PathKind.SYMLINK_TO_DIRECTORY

    @pytest.mark.usefixtures("symlinks")
    def test_dangling_symlink(self, tmp_path: Path) -> None:
        """A link whose target is gone is DANGLING_SYMLINK."""
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "gone")
        entry = PosixPathClassifier().classify(link)
        assert entry.kind == PathKind.DANGLING_SYMLINK
        assert entry.exists is True


class TestWindowsPathClassifier:
    """Tests for WindowsPathClassifier."""

    def test_junction_is_directory_link(self, tmp_path: Path) -> None:
        """A junction pointing at a directory is SYMLINK_TO_DIRECTORY."""
        with patch("buildclean.engine.classifier.os.path.isjunction", return_value=True):
            entry = WindowsPathClassifier().classify(tmp_path)
        assert entry.kind == PathKind.SYMLINK_TO_DIRECTORY

    def test_dangling_junction(self, tmp_path: Path) -> None:
        """A junction whose target is gone is DANGLING_SYMLINK."""
        with patch("buildclean.engine.classifier.os.path.isjunction", return_value=True):
            entry = WindowsPathClassifier().classify(tmp_path / "gone")
        assert entry.kind == PathKind.DANGLING_SYMLINK

    def test_plain_directory(self, tmp_path: Path) -> None:
        """Without a junction it classifies like lstat."""
        with patch.object(os.path, "isjunction", return_value=False):
            entry = WindowsPathClassifier().classify(tmp_path)
        assert entry.kind == PathKind.DIRECTORY


class TestGetClassifier:
    """Tests for platform selection."""

    def test_windows(self) -> None:
        """win32 selects the Windows classifier."""
        assert isinstance(get_classifier("win32"), WindowsPathClassifier)

    def test_linux(self) -> None:
        """Other platforms select the POSIX classifier."""
        assert isinstance(get_classifier("linux"), PosixPathClassifier)
