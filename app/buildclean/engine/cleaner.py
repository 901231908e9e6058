"""Recursive deletion engine.

Deletes a clean target depth-first, children before parents, applying the
symbolic link policy of the target and the caller's error policy to every
individual deletion attempt. Failures never raise out of ``delete``; they
are classified and collected into a DeletionOutcome. Under a strict policy
the traversal stops at the first failure and the outcome is marked
incomplete.
"""

import errno
import gc
import logging
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from buildclean.engine.classifier import PathClassifier, get_classifier
from buildclean.engine.models import (
    CleanTarget,
    DeletionFailure,
    DeletionOutcome,
    ErrorPolicy,
    FailureKind,
    PathEntry,
    PathKind,
)

# Seconds to wait before the single retry of a failed deletion.
RETRY_DELAY: float = 0.25

_ON_WINDOWS = sys.platform == "win32"

_LOCK_ERRNOS: frozenset[int] = frozenset(
    code
    for code in (errno.EACCES, errno.EPERM, errno.EBUSY, getattr(errno, "ETXTBSY", None))
    if code is not None
)

# ERROR_ACCESS_DENIED, ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
_LOCK_WINERRORS: frozenset[int] = frozenset({5, 32, 33})


def classify_error(error: OSError) -> FailureKind:
    """Map an operating system error to a failure kind.

    Args:
        error: Error raised by a deletion call.

    Returns:
        The FailureKind describing the error.
    """
    if isinstance(error, (NotADirectoryError, IsADirectoryError)):
        return FailureKind.KIND_MISMATCH
    if isinstance(error, PermissionError) or error.errno in _LOCK_ERRNOS:
        return FailureKind.LOCKED_OR_DENIED
    if getattr(error, "winerror", None) in _LOCK_WINERRORS:
        return FailureKind.LOCKED_OR_DENIED
    return FailureKind.IO_ERROR


@dataclass(slots=True)
class _VisitResult:
    """State handed from a subtree to its parent."""

    # Something beneath was left in place, so the parent stays.
    kept: bool = False
    aborted: bool = False


class Cleaner:
    """Deletes clean targets according to a link policy and an error policy.

    Attributes:
        _log: Logger receiving progress and warnings.
        _classifier: Reports path kinds without following links.
        _dry_run: If True, report what would be deleted without deleting.
        _verbose: If True, log every deleted entry at INFO level.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        classifier: PathClassifier | None = None,
        *,
        dry_run: bool = False,
        verbose: bool = False,
    ) -> None:
        """Initialize the Cleaner.

        Args:
            logger: Logger for progress and warnings. Defaults to this module's logger.
            classifier: Path classifier. Defaults to the one for the running platform.
            dry_run: If True, report what would be deleted without deleting.
            verbose: If True, log each deleted entry at INFO instead of DEBUG.
        """
        self._log = logger or logging.getLogger(__name__)
        self._classifier = classifier or get_classifier()
        self._dry_run = dry_run
        self._verbose = verbose

    @property
    def dry_run(self) -> bool:
        """Whether deletions are only simulated."""
        return self._dry_run

    def delete(self, target: CleanTarget, policy: ErrorPolicy | None = None) -> DeletionOutcome:
        """Delete a clean target.

        A missing root is not an error and yields an empty, successful
        outcome. A root that is a regular file is a kind mismatch failure.
        A root that is a link, dangling or not, follows the link policy
        like any other entry.

        Args:
            target: What to delete.
            policy: Error policy. Defaults to strict without retry.

        Returns:
            DeletionOutcome describing what was removed and what failed.
        """
        policy = policy or ErrorPolicy()
        outcome = DeletionOutcome(root=target.root, dry_run=self._dry_run)

        root = self._classifier.classify(target.root)
        if not root.exists:
            self._log.debug("Skipping non-existing directory %s", target.root)
            return outcome

        if root.kind == PathKind.FILE:
            self._fail(
                outcome,
                policy,
                target.root,
                FailureKind.KIND_MISMATCH,
                "invalid base directory, expected a directory but found a file",
            )
            return outcome

        label = target.label
        if target.selection is not None and target.selection.description:
            label = f"{label} ({target.selection.description})"
        self._log.info("Deleting %s", label)

        self._visit(root, "", target, policy, outcome, is_root=True)
        return outcome

    def _visit(
        self,
        entry: PathEntry,
        relative: str,
        target: CleanTarget,
        policy: ErrorPolicy,
        outcome: DeletionOutcome,
        *,
        is_root: bool = False,
    ) -> _VisitResult:
        """Delete ``entry`` post-order.

        Args:
            entry: Classified node to process.
            relative: POSIX path of the node relative to the target root.
            target: Target being cleaned.
            policy: Error policy in effect.
            outcome: Outcome accumulating results.
            is_root: Whether ``entry`` is the target root.

        Returns:
            _VisitResult telling the parent whether it may be deleted.
        """
        result = _VisitResult()
        selection = target.selection

        if entry.kind in (PathKind.DIRECTORY, PathKind.SYMLINK_TO_DIRECTORY):
            if entry.is_link and not target.follow_symlinks:
                self._log.debug("Not recursing into symlink %s", entry.path)
            elif selection is not None and not selection.could_hold_selected(relative):
                self._log.debug("Not recursing into unselected directory %s", entry.path)
            else:
                children = self._visit_children(entry, relative, target, policy, outcome)
                if children.aborted:
                    return children
                # Leftovers inside a followed link live in the link target,
                # not beneath the link's parent.
                if not entry.is_link:
                    result.kept = children.kept

        if result.kept:
            return result

        if selection is not None and (is_root or not selection.is_selected(relative)):
            result.kept = True
            return result

        if not self._remove(entry, policy, outcome):
            result.aborted = not outcome.completed
            result.kept = True
        return result

    def _visit_children(
        self,
        entry: PathEntry,
        relative: str,
        target: CleanTarget,
        policy: ErrorPolicy,
        outcome: DeletionOutcome,
    ) -> _VisitResult:
        """Visit every child of a directory (or followed link) in lexical order."""
        result = _VisitResult()

        try:
            names = sorted(os.listdir(entry.path))
        except OSError as e:
            message = f"cannot list directory: {e}"
            self._fail(outcome, policy, entry.path, classify_error(e), message)
            result.aborted = not outcome.completed
            result.kept = True
            return result

        for name in names:
            child = self._classifier.classify(entry.path / name)
            if not child.exists:
                # Vanished since listing
                continue
            child_relative = f"{relative}/{name}" if relative else name
            child_result = self._visit(child, child_relative, target, policy, outcome)
            if child_result.aborted:
                result.aborted = True
                return result
            result.kept = result.kept or child_result.kept

        return result

    def _remove(self, entry: PathEntry, policy: ErrorPolicy, outcome: DeletionOutcome) -> bool:
        """Delete a single node, retrying once if the policy asks for it.

        Returns:
            True if the node is gone (or would be, in dry-run).
        """
        self._log_removal(entry)

        if self._dry_run:
            outcome.record_removed(entry.path)
            return True

        error = self._attempt(entry)
        if error is not None and policy.retry_on_error:
            self._log.debug("Retrying deletion of %s after: %s", entry.path, error)
            if _ON_WINDOWS:
                # Drop lingering handles held by unreachable objects
                gc.collect()
            time.sleep(RETRY_DELAY)
            error = self._attempt(entry)

        if error is None:
            outcome.record_removed(entry.path)
            return True

        kind = classify_error(error)
        if isinstance(error, NotADirectoryError):
            message = "expected a directory but found a file"
        elif isinstance(error, IsADirectoryError):
            message = "expected a file but found a directory"
        else:
            message = error.strerror or str(error)
        self._fail(outcome, policy, entry.path, kind, message)
        return False

    def _attempt(self, entry: PathEntry) -> OSError | None:
        """Make one deletion call for ``entry``.

        Returns:
            None if the node no longer exists, otherwise the error raised.
        """
        try:
            if entry.is_directory:
                os.rmdir(entry.path)
            elif entry.kind == PathKind.SYMLINK_TO_DIRECTORY and _ON_WINDOWS:
                # Junctions and directory links are removed as directories
                os.rmdir(entry.path)
            else:
                os.unlink(entry.path)
        except FileNotFoundError:
            return None
        except OSError as e:
            if not os.path.lexists(entry.path):
                return None
            return e
        return None

    def _fail(
        self,
        outcome: DeletionOutcome,
        policy: ErrorPolicy,
        path: Path,
        kind: FailureKind,
        message: str,
    ) -> None:
        """Record a failure and apply the fail-fast or warn-and-continue policy."""
        failure = DeletionFailure(path=path, kind=kind, message=message, fatal=policy.fail_on_error)
        outcome.failures.append(failure)

        if policy.fail_on_error:
            outcome.completed = False
            self._log.debug("Aborting %s: %s", outcome.root, failure.describe())
        else:
            self._log.warning(failure.describe())

    def _log_removal(self, entry: PathEntry) -> None:
        level = logging.INFO if self._verbose else logging.DEBUG
        if not self._log.isEnabledFor(level):
            return

        if entry.is_directory:
            what = "directory"
        elif entry.kind == PathKind.DANGLING_SYMLINK:
            what = "dangling symlink"
        elif entry.is_link:
            what = "symlink"
        else:
            what = "file"
        verb = "Would delete" if self._dry_run else "Deleting"
        self._log.log(level, "%s %s %s", verb, what, entry.path)
