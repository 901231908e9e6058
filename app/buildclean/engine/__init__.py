"""Deletion engine module.

This module provides path classification, fileset resolution, the
protected-root guard, and the recursive cleaner that deletes build
output according to a link policy and an error policy.
"""

from buildclean.engine.classifier import (
    PathClassifier,
    PosixPathClassifier,
    WindowsPathClassifier,
    get_classifier,
)
from buildclean.engine.cleaner import Cleaner, classify_error
from buildclean.engine.fileset import (
    DEFAULT_EXCLUDES,
    FileSet,
    FileSetSelection,
    resolve_fileset,
)
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
from buildclean.engine.protected import PROTECTED_ROOTS, is_protected_root

__all__ = [
    "DEFAULT_EXCLUDES",
    "PROTECTED_ROOTS",
    "CleanTarget",
    "Cleaner",
    "DeletionFailure",
    "DeletionOutcome",
    "ErrorPolicy",
    "FailureKind",
    "FileSet",
    "FileSetSelection",
    "PathClassifier",
    "PathEntry",
    "PathKind",
    "PosixPathClassifier",
    "TargetMode",
    "WindowsPathClassifier",
    "classify_error",
    "get_classifier",
    "is_protected_root",
    "resolve_fileset",
]
