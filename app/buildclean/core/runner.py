"""Clean orchestration.

Runs the planned targets through a Cleaner in order and converts a fatal
outcome into CleanExecutionError for the integration layer. These
functions are shared by the ``clean`` CLI command and library callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from buildclean.core.planner import plan_targets
from buildclean.engine.cleaner import Cleaner

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from buildclean.core.config import CleanConfig
    from buildclean.engine.models import (
        CleanTarget,
        DeletionFailure,
        DeletionOutcome,
        ErrorPolicy,
    )

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanReport:
    """Outcomes of one clean invocation.

    Attributes:
        outcomes: One outcome per processed target, in execution order.
        skipped: True when cleaning was disabled by configuration.
        dry_run: Whether deletions were only simulated.
    """

    outcomes: list[DeletionOutcome] = field(default_factory=list)
    skipped: bool = False
    dry_run: bool = False

    @property
    def removed(self) -> int:
        """Total number of entries removed across all targets."""
        return sum(o.removed for o in self.outcomes)

    @property
    def failures(self) -> list[DeletionFailure]:
        """All recorded failures, in the order they occurred."""
        return [f for o in self.outcomes for f in o.failures]

    @property
    def warnings(self) -> list[DeletionFailure]:
        """Failures that did not abort their target."""
        return [f for f in self.failures if not f.fatal]

    @property
    def succeeded(self) -> bool:
        """True when every target completed without failures."""
        return all(o.succeeded for o in self.outcomes)


class CleanExecutionError(Exception):
    """Raised when a target was aborted by a fatal failure.

    Attributes:
        outcome: Outcome of the aborted target.
        report: Report covering every target processed so far.
    """

    def __init__(self, outcome: DeletionOutcome, report: CleanReport) -> None:
        self.outcome = outcome
        self.report = report
        failure = outcome.fatal_failure
        message = failure.describe() if failure else f"Failed to clean {outcome.root}"
        super().__init__(message)


def run_targets(
    targets: Sequence[CleanTarget],
    policy: ErrorPolicy,
    cleaner: Cleaner,
) -> CleanReport:
    """Clean targets in order.

    Targets after an aborted one are not touched.

    Args:
        targets: Targets to clean.
        policy: Error policy applied to every target.
        cleaner: Cleaner performing the deletions.

    Returns:
        CleanReport with one outcome per target.

    Raises:
        CleanExecutionError: If a target was aborted by a fatal failure.
    """
    report = CleanReport(dry_run=cleaner.dry_run)

    for target in targets:
        outcome = cleaner.delete(target, policy)
        report.outcomes.append(outcome)
        if not outcome.completed:
            error = CleanExecutionError(outcome, report)
            logger.error(str(error))
            raise error

    if report.warnings:
        logger.debug("Clean finished with %d warning(s)", len(report.warnings))
    return report


def clean_project(
    config: CleanConfig,
    project_dir: Path,
    *,
    extra_directories: Iterable[str | Path] = (),
    dry_run: bool = False,
    cleaner: Cleaner | None = None,
) -> CleanReport:
    """Plan and run a clean for a project.

    Args:
        config: Loaded configuration.
        project_dir: Directory relative paths are resolved against.
        extra_directories: Additional whole-directory targets.
        dry_run: Report what would be deleted without deleting.
        cleaner: Cleaner to use. Built from ``config`` if None.

    Returns:
        CleanReport for the invocation.

    Raises:
        ProtectedPathError: If a configured root is protected.
        CleanExecutionError: If a target was aborted by a fatal failure.
    """
    if config.skip:
        logger.info("Clean is skipped.")
        return CleanReport(skipped=True, dry_run=dry_run)

    targets = plan_targets(config, project_dir, extra_directories)
    if cleaner is None:
        cleaner = Cleaner(dry_run=dry_run, verbose=config.verbose)
    return run_targets(targets, config.policy, cleaner)
