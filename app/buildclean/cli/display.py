"""Shared Rich display functions for targets and clean results.

Provides reusable table builders and summary printers for the ``plan``
and ``clean`` commands.
"""

from rich.markup import escape
from rich.table import Table

from buildclean.core.runner import CleanReport
from buildclean.engine.models import CleanTarget, DeletionFailure, TargetMode
from buildclean.utils.formatting import console, pluralize, print_success, print_warning


def create_plan_table(targets: list[CleanTarget]) -> Table:
    """Create a Rich table describing planned clean targets.

    Args:
        targets: Targets in execution order.

    Returns:
        Rich Table with Mode, Root, Exists and Selected columns.
    """
    table = Table(
        title="Clean Targets",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Mode", width=9)
    table.add_column("Root", style="path", overflow="fold")
    table.add_column("Exists", width=6, justify="center")
    table.add_column("Selected", justify="right", width=8)

    for target in targets:
        exists = target.root.exists() or target.root.is_symlink()
        exists_text = "[success]yes[/success]" if exists else "[muted]no[/muted]"
        if target.mode == TargetMode.FILESET and target.selection is not None:
            selected = str(len(target.selection))
        else:
            selected = "[muted]all[/muted]"
        table.add_row(target.mode.value, escape(str(target.root)), exists_text, selected)

    return table


def create_results_table(report: CleanReport) -> Table:
    """Create a Rich table displaying per-target outcomes.

    Args:
        report: Report of the clean invocation.

    Returns:
        Rich Table with Status, Root, Removed and Failures columns.
    """
    title = "Results (Dry Run)" if report.dry_run else "Results"
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Root", style="path", overflow="fold")
    table.add_column("Removed", style="removed", justify="right", width=8)
    table.add_column("Failures", justify="right", width=8)

    for outcome in report.outcomes:
        if not outcome.completed:
            status = "[error]FAIL[/error]"
        elif outcome.failures:
            status = "[warning]WARN[/warning]"
        else:
            status = "[success]OK[/success]"
        table.add_row(
            status,
            escape(str(outcome.root)),
            str(outcome.removed),
            str(len(outcome.failures)),
        )

    return table


def create_failures_table(failures: list[DeletionFailure]) -> Table:
    """Create a Rich table listing failed deletions.

    Args:
        failures: Failures to display.

    Returns:
        Rich Table with Path, Reason and Details columns.
    """
    table = Table(
        title="Failures",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", style="path", overflow="fold")
    table.add_column("Reason", width=16)
    table.add_column("Details", style="muted")

    for failure in failures:
        reason = failure.kind.value.replace("_", " ")
        style = "error" if failure.fatal else "warning"
        table.add_row(
            escape(str(failure.path)),
            f"[{style}]{reason}[/{style}]",
            escape(failure.message),
        )

    return table


def print_report(report: CleanReport) -> None:
    """Print the results table, any failures, and a summary line.

    Args:
        report: Report of the clean invocation.
    """
    if not report.outcomes:
        console.print("[muted]Nothing to clean.[/muted]")
        return

    console.print(create_results_table(report))
    failures = report.failures
    if failures:
        console.print(create_failures_table(failures))

    removed = pluralize(report.removed, "entry", "entries")
    if report.dry_run:
        console.print(f"\n[info]Dry run: {removed} would be removed.[/info]")
    elif report.warnings:
        print_warning(
            f"Removed {removed}; {pluralize(len(report.warnings), 'path')} could not be deleted."
        )
    elif report.succeeded:
        print_success(f"Removed {removed}.")
