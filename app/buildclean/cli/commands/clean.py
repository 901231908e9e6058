"""Clean command implementation.

Deletes the configured build directories and filesets of a project.
"""

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape

from buildclean.cli.display import print_report
from buildclean.cli.types import (
    ConfigOption,
    DirectoryOption,
    ProjectOption,
    load_project_config,
    resolve_project_dir,
)
from buildclean.core.logging_config import setup_logging
from buildclean.core.planner import ProtectedPathError
from buildclean.core.runner import CleanExecutionError, clean_project
from buildclean.utils.formatting import print_error, print_info

app = typer.Typer(
    help="Delete build output of a project.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def clean_command(
    ctx: typer.Context,
    project: ProjectOption = None,
    config_path: ConfigOption = None,
    directory: DirectoryOption = None,
    follow_symlinks: Annotated[
        bool | None,
        typer.Option(
            "--follow-symlinks/--no-follow-symlinks",
            help="Delete the contents of linked directories (the links' targets are kept).",
            show_default=False,
        ),
    ] = None,
    fail_on_error: Annotated[
        bool | None,
        typer.Option(
            "--fail-on-error/--no-fail-on-error",
            help="Abort on the first failed deletion instead of warning.",
            show_default=False,
        ),
    ] = None,
    retry_on_error: Annotated[
        bool | None,
        typer.Option(
            "--retry-on-error/--no-retry-on-error",
            help="Retry a failed deletion once after a short pause.",
            show_default=False,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be deleted without deleting anything.",
        ),
    ] = False,
) -> None:
    """Delete the configured build output.

    Whole directories are deleted first, then filesets. Command-line
    flags override buildclean.toml, which overrides user defaults.

    Examples:
        buildclean clean                       # Clean using buildclean.toml
        buildclean clean -d out -d .cache      # Also delete out/ and .cache/
        buildclean clean --no-fail-on-error    # Warn and continue on failures
        buildclean clean --dry-run             # Preview without deleting
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    project_dir = resolve_project_dir(project)
    config = load_project_config(project_dir, config_path)

    overrides: dict[str, Any] = {}
    if follow_symlinks is not None:
        overrides["follow_symlinks"] = follow_symlinks
    if fail_on_error is not None:
        overrides["fail_on_error"] = fail_on_error
    if retry_on_error is not None:
        overrides["retry_on_error"] = retry_on_error
    if overrides:
        config = config.model_copy(update=overrides)

    options = ctx.obj or {}
    if config.verbose and not options.get("verbose") and not options.get("quiet"):
        setup_logging(verbose=1)

    extra: list[Path] = directory or []
    try:
        report = clean_project(config, project_dir, extra_directories=extra, dry_run=dry_run)
    except ProtectedPathError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e
    except CleanExecutionError as e:
        print_report(e.report)
        raise typer.Exit(code=1) from e

    if report.skipped:
        print_info("Clean is skipped.")
        return

    print_report(report)
