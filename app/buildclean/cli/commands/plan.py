"""Plan command implementation.

Shows what ``clean`` would operate on without deleting anything.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape

from buildclean.cli.display import create_plan_table
from buildclean.cli.types import (
    ConfigOption,
    DirectoryOption,
    OutputFormat,
    ProjectOption,
    load_project_config,
    resolve_project_dir,
)
from buildclean.core.planner import ProtectedPathError, plan_targets
from buildclean.engine.models import CleanTarget
from buildclean.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Show the resolved clean targets.",
    invoke_without_command=True,
)


def _target_to_dict(target: CleanTarget) -> dict[str, Any]:
    """Convert a target to a JSON-serializable dictionary."""
    return {
        "mode": target.mode.value,
        "root": str(target.root),
        "exists": target.root.exists() or target.root.is_symlink(),
        "follow_symlinks": target.follow_symlinks,
        "selected": sorted(target.selection.selected) if target.selection else None,
    }


@app.callback(invoke_without_command=True)
def plan_command(
    ctx: typer.Context,
    project: ProjectOption = None,
    config_path: ConfigOption = None,
    directory: DirectoryOption = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the targets ``clean`` would process, in order.

    Examples:
        buildclean plan                  # Show targets as a table
        buildclean plan --format json    # Output as JSON
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    project_dir = resolve_project_dir(project)
    config = load_project_config(project_dir, config_path)

    extra: list[Path] = directory or []
    try:
        targets = plan_targets(config, project_dir, extra)
    except ProtectedPathError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        data = {
            "project": str(project_dir),
            "skip": config.skip,
            "targets": [_target_to_dict(t) for t in targets],
        }
        console.print_json(json.dumps(data))
        return

    if config.skip:
        print_info("Clean is skipped by configuration.")

    if not targets:
        console.print("[muted]No targets configured.[/muted]")
        return

    console.print(create_plan_table(targets))
