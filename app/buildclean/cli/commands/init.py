"""Init command implementation.

Creates a buildclean.toml file with the default configuration.
"""

from typing import Annotated

import typer
from rich.markup import escape

from buildclean.cli.types import ProjectOption, resolve_project_dir
from buildclean.core.config import CleanConfig, ConfigError, config_exists, save_config
from buildclean.core.paths import get_project_config_path
from buildclean.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create a default buildclean.toml.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def init_config(
    ctx: typer.Context,
    project: ProjectOption = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing buildclean.toml.",
        ),
    ] = False,
) -> None:
    """Write a buildclean.toml with the default settings.

    Examples:
        buildclean init                # Create ./buildclean.toml
        buildclean init -C ../app      # Create ../app/buildclean.toml
        buildclean init --force        # Overwrite an existing file
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    output_path = get_project_config_path(resolve_project_dir(project))

    if config_exists(output_path) and not force:
        print_error(f"Configuration already exists: {output_path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=1)

    config = CleanConfig()
    try:
        saved_path = save_config(config, output_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Configuration created: {saved_path}")
    console.print(f"  [muted]Directories: {', '.join(config.directories)}[/muted]")
