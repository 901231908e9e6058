"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from buildclean import __version__
from buildclean.cli.commands import clean, init, plan
from buildclean.core.logging_config import setup_logging

# Create main Typer app
app = typer.Typer(
    name="buildclean",
    help="Delete build output directories safely.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"buildclean version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase log output (-v for info, -vv for debug).",
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only show errors.",
        ),
    ] = False,
) -> None:
    """buildclean - Delete build output directories safely.

    Removes configured build directories and filesets depth-first,
    without ever following symbolic links out of the tree unless asked to.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(clean.app, name="clean")
app.add_typer(plan.app, name="plan")
app.add_typer(init.app, name="init")


if __name__ == "__main__":
    app()
