"""CLI package for buildclean.

This package contains the Typer application and all subcommands.
"""

from buildclean.cli.main import app

__all__ = ["app"]
