"""Logging configuration for buildclean.

Library code only creates loggers; handlers are installed here, once per
CLI invocation, on the ``buildclean`` package logger.
"""

import logging

from rich.logging import RichHandler

from buildclean.utils.formatting import err_console

# Package logger every module logger propagates to
PACKAGE_LOGGER_NAME = "buildclean"


def verbosity_level(verbose: int, quiet: bool = False) -> int:
    """Map CLI verbosity flags to a logging level.

    Args:
        verbose: Number of ``-v`` flags.
        quiet: Whether ``--quiet`` was given.

    Returns:
        ERROR when quiet, WARNING by default, INFO for -v, DEBUG for -vv.
    """
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(verbose: int = 0, quiet: bool = False) -> logging.Logger:
    """Configure the package logger to write through Rich to stderr.

    Calling this again replaces the handler installed by a previous call.

    Args:
        verbose: Number of ``-v`` flags.
        quiet: Only show errors.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    level = verbosity_level(verbose, quiet)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=verbose >= 2,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
