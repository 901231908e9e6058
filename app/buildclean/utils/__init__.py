"""Utility modules for buildclean.

This module exports commonly used utility functions.
"""

from buildclean.utils.formatting import (
    console,
    err_console,
    pluralize,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "pluralize",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
