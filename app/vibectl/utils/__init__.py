"""Utility modules for vibectl.

This module exports commonly used utility functions.
"""

from vibectl.utils.formatting import (
    console,
    create_files_table,
    err_console,
    print_error,
    print_info,
    print_notes,
    print_paths,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_files_table",
    "err_console",
    "print_error",
    "print_info",
    "print_notes",
    "print_paths",
    "print_success",
    "print_warning",
]
