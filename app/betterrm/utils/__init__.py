"""Utility modules for better-rm.

This module exports commonly used output helpers.
"""

from betterrm.utils.formatting import (
    console,
    create_protected_table,
    err_console,
    print_banner,
    print_diagnostic,
    print_progress,
)

__all__ = [
    "console",
    "create_protected_table",
    "err_console",
    "print_banner",
    "print_diagnostic",
    "print_progress",
]
