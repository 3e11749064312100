"""Rich console formatting utilities.

Provides consistent formatting for better-rm output using Rich. The shared
consoles never substitute emoji codes, and messages that embed user paths
are printed without markup, highlighting or wrapping, so file names reach
the terminal verbatim.
"""

import sys

from rich.console import Console
from rich.table import Table
from rich.text import Text

from betterrm.core.theme import get_theme

PROGRAM_NAME = "better-rm"


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system(), emoji=False)
err_console = Console(
    theme=get_theme(), stderr=True, color_system=_detect_color_system(), emoji=False
)


def print_progress(message: str, style: str | None = None) -> None:
    """Print a progress line describing an action on stdout."""
    console.print(message, style=style, markup=False, highlight=False, soft_wrap=True)


def print_diagnostic(message: str, prefix: str = "") -> None:
    """Print an rm-style diagnostic line on stderr.

    Args:
        message: Diagnostic text without the program name.
        prefix: Optional prefix placed before the program name
            (e.g., the dry-run marker).
    """
    err_console.print(
        f"{prefix}{PROGRAM_NAME}: {message}",
        style="error",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def print_banner(message: str) -> None:
    """Print a dry-run banner line."""
    console.print(
        f"=== {message} ===", style="dry_run", markup=False, highlight=False, soft_wrap=True
    )


def create_protected_table(entries: tuple[str, ...], capacity: int) -> Table:
    """Create a table listing the effective protected paths.

    Args:
        entries: Protected paths in registry order.
        capacity: Maximum number of entries the registry accepts.

    Returns:
        Rich Table configured for protected path display.
    """
    table = Table(
        title=f"Protected Paths ({len(entries)}/{capacity})",
        show_header=True,
        header_style="header",
        border_style="border",
    )
    table.add_column("#", style="muted", justify="right")
    table.add_column("Path", no_wrap=True)

    for index, entry in enumerate(entries, start=1):
        table.add_row(str(index), Text(entry))

    return table
