"""CLI package for better-rm.

This package contains the Typer application.
"""

from betterrm.cli.main import app, run

__all__ = ["app", "run"]
