"""CLI package for vibectl.

This package contains the Typer application and all subcommands.
"""

from vibectl.cli.main import app

__all__ = ["app"]
