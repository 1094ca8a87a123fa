"""CLI commands for vibectl.

This package contains all subcommand implementations.
"""

from vibectl.cli.commands import add, modules, remove, undo

__all__ = ["add", "modules", "remove", "undo"]
