"""Shared helpers for CLI commands.

This module provides the helpers used across multiple CLI command modules
to avoid code duplication.
"""

from pathlib import Path

import typer


def get_project_root(ctx: typer.Context) -> Path:
    """Get the project root selected by the global --project option.

    Args:
        ctx: Typer context of the running command.

    Returns:
        Project root directory, the current directory by default.
    """
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    root = obj.get("project_root")
    return Path(root) if root is not None else Path.cwd()
