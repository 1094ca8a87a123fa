"""Remove command for uninstalling modules.

This module provides the `vibectl remove <module>` command. Only files
whose content still matches the installed checksum are deleted; edited
files are kept and listed.
"""

import json
from typing import Annotated

import typer

from vibectl.cli.types import get_project_root
from vibectl.core.paths import UnsafePathError
from vibectl.core.remover import RemovalResult, remove_module
from vibectl.modules.registry import get_module
from vibectl.utils.formatting import (
    console,
    create_files_table,
    print_error,
    print_info,
    print_notes,
    print_success,
    print_warning,
)


def remove(
    ctx: typer.Context,
    module: Annotated[str, typer.Argument(help="Module name to remove.")],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Remove an installed module.

    Deletes the module's unmodified files and drops it from
    .vibe/modules.json. Files you have edited are kept. The removal can be
    reverted with 'vibectl undo'.

    Examples:
        vibectl remove marketing
        vibectl remove sales --json
    """
    project_root = get_project_root(ctx)

    try:
        result = remove_module(project_root, module)
    except UnsafePathError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Failed to remove module files: {e}")
        raise typer.Exit(code=1) from e

    if result is None:
        print_error(f"Module '{module}' is not installed.")
        raise typer.Exit(code=1)

    if json_output:
        output = {"module": module, "removed": result.removed, "modified": result.modified}
        typer.echo(json.dumps(output, indent=2))
        return

    _print_result(result)
    descriptor = get_module(module)
    if descriptor is not None:
        print_notes(
            "Routes to remove from your router:",
            [f"{route.method.upper()} {route.path}" for route in descriptor.routes],
        )
    print_success(f"Module '{module}' removed. Run 'vibectl undo' to restore it.")


def _print_result(result: RemovalResult) -> None:
    """Show removed and kept files.

    Args:
        result: Outcome of the removal.
    """
    if not result.removed and not result.modified:
        print_info("No files to remove.")
        return

    table = create_files_table("Module Files")
    for path in result.removed:
        table.add_row("[removed]-removed[/removed]", path)
    for path in result.modified:
        table.add_row("[modified]~kept[/modified]", path)
    console.print(table)

    if result.modified:
        print_warning(
            f"{len(result.modified)} modified file(s) were kept. Remove them manually if unneeded."
        )
