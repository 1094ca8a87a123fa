"""Add command for installing modules.

This module provides the `vibectl add <module>` command, which installs a
module and its missing dependencies and records the install for undo.
"""

import json
from typing import Annotated

import typer

from vibectl.cli.types import get_project_root
from vibectl.core.installer import AddResult, InstallError, PartialInstallError, add_module
from vibectl.core.manifest import load_manifest
from vibectl.core.paths import UnsafePathError
from vibectl.models.module import ModuleDescriptor
from vibectl.modules.registry import get_module, list_modules
from vibectl.utils.formatting import (
    console,
    create_files_table,
    print_error,
    print_info,
    print_notes,
    print_success,
    print_warning,
)


def add(
    ctx: typer.Context,
    module: Annotated[str, typer.Argument(help="Module name (e.g. marketing, payments).")],
    reinstall: Annotated[
        bool,
        typer.Option(
            "--reinstall",
            help="Rewrite the module's files even if it is already installed.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Install a module and its dependencies.

    Files are written into the project and tracked with checksums in
    .vibe/modules.json. Existing files that no module created are kept.

    Examples:
        vibectl add marketing
        vibectl add payments --reinstall
        vibectl -C ./my-app add admin
    """
    project_root = get_project_root(ctx)
    descriptor = get_module(module)

    if descriptor is None:
        print_error(f"Unknown module: {module}")
        _print_available_modules()
        raise typer.Exit(code=1)

    if load_manifest(project_root).is_installed(module) and not reinstall:
        print_warning(f"Module '{module}' is already installed. Use --reinstall to rewrite it.")
        return

    try:
        result = add_module(project_root, module, reinstall=reinstall)
    except PartialInstallError as e:
        print_error(str(e))
        if e.written:
            print_info("Files written so far are tracked. Run 'vibectl undo' to remove them.")
        raise typer.Exit(code=1) from e
    except (InstallError, UnsafePathError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Failed to write module files: {e}")
        raise typer.Exit(code=1) from e

    if json_output:
        _print_json(module, result, descriptor)
        return

    _print_result(result)
    print_notes("Routes to register:", [str(route) for route in descriptor.routes])
    print_notes(
        "Configuration to add in vibe.config.ts:",
        [f"{c.key}: {c.value}  // {c.description}" for c in descriptor.config_entries],
    )

    if descriptor.post_install_steps:
        console.print("\n[bold]Next steps:[/bold]")
        for step in descriptor.post_install_steps:
            console.print(f"  {step}")
        console.print()

    print_success(f"Module '{module}' installed. Run 'vibectl undo' to revert.")


def _print_result(result: AddResult) -> None:
    """Show installed modules and the files they wrote.

    Args:
        result: Outcome of the install.
    """
    if result.skipped:
        print_info(f"Already installed: {', '.join(result.skipped)}")

    console.print(f"\n[bold]Installed:[/bold] {', '.join(result.installed)}")

    if not result.files:
        print_info("No files to create.")
        return

    table = create_files_table(f"Created {len(result.files)} file(s)")
    for path in result.paths:
        table.add_row("[added]+added[/added]", path)
    console.print(table)


def _print_json(module: str, result: AddResult, descriptor: ModuleDescriptor) -> None:
    """Print the install outcome as JSON for scripting."""
    output = {
        "module": module,
        "installed": result.installed,
        "skipped": result.skipped,
        "files": [f.model_dump() for f in result.files],
        "routes": [str(route) for route in descriptor.routes],
    }
    typer.echo(json.dumps(output, indent=2))


def _print_available_modules() -> None:
    """List registry modules after an unknown module name."""
    console.print("\nAvailable modules:")
    for descriptor in list_modules():
        console.print(f"  [info]{descriptor.name:<20}[/info] {descriptor.description}")
    console.print()
