"""Modules commands for browsing the module registry.

Provides `vibectl modules list` and `vibectl modules show <name>`.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from vibectl.cli.types import get_project_root
from vibectl.core.manifest import load_manifest
from vibectl.models.manifest import Manifest
from vibectl.models.module import ModuleCategory, ModuleDescriptor
from vibectl.modules.registry import get_module, get_modules_by_category, resolve_dependencies
from vibectl.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Browse available modules.",
    no_args_is_help=True,
)


@app.command(name="list")
def list_command(
    ctx: typer.Context,
    category: Annotated[
        ModuleCategory | None,
        typer.Option(
            "--category",
            "-c",
            help="Only show modules in this category.",
            case_sensitive=False,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """List modules grouped by category.

    Examples:
        vibectl modules list
        vibectl modules list --category ops
    """
    manifest = load_manifest(get_project_root(ctx))
    categories = [category] if category is not None else list(ModuleCategory)

    if json_output:
        output = [
            _descriptor_to_dict(module, manifest)
            for cat in categories
            for module in get_modules_by_category(cat)
        ]
        typer.echo(json.dumps(output, indent=2))
        return

    shown = 0
    for cat in categories:
        modules = get_modules_by_category(cat)
        if not modules:
            continue

        table = Table(
            title=cat.label,
            show_header=True,
            header_style="bold_header",
            border_style="border",
        )
        table.add_column("Module", style="info", no_wrap=True)
        table.add_column("Status", justify="center")
        table.add_column("Description")
        table.add_column("Requires", style="muted")

        for module in modules:
            table.add_row(
                module.name,
                _status_markup(manifest, module.name),
                module.description,
                ", ".join(module.dependencies),
            )
            shown += 1

        console.print(table)

    if shown == 0:
        print_info("No modules found.")


@app.command()
def show(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Module name.")],
) -> None:
    """Show a module's files, dependencies, routes, and install status."""
    module = get_module(name)
    if module is None:
        print_error(f"Unknown module: {name}")
        raise typer.Exit(code=1)

    manifest = load_manifest(get_project_root(ctx))

    console.print(f"\n[bold]{module.name}[/bold] ({module.category.label})")
    console.print(f"  {module.description}")
    console.print(f"  Status: {_status_markup(manifest, module.name)}")
    console.print(f"  Package: [muted]{module.package}[/muted]")
    if module.peer_dependencies:
        console.print(f"  Peer packages: [muted]{', '.join(module.peer_dependencies)}[/muted]")

    install_order = resolve_dependencies(module.name)
    if len(install_order) > 1:
        console.print(f"  Install order: {' -> '.join(install_order)}")

    if module.files:
        console.print(f"  Files ({len(module.files)}):")
        for file in module.files:
            suffix = f" [muted]({file.description})[/muted]" if file.description else ""
            console.print(f"    {file.path}{suffix}")
    if module.routes:
        console.print("  Routes:")
        for route in module.routes:
            console.print(f"    {route}", markup=False)
    if module.config_entries:
        console.print("  Configuration:")
        for entry in module.config_entries:
            console.print(f"    {entry.key}: {entry.value}", markup=False)
    console.print()


def _status_markup(manifest: Manifest, name: str) -> str:
    if manifest.is_installed(name):
        return "[module_installed]installed[/module_installed]"
    return "[module_available]available[/module_available]"


def _descriptor_to_dict(module: ModuleDescriptor, manifest: Manifest) -> dict[str, object]:
    return {
        "name": module.name,
        "package": module.package,
        "description": module.description,
        "category": module.category.value,
        "dependencies": list(module.dependencies),
        "peerDependencies": list(module.peer_dependencies),
        "files": [file.path for file in module.files],
        "routes": [route.path for route in module.routes],
        "contentDirs": list(module.content_dirs),
        "installed": manifest.is_installed(module.name),
    }
