"""Undo command for reverting the last operation.

This module provides the `vibectl undo` command, which reverses the most
recent add, remove, or generate operation recorded in .vibe/undo-stack.json.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from vibectl.cli.types import get_project_root
from vibectl.core.paths import UnsafePathError
from vibectl.core.undo import UndoOutcome, clear_stack, load_stack, peek_entry, undo_last
from vibectl.models.undo import ReverseActionType, UndoEntry
from vibectl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_paths,
    print_success,
    print_warning,
)

app = typer.Typer(
    name="undo",
    help="Undo the last operation.",
    invoke_without_command=True,
)

_REVERSE_LABELS = {
    ReverseActionType.DELETE_FILES: "delete files",
    ReverseActionType.RESTORE_FILES: "restore files",
    ReverseActionType.RUN_COMMAND: "run command",
}


@app.callback(invoke_without_command=True)
def undo(
    ctx: typer.Context,
    list_entries: Annotated[
        bool,
        typer.Option(
            "--list",
            "-l",
            help="List undoable operations, newest first.",
        ),
    ] = False,
    clear: Annotated[
        bool,
        typer.Option(
            "--clear",
            help="Discard all undo history.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be undone without executing.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
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
    """Undo the last operation.

    Reverses the most recent operation on the undo stack:
    - add -> delete the files it created
    - remove -> restore the files it deleted

    Examples:
        vibectl undo              # Undo with confirmation
        vibectl undo --dry-run    # Preview only
        vibectl undo -y           # Skip confirmation
        vibectl undo --list       # Show undo history
    """
    if ctx.invoked_subcommand is not None:
        return

    project_root = get_project_root(ctx)

    if list_entries:
        _list_entries(load_stack(project_root).entries, json_output)
        return

    if clear:
        if not yes and not typer.confirm("Discard all undo history?"):
            print_info("Cancelled.")
            return
        clear_stack(project_root)
        print_success("Undo history cleared.")
        return

    entry = peek_entry(project_root)
    if entry is None:
        if json_output:
            typer.echo(json.dumps({"undone": None}, indent=2))
        else:
            print_info("Nothing to undo.")
        return

    if not json_output:
        _show_undo_preview(entry)

    if dry_run:
        if json_output:
            typer.echo(json.dumps({"dryRun": True, "entry": entry.to_dict()}, indent=2))
        else:
            print_info("Dry run: no changes made.")
        return

    if not yes and not json_output:
        confirm = typer.confirm("Do you want to undo this operation?")
        if not confirm:
            print_info("Cancelled.")
            return

    try:
        outcome = undo_last(project_root)
    except UnsafePathError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Failed to undo operation: {e}")
        raise typer.Exit(code=1) from e

    if outcome is None:
        print_info("Nothing to undo.")
        return

    if json_output:
        _print_outcome_json(outcome)
        return

    if outcome.entry.reverse.type == ReverseActionType.RUN_COMMAND:
        print_warning(f"Command was not run: {outcome.entry.reverse.command}")
    print_success(f"Undone: {outcome.entry.description} ({len(outcome.affected)} file(s))")


def _show_undo_preview(entry: UndoEntry) -> None:
    """Display what undoing an entry will do.

    Args:
        entry: The entry on top of the stack.
    """
    action = _REVERSE_LABELS[entry.reverse.type]

    console.print(f"\n[bold]Undo: {entry.description} -> {action}[/bold]")
    console.print(f"  ID: {entry.id}")
    console.print(f"  Date: {entry.timestamp}")
    if entry.reverse.type == ReverseActionType.RUN_COMMAND:
        console.print(f"  Command: {entry.reverse.command}")
    else:
        paths = entry.reverse.paths
        console.print(f"  Files ({len(paths)}):")
        print_paths(paths, limit=10)
    console.print()


def _list_entries(entries: list[UndoEntry], json_output: bool) -> None:
    """Show the undo stack, newest first."""
    newest_first = list(reversed(entries))

    if json_output:
        typer.echo(json.dumps([entry.to_dict() for entry in newest_first], indent=2))
        return

    if not newest_first:
        print_info("Nothing to undo.")
        return

    table = Table(
        title="Undo History",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("ID", style="muted")
    table.add_column("Operation", style="info")
    table.add_column("Description")
    table.add_column("Files", justify="right")
    table.add_column("Date", style="muted")

    for index, entry in enumerate(newest_first, start=1):
        table.add_row(
            str(index),
            entry.id,
            entry.operation.value,
            entry.description,
            str(len(entry.reverse.paths)),
            entry.timestamp[:19].replace("T", " "),
        )

    console.print(table)


def _print_outcome_json(outcome: UndoOutcome) -> None:
    output = {
        "undone": outcome.entry.to_dict(),
        "affected": outcome.affected,
    }
    typer.echo(json.dumps(output, indent=2))
