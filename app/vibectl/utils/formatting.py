"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from vibectl.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_files_table(title: str) -> Table:
    """Create a pre-configured table for listing project files.

    Args:
        title: Table title.

    Returns:
        Rich Table with Status and Path columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=10, justify="center")
    table.add_column("Path", no_wrap=True)
    return table


def print_paths(paths: list[str], style: str = "muted", limit: int = 20) -> None:
    """Print an indented list of paths, truncated after limit entries."""
    for path in paths[:limit]:
        console.print(f"    [{style}]{path}[/]")
    if len(paths) > limit:
        console.print(f"    [muted]... and {len(paths) - limit} more[/]")


def print_notes(title: str, lines: list[str]) -> None:
    """Print a dim heading followed by literal lines (no markup parsing)."""
    if not lines:
        return
    console.print(f"\n[muted]{title}[/]")
    for line in lines:
        console.print(f"  {line}", style="muted", markup=False)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
