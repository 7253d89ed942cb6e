"""Shared console singletons and message helpers."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

# ---------------------------------------------------------------------------
# Console singletons
# ---------------------------------------------------------------------------

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def print_command_preview(cmd: list[str]) -> None:
    """Show a command line in dim style."""
    console.print(f"[dim]$[/dim] {escape(' '.join(cmd))}", highlight=False, soft_wrap=True)


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(msg)}", highlight=False, soft_wrap=True)


def print_success(msg: str) -> None:
    console.print(f"[bold green]✓[/bold green] {escape(msg)}", highlight=False, soft_wrap=True)


def print_info(msg: str) -> None:
    console.print(f"[bold blue]ℹ[/bold blue] {escape(msg)}", highlight=False, soft_wrap=True)
