"""Typer CLI application for sshargs.

Prints SSH argument strings, full commands and multiplexing control paths
for hosts from the config file: args, command, control-path, ls, config.
"""

from __future__ import annotations

import os
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sshargs import __version__, arguments
from sshargs.config import (
    ENV_CONFIG_VAR,
    Host,
    SshConfig,
    get_config_path,
    load_config,
    validate_config_file,
)
from sshargs.errors import ConfigError, ControlPathTooLongError, HostResolutionError
from sshargs.utils import (
    console,
    err_console,
    print_command_preview,
    print_error,
    print_info,
    print_success,
)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="sshargs",
    help="Build SSH client arguments and multiplexing control paths for configured hosts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config_or_exit() -> SshConfig:
    """Load config, printing a helpful error and exiting on failure."""
    try:
        return load_config()
    except ConfigError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


def _resolve_host_or_exit(config: SshConfig, host_ref: str) -> Host:
    """Resolve a host reference, exiting with a clear message on failure."""
    try:
        return config.resolve_host(host_ref)
    except HostResolutionError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


def _arguments_or_exit(config: SshConfig, host: Host, *, multiplexing: bool | None = None):
    try:
        return config.arguments_for(host, multiplexing=multiplexing)
    except ControlPathTooLongError as exc:
        print_error(str(exc))
        print_info(f"Shorten the name of host '{host.name}' or disable multiplexing for it.")
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Default callback
# ---------------------------------------------------------------------------


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sshargs [bold]{__version__}[/bold]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
):
    """Build SSH client arguments for configured hosts."""


# ---------------------------------------------------------------------------
# sshargs args
# ---------------------------------------------------------------------------


@app.command("args")
def cmd_args(
    host_ref: Annotated[str, typer.Argument(help="Host name or alias.")],
    no_mux: Annotated[
        bool, typer.Option("--no-mux", help="Leave out multiplexing options.")
    ] = False,
):
    """Print the SSH argument string for a host."""
    config = _load_config_or_exit()
    host = _resolve_host_or_exit(config, host_ref)
    args = _arguments_or_exit(config, host, multiplexing=False if no_mux else None)
    console.print(args.to_cli_string(), markup=False, highlight=False, soft_wrap=True)


# ---------------------------------------------------------------------------
# sshargs command
# ---------------------------------------------------------------------------


@app.command("command")
def cmd_command(
    host_ref: Annotated[str, typer.Argument(help="Host name or alias.")],
    remote_command: Annotated[
        Optional[str], typer.Argument(help="Command to run on the remote host.")
    ] = None,
):
    """Print the full ssh command line for a host."""
    from sshargs.ssh import build_ssh_command

    config = _load_config_or_exit()
    host = _resolve_host_or_exit(config, host_ref)
    args = _arguments_or_exit(config, host)
    print_command_preview(build_ssh_command(host, args, remote_command=remote_command))


# ---------------------------------------------------------------------------
# sshargs control-path
# ---------------------------------------------------------------------------


@app.command("control-path")
def cmd_control_path(
    host_ref: Annotated[str, typer.Argument(help="Host name or alias.")],
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show rejected candidates.")
    ] = False,
):
    """Print the multiplexing ControlPath derived for a host."""
    config = _load_config_or_exit()
    host = _resolve_host_or_exit(config, host_ref)

    try:
        control_path, rejected = arguments.find_control_path(host)
    except ControlPathTooLongError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    if verbose:
        for candidate in rejected:
            err_console.print(
                f"[dim]rejected ({len(candidate)} > {arguments.MAX_CONTROL_PATH_LENGTH}):[/dim] "
                f"{escape(candidate)}",
                highlight=False,
            )
    console.print(control_path, markup=False, highlight=False, soft_wrap=True)


# ---------------------------------------------------------------------------
# sshargs ls
# ---------------------------------------------------------------------------


@app.command("ls")
def cmd_ls():
    """List configured hosts in a table."""
    config = _load_config_or_exit()
    if not config.hosts:
        print_info("No hosts configured.")
        raise typer.Exit()

    table = Table(
        title="sshargs hosts",
        show_header=True,
        header_style="bold magenta",
        border_style="bright_blue",
    )
    table.add_column("Host", style="cyan", min_width=15)
    table.add_column("SSH Target", min_width=20)
    table.add_column("Port", justify="right", min_width=5)
    table.add_column("Mux", justify="center")

    for host in config.hosts:
        table.add_row(
            host.name,
            host.ssh_target,
            str(host.port),
            "yes" if config.uses_multiplexing(host) else "no",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# sshargs config
# ---------------------------------------------------------------------------


@app.command("config")
def cmd_config():
    """Show active config path and validate it."""
    path = get_config_path()
    env_line = f"{ENV_CONFIG_VAR}={path}" if ENV_CONFIG_VAR in os.environ else "[dim]not set[/dim]"
    console.print(Panel(
        f"[bold]Config path:[/bold] {path}\n"
        f"[bold]Env var:[/bold]    {env_line}",
        title="[bold]sshargs config[/bold]",
        border_style="blue",
    ))

    ok, msg = validate_config_file()
    if ok:
        print_success(msg)
    else:
        print_error(msg)
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def app_entry() -> None:
    """Console script entry point for ``sshargs``."""
    app()
