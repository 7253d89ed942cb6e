"""SSH, scp and rsync command building.

Assembles full command lines around an ``Arguments`` value. Nothing here
runs a process; callers hand the lists to their own executor.
"""

from __future__ import annotations

from sshargs.arguments import Arguments
from sshargs.config import Host


def build_ssh_command(
    host: Host,
    arguments: Arguments,
    *,
    remote_command: str | None = None,
) -> list[str]:
    """Build a complete ``ssh`` command list for the given host."""
    cmd: list[str] = ["ssh", *arguments.to_args(), host.ssh_target]
    if remote_command:
        cmd.append(remote_command)
    return cmd


def build_scp_command(
    host: Host,
    arguments: Arguments,
    *,
    source: str,
    dest: str,
    recursive: bool = False,
) -> list[str]:
    """Build an ``scp`` upload command.

    scp takes the port as ``-P``, so a ``-p`` value flag is renamed.
    """
    port = arguments.get_flag("-p")
    if isinstance(port, str):
        flags = {name: value for name, value in arguments.flags.items() if name != "-p"}
        arguments = Arguments(flags=flags, options=arguments.options).with_flag("-P", port)
    if recursive:
        arguments = arguments.with_flag("-r")

    return ["scp", *arguments.to_args(), source, f"{host.ssh_target}:{dest}"]


def build_rsync_ssh_option(arguments: Arguments) -> list[str]:
    """Build rsync's -e option.

    Returns a list like:
        ["-e", "ssh -p 2222 -o ControlMaster=auto ..."]
    """
    return ["-e", f"ssh {arguments}".strip()]
