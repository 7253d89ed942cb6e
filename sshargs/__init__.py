"""sshargs: immutable SSH client argument builder."""

from sshargs.arguments import Arguments, HostDescriptor, generate_control_path
from sshargs.errors import ControlPathTooLongError, SshArgsError

__version__ = "0.1.0"

__all__ = [
    "Arguments",
    "ControlPathTooLongError",
    "HostDescriptor",
    "SshArgsError",
    "generate_control_path",
]
