"""Exceptions raised by sshargs."""

from __future__ import annotations


class SshArgsError(Exception):
    """Base class for all sshargs errors."""


class ControlPathTooLongError(SshArgsError):
    """Raised when no multiplexing control path fits the socket length limit."""

    def __init__(self, host: str, control_path: str) -> None:
        self.host = host
        self.control_path = control_path
        super().__init__(
            f"The multiplexing control path for host '{host}' is too long. "
            f"Control path is: {control_path}"
        )


class ConfigError(SshArgsError):
    """Raised when the configuration file is invalid or missing."""


class HostResolutionError(SshArgsError):
    """Raised when a host reference cannot be resolved."""
