"""Configuration loader and host resolution for sshargs.

Loads YAML config from ~/.config/sshargs/hosts.yaml (or SSHARGS_CONFIG env override).
Turns the ``defaults`` block and each host entry into ``Arguments`` values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sshargs.arguments import Arguments
from sshargs.errors import ConfigError, HostResolutionError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

APP_NAME = "sshargs"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / APP_NAME
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "hosts.yaml"
ENV_CONFIG_VAR = "SSHARGS_CONFIG"
SUPPORTED_CONFIG_VERSION = 1
DEFAULT_SSH_PORT = 22

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Host:
    """A single configured host."""

    name: str
    host: str
    user: str = "root"
    port: int = DEFAULT_SSH_PORT
    ssh_alias: str | None = None
    multiplexing: bool | None = None  # None = follow defaults
    arguments: Arguments = field(default_factory=Arguments)

    @property
    def hostname(self) -> str:
        """Identifier used when deriving the multiplexing control path."""
        return self.name

    @property
    def ssh_target(self) -> str:
        """Return the SSH destination string."""
        if self.ssh_alias:
            return self.ssh_alias
        return f"{self.user}@{self.host}"


@dataclass
class SshConfig:
    """Top-level sshargs configuration."""

    version: int = SUPPORTED_CONFIG_VERSION
    defaults: Arguments = field(default_factory=Arguments)
    multiplexing: bool = False
    hosts: list[Host] = field(default_factory=list)
    config_path: Path = DEFAULT_CONFIG_PATH

    @property
    def all_hosts(self) -> list[Host]:
        return list(self.hosts)

    def resolve_host(self, ref: str) -> Host:
        """Resolve a host by name, falling back to its alias."""
        for host in self.hosts:
            if host.name == ref:
                return host
        for host in self.hosts:
            if host.ssh_alias == ref:
                return host
        raise HostResolutionError(
            f"Unknown host '{ref}'. Run `sshargs ls` to see available hosts."
        )

    def uses_multiplexing(self, host: Host) -> bool:
        if host.multiplexing is None:
            return self.multiplexing
        return host.multiplexing

    def arguments_for(self, host: Host, *, multiplexing: bool | None = None) -> Arguments:
        """Build the effective arguments for *host*.

        Host entries override the configured defaults, which override the
        multiplexing options. Raises ``ControlPathTooLongError`` when
        multiplexing is on and no control path fits.
        """
        defaults = self.defaults
        if not host.ssh_alias and host.port != DEFAULT_SSH_PORT:
            defaults = defaults.with_flag("-p", str(host.port))
        args = host.arguments.with_defaults(defaults)

        if multiplexing is None:
            multiplexing = self.uses_multiplexing(host)
        if multiplexing:
            args = args.with_multiplexing(host)
        return args


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def get_config_path() -> Path:
    """Determine which config file to use."""
    env = os.environ.get(ENV_CONFIG_VAR)
    if env:
        return Path(env).expanduser().resolve()
    return DEFAULT_CONFIG_PATH


def _parse_arguments(data: dict[str, Any], where: str) -> Arguments:
    """Parse ``flags``, ``value_flags`` and ``options`` keys into Arguments."""
    flags = data.get("flags") or []
    value_flags = data.get("value_flags") or {}
    options = data.get("options") or {}

    if not isinstance(flags, list):
        raise ConfigError(f"{where}: 'flags' must be a list of flag names.")
    if not isinstance(value_flags, dict):
        raise ConfigError(f"{where}: 'value_flags' must be a mapping of flag -> value.")
    if not isinstance(options, dict):
        raise ConfigError(f"{where}: 'options' must be a mapping of option -> value.")

    return (
        Arguments()
        .with_flags(
            [str(f) for f in flags],
            {str(k): (None if v is None else str(v)) for k, v in value_flags.items()},
        )
        .with_options({str(k): _option_value(v) for k, v in options.items()})
    )


def _option_value(value: Any) -> str:
    # YAML turns yes/no into booleans; ssh expects the words back.
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def _parse_port(value: Any, where: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{where}: 'port' must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{where}: 'port' must be an integer.") from exc


def _parse_multiplexing(value: Any, where: str) -> bool | None:
    if value is not None and not isinstance(value, bool):
        raise ConfigError(f"{where}: 'multiplexing' must be true or false.")
    return value


def _parse_host(name: str, data: Any) -> Host:
    """Parse a single host entry from YAML."""
    if not isinstance(data, dict):
        raise ConfigError(f"Host '{name}' must be a mapping.")
    hostname = data.get("host")
    if not hostname:
        raise ConfigError(f"Host '{name}' is missing 'host' field.")
    where = f"Host '{name}'"
    ssh_alias = data.get("ssh_alias")
    if ssh_alias is not None and not isinstance(ssh_alias, str):
        raise ConfigError(f"{where}: 'ssh_alias' must be a string.")
    return Host(
        name=str(name),
        host=str(hostname),
        user=str(data.get("user", "root")),
        port=_parse_port(data.get("port", DEFAULT_SSH_PORT), where),
        ssh_alias=ssh_alias,
        multiplexing=_parse_multiplexing(data.get("multiplexing"), where),
        arguments=_parse_arguments(data, where),
    )


def load_config(path: Path | None = None) -> SshConfig:
    """Load, validate, and return SshConfig from a YAML file."""
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigError(
            f"Config file not found at {config_path}\n"
            f"Create one at {DEFAULT_CONFIG_PATH} or set the "
            f"{ENV_CONFIG_VAR} environment variable."
        )

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must be a YAML mapping at the top level.")

    version = raw.get("version", SUPPORTED_CONFIG_VERSION)
    if version != SUPPORTED_CONFIG_VERSION:
        raise ConfigError(
            f"Unsupported config version {version}. Expected {SUPPORTED_CONFIG_VERSION}."
        )

    defaults_raw = raw.get("defaults") or {}
    if not isinstance(defaults_raw, dict):
        raise ConfigError("'defaults' must be a mapping.")

    hosts_raw = raw.get("hosts") or {}
    if not isinstance(hosts_raw, dict):
        raise ConfigError("'hosts' must be a mapping of host_name -> {host, user, port, ...}.")

    return SshConfig(
        version=version,
        defaults=_parse_arguments(defaults_raw, "defaults"),
        multiplexing=bool(_parse_multiplexing(defaults_raw.get("multiplexing"), "defaults")),
        hosts=[_parse_host(name, data) for name, data in hosts_raw.items()],
        config_path=config_path,
    )


def validate_config_file(path: Path | None = None) -> tuple[bool, str]:
    """Validate a config file and return (ok, message)."""
    try:
        cfg = load_config(path)
        return True, f"Config OK: {len(cfg.all_hosts)} host(s) loaded from {cfg.config_path}"
    except ConfigError as exc:
        return False, str(exc)
