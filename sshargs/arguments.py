"""Immutable builder for SSH client flags and ``-o`` options.

An ``Arguments`` value holds two mappings: flags (``-A``, ``-p 2222``) and
options (``-o Key=value``). Every ``with_*`` call returns a new value, so a
set of base defaults can be shared and layered freely.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol

from sshargs.errors import ControlPathTooLongError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# sun_path limit for Unix domain sockets on BSD/macOS (Linux allows 108).
MAX_CONTROL_PATH_LENGTH = 104

MULTIPLEXING_OPTIONS = {
    "ControlMaster": "auto",
    "ControlPersist": "60",
}

_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Host protocol
# ---------------------------------------------------------------------------


class HostDescriptor(Protocol):
    """Anything with a hostname-like identifier and a port."""

    @property
    def hostname(self) -> str: ...

    @property
    def port(self) -> int: ...


# ---------------------------------------------------------------------------
# Control path derivation
# ---------------------------------------------------------------------------

# %C is expanded by ssh to a hash of the connection attributes.
_CONTROL_PATH_CANDIDATES: list[Callable[[str], str]] = [
    lambda conn: f"~/.ssh/deployer_mux_{conn}",
    lambda conn: "~/.ssh/deployer_mux_%C",
    lambda conn: f"~/deployer_mux_{conn}",
    lambda conn: "~/deployer_mux_%C",
    lambda conn: "~/mux_%C",
]


def iter_control_path_candidates(host: HostDescriptor) -> Iterator[str]:
    """Yield control path candidates for *host*, most descriptive first."""
    connection_data = f"{host.hostname}{host.port}"
    for candidate in _CONTROL_PATH_CANDIDATES:
        yield candidate(connection_data)


def find_control_path(host: HostDescriptor) -> tuple[str, list[str]]:
    """Return the first control path that fits and the candidates rejected before it.

    Longer paths make ssh fail with
    ``unix_listener: too long for Unix domain socket``.

    Raises ``ControlPathTooLongError`` when every candidate is too long.
    """
    rejected: list[str] = []
    for control_path in iter_control_path_candidates(host):
        if len(control_path) <= MAX_CONTROL_PATH_LENGTH:
            return control_path, rejected
        rejected.append(control_path)
    raise ControlPathTooLongError(host.hostname, rejected[-1])


def generate_control_path(host: HostDescriptor) -> str:
    """Return the first control path candidate that fits in a socket address."""
    control_path, _ = find_control_path(host)
    return control_path


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Arguments:
    """SSH client flags and options.

    ``flags`` maps a flag name to its value, or to ``None`` for a boolean
    flag. ``options`` maps an option name to its value. Both are stored as
    read-only copies.
    """

    flags: Mapping[str, str | None] = field(default_factory=dict)
    options: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    # ---------- construction ----------

    def with_flags(
        self,
        bare: Iterable[str] = (),
        valued: Mapping[str, str | None] | None = None,
    ) -> Arguments:
        """Return a copy whose flags are replaced by *bare* and *valued*.

        Names in *bare* become boolean flags. Entries of *valued* become
        value flags, or boolean flags when their value is ``None``. Boolean
        flags come first.
        """
        valued = valued or {}
        flags: dict[str, str | None] = dict.fromkeys(bare)
        flags.update({name: None for name, value in valued.items() if value is None})
        flags.update({name: value for name, value in valued.items() if value is not None})
        return Arguments(flags=flags, options=self.options)

    def with_options(self, options: Mapping[str, str]) -> Arguments:
        """Return a copy whose options are replaced by *options*."""
        return Arguments(flags=self.flags, options=options)

    def with_flag(self, name: str, value: str | None = None) -> Arguments:
        return Arguments(flags={**self.flags, name: value}, options=self.options)

    def with_option(self, name: str, value: str) -> Arguments:
        if value is None:
            raise TypeError(f"Option '{name}' requires a value.")
        return Arguments(flags=self.flags, options={**self.options, name: value})

    def with_defaults(self, defaults: Arguments) -> Arguments:
        """Return a copy layered over *defaults*; values set here win."""
        return Arguments(
            flags={**defaults.flags, **self.flags},
            options={**defaults.options, **self.options},
        )

    def with_multiplexing(self, host: HostDescriptor) -> Arguments:
        """Add connection multiplexing options unless already set here."""
        multiplex_defaults = Arguments().with_options(
            {**MULTIPLEXING_OPTIONS, "ControlPath": generate_control_path(host)}
        )
        return self.with_defaults(multiplex_defaults)

    # ---------- lookup ----------

    def get_flag(self, name: str) -> str | bool:
        """Return the flag value, ``True`` for a boolean flag, ``False`` if unset."""
        if name not in self.flags:
            return False
        value = self.flags[name]
        return True if value is None else value

    def get_option(self, name: str) -> str:
        return self.options.get(name, "")

    # ---------- serialization ----------

    def _value_flags(self) -> list[tuple[str, str]]:
        # An empty value would let the next token be read as the flag's value.
        return [(name, value) for name, value in self.flags.items() if value]

    def to_cli_string(self) -> str:
        """Render as a single command-line fragment.

        No shell escaping is applied; values must already be safe. Value
        flags whose value is an empty string are left out, as in ``to_args``.
        """
        bool_flags = " ".join(name for name, value in self.flags.items() if value is None)
        value_flags = " ".join(f"{name} {value}" for name, value in self._value_flags())
        options = " ".join(f"-o {name}={value}" for name, value in self.options.items())
        args = f"{bool_flags} {value_flags} {options}"
        return _WHITESPACE.sub(" ", args).strip()

    def to_args(self) -> list[str]:
        """Render as an argv list in the same order as ``to_cli_string``."""
        args: list[str] = [name for name, value in self.flags.items() if value is None]
        for name, value in self._value_flags():
            args.extend([name, value])
        for name, value in self.options.items():
            args.extend(["-o", f"{name}={value}"])
        return args

    def __str__(self) -> str:
        return self.to_cli_string()

    def __hash__(self) -> int:
        return hash((frozenset(self.flags.items()), frozenset(self.options.items())))
