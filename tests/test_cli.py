"""Tests for the sshargs Typer CLI."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sshargs import __version__
from sshargs import arguments as arguments_module
from sshargs.cli import app

runner = CliRunner()

CONFIG_YAML = textwrap.dedent("""\
    version: 1
    defaults:
      multiplexing: true
      options:
        BatchMode: "yes"
    hosts:
      prod-web-01:
        host: "10.0.0.5"
        user: "deploy"
      staging:
        host: "stg.example.com"
        port: 2222
        multiplexing: false
""")


@pytest.fixture(autouse=True)
def config_file(tmp_path: Path, monkeypatch) -> Path:
    p = tmp_path / "hosts.yaml"
    p.write_text(CONFIG_YAML)
    monkeypatch.setenv("SSHARGS_CONFIG", str(p))
    return p


class TestArgsCommand:
    def test_args_with_multiplexing(self):
        result = runner.invoke(app, ["args", "prod-web-01"])
        assert result.exit_code == 0
        assert result.stdout.strip() == (
            "-o ControlMaster=auto -o ControlPersist=60"
            " -o ControlPath=~/.ssh/deployer_mux_prod-web-0122 -o BatchMode=yes"
        )

    def test_args_no_mux(self):
        result = runner.invoke(app, ["args", "prod-web-01", "--no-mux"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "-o BatchMode=yes"

    def test_args_port_flag(self):
        result = runner.invoke(app, ["args", "staging"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "-p 2222 -o BatchMode=yes"

    def test_unknown_host(self):
        result = runner.invoke(app, ["args", "nope"])
        assert result.exit_code == 1
        assert "Unknown host" in result.output

    def test_control_path_too_long(self, monkeypatch):
        monkeypatch.setattr(arguments_module, "MAX_CONTROL_PATH_LENGTH", 1)
        result = runner.invoke(app, ["args", "prod-web-01"])
        assert result.exit_code == 1
        assert "prod-web-01" in result.output
        assert "too long" in result.output


class TestCommandCommand:
    def test_full_command(self):
        result = runner.invoke(app, ["command", "staging", "uptime"])
        assert result.exit_code == 0
        assert "ssh -p 2222 -o BatchMode=yes root@stg.example.com uptime" in result.stdout


class TestControlPathCommand:
    def test_control_path(self):
        result = runner.invoke(app, ["control-path", "prod-web-01"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "~/.ssh/deployer_mux_prod-web-0122"

    def test_verbose_lists_rejected(self, monkeypatch):
        monkeypatch.setattr(arguments_module, "MAX_CONTROL_PATH_LENGTH", 22)
        result = runner.invoke(app, ["control-path", "prod-web-01", "--verbose"])
        assert result.exit_code == 0
        assert "rejected" in result.output
        assert "33 > 22" in result.output
        assert "~/.ssh/deployer_mux_prod-web-0122" in result.output
        assert result.output.strip().endswith("~/.ssh/deployer_mux_%C")

    def test_too_long(self, monkeypatch):
        monkeypatch.setattr(arguments_module, "MAX_CONTROL_PATH_LENGTH", 1)
        result = runner.invoke(app, ["control-path", "prod-web-01"])
        assert result.exit_code == 1
        assert "too long" in result.output


class TestMiscCommands:
    def test_ls(self):
        result = runner.invoke(app, ["ls"])
        assert result.exit_code == 0
        assert "prod-web-01" in result.stdout
        assert "staging" in result.stdout

    def test_config_ok(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "2 host(s)" in result.stdout

    def test_config_missing(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SSHARGS_CONFIG", str(tmp_path / "missing.yaml"))
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_config_bad_port(self, config_file: Path):
        config_file.write_text("version: 1\nhosts:\n  web:\n    host: web\n    port: abc\n")
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "'port' must be an integer" in result.output

    def test_args_bad_port(self, config_file: Path):
        config_file.write_text("version: 1\nhosts:\n  web:\n    host: web\n    port: abc\n")
        result = runner.invoke(app, ["args", "web"])
        assert result.exit_code == 1
        assert "'port' must be an integer" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
