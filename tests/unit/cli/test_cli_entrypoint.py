"""Tests for the preflighter command-line entry point."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from preflighter import __version__
from preflighter.cli.common import cli_error_handler
from preflighter.cli.context import ExitCode
from preflighter.exceptions import ChecklistLoadError
from preflighter.main import cli

CHECKLIST = """\
title: Smoke
checklist:
  - title: shell works
    check:
      run: "true"
  - title: manual step
"""


@pytest.fixture
def workdir(temp_dir: Path, clean_env: None) -> Path:
    os.chdir(temp_dir)
    (temp_dir / "smoke.yaml").write_text(CHECKLIST)
    return temp_dir


class TestCli:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-h"])
        assert result.exit_code == 0
        assert "--unattended" in result.output
        assert "--skip" in result.output

    def test_no_checklists(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == ExitCode.FAILURE

    def test_negative_skip_rejected(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(cli, ["-s", "-1", "smoke.yaml"])
        assert result.exit_code == 2

    def test_list(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(cli, ["--list", "smoke.yaml"])
        assert result.exit_code == 0
        assert "In smoke.yaml (Smoke):" in result.output
        assert "2 items in total" in result.output

    def test_unattended_run(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(
            cli,
            ["-a", "smoke.yaml"],
            env={"PREFLIGHTER_EXECUTION__SHELL": "sh"},
        )
        assert result.exit_code == 0
        assert "Smoke Pre-Flight Checklist" in result.output
        assert "NO CHECKS" in result.output

    def test_missing_config_file(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", "nope.yaml", "smoke.yaml"])
        assert result.exit_code == ExitCode.FAILURE
        assert "Config file not found" in result.output

    def test_invalid_config_value(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "preflighter.yaml").write_text(
            "execution:\n  check_timeout: -5\n"
        )
        result = cli_runner.invoke(cli, ["--list", "smoke.yaml"])
        assert result.exit_code == ExitCode.FAILURE
        assert "execution.check_timeout" in result.output


class TestCliErrorHandler:
    def test_interrupt_exits_130(self) -> None:
        with pytest.raises(SystemExit) as exc_info, cli_error_handler():
            raise KeyboardInterrupt
        assert exc_info.value.code == ExitCode.INTERRUPTED

    def test_domain_error_exits_1(self) -> None:
        with pytest.raises(SystemExit) as exc_info, cli_error_handler():
            raise ChecklistLoadError("bad checklist")
        assert exc_info.value.code == ExitCode.FAILURE

    def test_unexpected_error_exits_1(self) -> None:
        with pytest.raises(SystemExit) as exc_info, cli_error_handler():
            raise RuntimeError("boom")
        assert exc_info.value.code == ExitCode.FAILURE
