"""Tests for the scriptrun CLI entry point."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import click
import pytest
from click.testing import CliRunner

from scriptrun.cli import (
    EXIT_FAILURE,
    EXIT_INFRASTRUCTURE_ERROR,
    format_process_output,
    main,
    resolve_script,
)
from scriptrun.errors import LaunchFailure
from scriptrun.models import ProcessOutput
from scriptrun.subprocess_result import SubprocessResult
from tests.conftest import FakeStrategy, posix_only

if TYPE_CHECKING:
    from pathlib import Path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------


class TestResolveScript:
    def test_argument(self) -> None:
        assert resolve_script("echo hi", None) == "echo hi"

    def test_file(self, tmp_path: Path) -> None:
        path = tmp_path / "job.sh"
        path.write_text("echo a\necho b\n")
        assert resolve_script(None, str(path)) == "echo a\necho b\n"

    def test_both_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(click.UsageError, match="Cannot combine"):
            resolve_script("echo hi", str(tmp_path / "x.sh"))

    def test_neither_rejected(self) -> None:
        with pytest.raises(click.UsageError, match="Provide either"):
            resolve_script(None, None)


class TestFormatProcessOutput:
    def test_triple(self) -> None:
        assert format_process_output(ProcessOutput(code=0, stdout="a", stderr="b")) == "<0, a, b>"

    def test_json(self) -> None:
        rendered = format_process_output(ProcessOutput(code=1, stdout="", stderr="x"), as_json=True)
        assert json.loads(rendered) == {"code": 1, "stdout": "", "stderr": "x"}


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


class TestRunCommand:
    def test_success(self, cli_runner: CliRunner) -> None:
        strategy = FakeStrategy(SubprocessResult(returncode=0, stdout="hi\n", stderr=""))
        with patch("scriptrun.cli.get_strategy", return_value=strategy):
            result = cli_runner.invoke(main, ["run", "echo hi"])
        assert result.exit_code == 0
        assert result.output.strip() == "<0, hi, >"

    def test_verbose_enables_info_logging(self, cli_runner: CliRunner) -> None:
        strategy = FakeStrategy()
        with (
            patch("scriptrun.cli.get_strategy", return_value=strategy),
            patch("scriptrun.cli.logging.basicConfig") as basic_config,
        ):
            cli_runner.invoke(main, ["run", "--verbose", "echo hi"])
        assert basic_config.call_args.kwargs["level"] == logging.INFO

    def test_quiet_logs_warnings_only(self, cli_runner: CliRunner) -> None:
        strategy = FakeStrategy()
        with (
            patch("scriptrun.cli.get_strategy", return_value=strategy),
            patch("scriptrun.cli.logging.basicConfig") as basic_config,
        ):
            cli_runner.invoke(main, ["run", "echo hi"])
        assert basic_config.call_args.kwargs["level"] == logging.WARNING

    def test_script_failure_exit_code(self, cli_runner: CliRunner) -> None:
        strategy = FakeStrategy(SubprocessResult(returncode=2, stdout="", stderr="boom\n"))
        with patch("scriptrun.cli.get_strategy", return_value=strategy):
            result = cli_runner.invoke(main, ["run", "exit 2"])
        assert result.exit_code == EXIT_FAILURE
        assert "<2, , boom>" in result.output

    def test_json_output(self, cli_runner: CliRunner) -> None:
        strategy = FakeStrategy(SubprocessResult(returncode=0, stdout="x\n", stderr=""))
        with patch("scriptrun.cli.get_strategy", return_value=strategy):
            result = cli_runner.invoke(main, ["run", "--json", "echo x"])
        assert json.loads(result.output) == {"code": 0, "stdout": "x", "stderr": ""}

    def test_strategy_option_forwarded(self, cli_runner: CliRunner) -> None:
        strategy = FakeStrategy()
        with patch("scriptrun.cli.get_strategy", return_value=strategy) as get_strategy:
            cli_runner.invoke(main, ["run", "--strategy", "engine", "Get-Date"])
        get_strategy.assert_called_once_with("engine")

    def test_launch_failure_exit_code(self, cli_runner: CliRunner) -> None:
        strategy = FakeStrategy(error=LaunchFailure("no shell"))
        with patch("scriptrun.cli.get_strategy", return_value=strategy):
            result = cli_runner.invoke(main, ["run", "true"])
        assert result.exit_code == EXIT_INFRASTRUCTURE_ERROR
        assert "Error: no shell" in result.output

    def test_missing_script_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(main, ["run"])
        assert result.exit_code == 2

    def test_script_from_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "job.sh"
        path.write_text("echo from-file\n")
        strategy = FakeStrategy()
        with patch("scriptrun.cli.get_strategy", return_value=strategy):
            cli_runner.invoke(main, ["run", "--file", str(path)])
        assert strategy.calls[0][0] == "echo from-file\n"

    @posix_only
    def test_real_shell(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(main, ["run", "--strategy", "posix", "echo real"])
        assert result.exit_code == 0
        assert result.output.strip() == "<0, real, >"


# ---------------------------------------------------------------------------
# spawn command
# ---------------------------------------------------------------------------


class TestSpawnCommand:
    def test_prints_pid(self, cli_runner: CliRunner) -> None:
        child = MagicMock(pid=555)
        with patch("scriptrun.cli.ScriptSpawner") as spawner_cls:
            spawner_cls.return_value.spawn.return_value = child
            result = cli_runner.invoke(main, ["spawn", "sleep 1"])
        assert result.exit_code == 0
        assert result.output.strip() == "555"
        child.wait.assert_not_called()

    def test_wait_exits_with_child_code(self, cli_runner: CliRunner) -> None:
        child = MagicMock(pid=556)
        child.wait.return_value = 4
        with patch("scriptrun.cli.ScriptSpawner") as spawner_cls:
            spawner_cls.return_value.spawn.return_value = child
            result = cli_runner.invoke(main, ["spawn", "--wait", "exit 4"])
        assert result.exit_code == 4

    def test_wait_removes_batch_file(self, cli_runner: CliRunner) -> None:
        child = MagicMock(pid=557)
        child.wait.return_value = 0
        with (
            patch("scriptrun.cli.ScriptSpawner") as spawner_cls,
            patch("scriptrun.cli.remove_batch_file") as remove,
        ):
            spawner_cls.return_value.spawn.return_value = child
            cli_runner.invoke(main, ["spawn", "--wait", "dir"])
        remove.assert_called_once_with(child)

    def test_no_wait_keeps_batch_file(self, cli_runner: CliRunner) -> None:
        with (
            patch("scriptrun.cli.ScriptSpawner") as spawner_cls,
            patch("scriptrun.cli.remove_batch_file") as remove,
        ):
            spawner_cls.return_value.spawn.return_value = MagicMock(pid=558)
            cli_runner.invoke(main, ["spawn", "dir"])
        remove.assert_not_called()

    def test_launch_failure_exit_code(self, cli_runner: CliRunner) -> None:
        with patch("scriptrun.cli.ScriptSpawner") as spawner_cls:
            spawner_cls.return_value.spawn.side_effect = LaunchFailure("denied")
            result = cli_runner.invoke(main, ["spawn", "true"])
        assert result.exit_code == EXIT_INFRASTRUCTURE_ERROR
