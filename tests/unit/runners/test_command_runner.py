"""Unit tests for CommandRunner."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from preflighter.exceptions import WorkingDirectoryError
from preflighter.runners.command import CommandRunner
from preflighter.runners.models import CommandResult


class TestCommandResult:
    def test_success(self) -> None:
        assert CommandResult(0, "", "", 1).success
        assert not CommandResult(1, "", "", 1).success
        assert not CommandResult(0, "", "", 1, timed_out=True).success


class TestCommandRunner:
    """Tests for CommandRunner.run() and run_shell()."""

    @pytest.mark.asyncio
    async def test_captures_output(self) -> None:
        result = await CommandRunner(shell="sh").run_shell("echo hello; echo oops >&2")
        assert result.success
        assert result.stdout == "hello\n"
        assert result.stderr == "oops\n"
        assert result.duration_ms >= 0

    @pytest.mark.asyncio
    async def test_nonzero_exit(self) -> None:
        result = await CommandRunner(shell="sh").run_shell("exit 3")
        assert result.returncode == 3
        assert not result.success

    @pytest.mark.asyncio
    async def test_env_overrides(self) -> None:
        runner = CommandRunner(env={"GREETING": "hi"}, shell="sh")
        result = await runner.run_shell(
            'echo "$GREETING $TARGET"', env={"TARGET": "there"}
        )
        assert result.stdout.strip() == "hi there"

    @pytest.mark.asyncio
    async def test_cwd(self, temp_dir: Path) -> None:
        result = await CommandRunner(cwd=temp_dir, shell="sh").run_shell("pwd")
        assert Path(result.stdout.strip()).resolve() == temp_dir.resolve()

    @pytest.mark.asyncio
    async def test_missing_cwd_raises(self, temp_dir: Path) -> None:
        runner = CommandRunner(cwd=temp_dir / "gone")
        with pytest.raises(WorkingDirectoryError):
            await runner.run(["true"])

    @pytest.mark.asyncio
    async def test_command_not_found(self) -> None:
        result = await CommandRunner().run(["preflighter-no-such-binary"])
        assert result.returncode == 127
        assert "preflighter-no-such-binary" in result.stderr

    @pytest.mark.asyncio
    async def test_timeout_terminates_process(self) -> None:
        result = await CommandRunner(timeout=0.2, shell="sh").run_shell("sleep 10")
        assert result.timed_out
        assert result.returncode == -1
        assert not result.success

    @pytest.mark.asyncio
    async def test_per_call_timeout_override(self) -> None:
        runner = CommandRunner(timeout=30.0, shell="sh")
        result = await runner.run_shell("sleep 10", timeout=0.2)
        assert result.timed_out

    @pytest.mark.asyncio
    async def test_uses_configured_shell(self) -> None:
        process = MagicMock()
        process.returncode = 0
        process.communicate = AsyncMock(return_value=(b"ok\n", b""))

        with patch(
            "preflighter.runners.command.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=process),
        ) as mock_exec:
            result = await CommandRunner(shell="zsh").run_shell("echo ok")

        assert mock_exec.call_args.args == ("zsh", "-c", "echo ok")
        assert mock_exec.call_args.kwargs["stdin"] == asyncio.subprocess.DEVNULL
        assert result.stdout == "ok\n"

    @pytest.mark.asyncio
    async def test_cancellation_terminates_child(self) -> None:
        process = MagicMock()
        process.returncode = None
        process.communicate = AsyncMock(side_effect=asyncio.CancelledError)
        process.wait = AsyncMock(return_value=0)

        with (
            patch(
                "preflighter.runners.command.asyncio.create_subprocess_exec",
                new=AsyncMock(return_value=process),
            ),
            pytest.raises(asyncio.CancelledError),
        ):
            await CommandRunner().run(["sleep", "10"])

        process.terminate.assert_called_once()
