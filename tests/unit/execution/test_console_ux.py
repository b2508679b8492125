"""Unit tests for ConsoleUx rendering and prompting."""

from __future__ import annotations

from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console

from preflighter.constants import FAIL_BANNER, PASS_BANNER
from preflighter.exceptions import ItemCheckError
from preflighter.execution.executor import ItemExecutor
from preflighter.execution.outcomes import Skipped
from preflighter.execution.runner import CheckResult
from preflighter.execution.ux import ConsoleUx
from tests.fixtures.checklists import make_item
from tests.fixtures.collaborators import FakeCheckRunner


@pytest.fixture
def output() -> StringIO:
    return StringIO()


@pytest.fixture
def ux(output: StringIO) -> ConsoleUx:
    console = Console(file=output, width=100, force_terminal=False, color_system=None)
    return ConsoleUx(console=console, err_console=console)


class TestRendering:
    def test_header(self, ux: ConsoleUx, output: StringIO) -> None:
        ux.header("Cluster Upgrade")
        assert "Cluster Upgrade Pre-Flight Checklist" in output.getvalue()

    def test_footer(self, ux: ConsoleUx, output: StringIO) -> None:
        ux.footer(True)
        ux.footer(False)
        text = output.getvalue()
        assert PASS_BANNER in text
        assert FAIL_BANNER in text

    def test_item_lines(self, ux: ConsoleUx, output: StringIO) -> None:
        item = make_item("Backups are recent [daily]")
        ux.blank_item(1, item)
        ux.skip_item(2, item, "NO CHECKS")
        ux.pass_item(3, item, "fresh")
        ux.fail_item(4, item, "boom", "line one\nline two\n")

        lines = output.getvalue().splitlines()
        assert lines[0].endswith(" 1. Backups are recent [daily]")
        assert "[SKIP]" in lines[1]
        assert "(NO CHECKS)" in lines[1]
        assert "[ OK ]" in lines[2]
        assert "fresh" in lines[2]
        assert "[FAIL]" in lines[3]
        assert lines[4].endswith("boom")
        assert lines[6].endswith("line two")

    def test_warn(self, ux: ConsoleUx, output: StringIO) -> None:
        ux.warn("runbook unreachable")
        assert "Warning: runbook unreachable" in output.getvalue()


class TestCheckItem:
    """Tests for interactive decisions."""

    @pytest.mark.asyncio
    async def test_manual_confirmed(self, ux: ConsoleUx) -> None:
        with patch("preflighter.execution.ux.click.confirm", return_value=True):
            result = await ux.check_item(1, make_item("manual"), FakeCheckRunner())
        assert result.ok

    @pytest.mark.asyncio
    async def test_manual_declined(self, ux: ConsoleUx) -> None:
        with patch("preflighter.execution.ux.click.confirm", return_value=False):
            result = await ux.check_item(1, make_item("manual"), FakeCheckRunner())
        assert not result.ok
        assert result.message == "Not confirmed by operator"

    @pytest.mark.asyncio
    async def test_passing_check_needs_no_prompt(self, ux: ConsoleUx) -> None:
        runner = FakeCheckRunner()
        with patch("preflighter.execution.ux.click.confirm") as ask:
            result = await ux.check_item(1, make_item("auto", "true"), runner)
        ask.assert_not_called()
        assert result.ok
        assert result.value == "ok"

    @pytest.mark.asyncio
    async def test_retry_until_pass(self, ux: ConsoleUx) -> None:
        attempts = iter([False, False, True])
        runner = FakeCheckRunner(
            lambda item: CheckResult(
                passed=next(attempts), value="", stdout="", stderr=""
            )
        )
        with patch("preflighter.execution.ux.click.confirm", return_value=True) as ask:
            result = await ux.check_item(1, make_item("flaky", "x"), runner)
        assert result.ok
        assert len(runner.invoked) == 3
        assert ask.call_count == 2

    @pytest.mark.asyncio
    async def test_declined_retry_fails(self, ux: ConsoleUx) -> None:
        runner = FakeCheckRunner(
            lambda item: ItemCheckError("Check timed out after 1s", stderr="late")
        )
        with patch("preflighter.execution.ux.click.confirm", return_value=False):
            result = await ux.check_item(1, make_item("slow", "x"), runner)
        assert not result.ok
        assert result.message == "Check timed out after 1s"
        assert result.stderr == "late"
        assert len(runner.invoked) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [KeyboardInterrupt, EOFError])
    async def test_abandoned_prompt_is_an_interrupt(
        self, ux: ConsoleUx, error: type[BaseException]
    ) -> None:
        with (
            patch("click.termui.visible_prompt_func", side_effect=error),
            pytest.raises(KeyboardInterrupt),
        ):
            await ux.check_item(1, make_item("manual"), FakeCheckRunner())


class TestExecutorWithConsoleUx:
    """Tests driving ItemExecutor through the real prompts."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [KeyboardInterrupt, EOFError])
    async def test_abandoned_prompt_aborts_run(
        self, ux: ConsoleUx, output: StringIO, error: type[BaseException]
    ) -> None:
        runner = FakeCheckRunner()
        items = [make_item("first"), make_item("second")]

        with patch("click.termui.visible_prompt_func", side_effect=error):
            report = await ItemExecutor(runner, ux).run(items)

        assert report.interrupted
        assert not report.success
        assert report.outcomes == (Skipped("ABORTED"), Skipped("ABORTED"))
        assert runner.invoked == []
        assert output.getvalue().count("(ABORTED)") == 2
