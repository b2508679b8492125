"""Fakes for the collaborators of the environment resolver and executor.

Provides:
- FakeShellExecutor: scripted results for ``${command}`` markers
- FakeRunbookService: in-memory runbook steps recording every update
- FakeCheckRunner: scripted check results recording every invocation
- RecordingUx: ChecklistUx that records rendered outcomes
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from preflighter.checklist.models import ChecklistItem
from preflighter.exceptions import RunbookFetchError, RunbookUpdateError
from preflighter.execution.protocols import CheckRunner
from preflighter.execution.runner import CheckResult
from preflighter.execution.ux import InteractiveResult
from preflighter.runbook.models import ItemStatus
from preflighter.runners.models import CommandResult


class FakeShellExecutor:
    """ShellExecutor returning scripted results keyed by command."""

    def __init__(self, results: dict[str, CommandResult | Exception] | None = None):
        self.results = results or {}
        self.commands: list[str] = []

    async def run_shell(
        self, command: str, *, timeout: float | None = None
    ) -> CommandResult:
        self.commands.append(command)
        result = self.results.get(command)
        if isinstance(result, Exception):
            raise result
        if result is None:
            return CommandResult(returncode=0, stdout="", stderr="", duration_ms=1)
        return result


@dataclass
class RunbookUpdate:
    step_id: str
    item_id: str
    status: ItemStatus
    note: str


class FakeRunbookService:
    """RunbookService backed by a dict of step id to items."""

    def __init__(
        self,
        steps: dict[str, list[ChecklistItem]] | None = None,
        *,
        fail_updates: bool = False,
    ) -> None:
        self.steps = steps or {}
        self.fail_updates = fail_updates
        self.fetched: list[str] = []
        self.updates: list[RunbookUpdate] = []

    async def checklist_from_runbook(self, step_id: str) -> list[ChecklistItem]:
        self.fetched.append(step_id)
        if step_id not in self.steps:
            raise RunbookFetchError(
                f"Could not fetch checklist for step {step_id}: HTTP 404: not found",
                step_id=step_id,
            )
        return [item.model_copy() for item in self.steps[step_id]]

    async def update_checklist_item(
        self,
        step_id: str,
        item_id: str,
        status: ItemStatus,
        note: str = "",
    ) -> None:
        if self.fail_updates:
            raise RunbookUpdateError(
                f"Could not update item {item_id} of step {step_id}: timed out",
                step_id=step_id,
                item_id=item_id,
            )
        self.updates.append(RunbookUpdate(step_id, item_id, status, note))


class FakeCheckRunner:
    """CheckRunner returning results from a callable, recording invocations."""

    def __init__(
        self,
        outcome: Callable[[ChecklistItem], CheckResult | Exception] | None = None,
        missing_tools: set[str] | None = None,
    ) -> None:
        self._outcome = outcome or _run_spec_literally
        self._missing_tools = missing_tools or set()
        self.invoked: list[str] = []

    async def run_check(self, item: ChecklistItem) -> CheckResult:
        self.invoked.append(item.title)
        result = self._outcome(item)
        if isinstance(result, Exception):
            raise result
        return result

    def get_missing_tools(self) -> set[str]:
        return set(self._missing_tools)


def _run_spec_literally(item: ChecklistItem) -> CheckResult:
    """Treat ``run: true`` as passing and anything else as failing."""
    assert item.check is not None
    passed = item.check.run == "true"
    return CheckResult(
        passed=passed,
        value="ok" if passed else "boom",
        stdout="ok\n" if passed else "boom\n",
        stderr="" if passed else "exit status 1\n",
    )


@dataclass
class RecordingUx:
    """ChecklistUx recording every rendered event as a tuple."""

    decisions: list[InteractiveResult] = field(default_factory=list)
    events: list[tuple[str, ...]] = field(default_factory=list)
    interrupt_on: str | None = None

    def header(self, title: str) -> None:
        self.events.append(("header", title))

    def footer(self, success: bool) -> None:
        self.events.append(("footer", str(success)))

    def blank_item(self, index: int, item: ChecklistItem) -> None:
        self.events.append(("blank", str(index), item.title))

    def skip_item(self, index: int, item: ChecklistItem, reason: str) -> None:
        self.events.append(("skip", str(index), item.title, reason))

    def pass_item(self, index: int, item: ChecklistItem, value: str) -> None:
        self.events.append(("pass", str(index), item.title, value))

    def fail_item(
        self, index: int, item: ChecklistItem, message: str, stderr: str
    ) -> None:
        self.events.append(("fail", str(index), item.title, message))

    def warn(self, message: str) -> None:
        self.events.append(("warn", message))

    async def check_item(
        self, index: int, item: ChecklistItem, runner: CheckRunner
    ) -> InteractiveResult:
        if item.title == self.interrupt_on:
            raise KeyboardInterrupt
        self.events.append(("check", str(index), item.title))
        return self.decisions.pop(0)


@pytest.fixture
def fake_shell() -> FakeShellExecutor:
    return FakeShellExecutor()


@pytest.fixture
def fake_runbook() -> FakeRunbookService:
    return FakeRunbookService()


@pytest.fixture
def fake_runner() -> FakeCheckRunner:
    return FakeCheckRunner()


@pytest.fixture
def recording_ux() -> RecordingUx:
    return RecordingUx()
