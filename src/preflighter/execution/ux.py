"""Operator-facing rendering and prompting for checklist execution.

The executor talks to a ``ChecklistUx``; ``ConsoleUx`` is the rich-based
terminal implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import click
from rich.console import Console
from rich.markup import escape

from preflighter.checklist.models import ChecklistItem
from preflighter.constants import BANNER_RULE, FAIL_BANNER, PASS_BANNER
from preflighter.exceptions import ItemCheckError
from preflighter.execution.protocols import CheckRunner

__all__ = ["InteractiveResult", "ChecklistUx", "ConsoleUx"]


def _confirm(prompt: str) -> bool:
    """Ask a yes/no question, defaulting to no.

    Raises:
        KeyboardInterrupt: If the operator interrupts the prompt or stdin
            is closed. click reports both as ``click.Abort``.
    """
    try:
        return click.confirm(prompt, default=False)
    except click.Abort:
        raise KeyboardInterrupt from None


@dataclass(frozen=True, slots=True)
class InteractiveResult:
    """Decision taken for one item in interactive mode.

    Attributes:
        ok: True if the item passed.
        value: Captured value shown for a passed item.
        message: Failure summary for a failed item.
        stdout: Captured standard output of the last check attempt.
        stderr: Captured standard error of the last check attempt.
    """

    ok: bool
    value: str = ""
    message: str = ""
    stdout: str = ""
    stderr: str = ""


class ChecklistUx(Protocol):
    """Rendering and prompting surface used by the item executor."""

    def header(self, title: str) -> None: ...

    def footer(self, success: bool) -> None: ...

    def blank_item(self, index: int, item: ChecklistItem) -> None: ...

    def skip_item(self, index: int, item: ChecklistItem, reason: str) -> None: ...

    def pass_item(self, index: int, item: ChecklistItem, value: str) -> None: ...

    def fail_item(
        self, index: int, item: ChecklistItem, message: str, stderr: str
    ) -> None: ...

    def warn(self, message: str) -> None: ...

    async def check_item(
        self, index: int, item: ChecklistItem, runner: CheckRunner
    ) -> InteractiveResult: ...


class ConsoleUx:
    """Terminal UX built on a rich Console.

    Args:
        console: Console for checklist output.
        err_console: Console for warnings.
    """

    def __init__(
        self,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self._console = console or Console()
        self._err_console = err_console or Console(stderr=True)

    def header(self, title: str) -> None:
        self._console.print(BANNER_RULE)
        self._console.print(f" {escape(title)} Pre-Flight Checklist")
        self._console.print(BANNER_RULE)
        self._console.print()

    def footer(self, success: bool) -> None:
        self._console.print()
        if success:
            self._console.print(f"🍺  [bold]{PASS_BANNER}[/bold]")
        else:
            self._console.print(f"🚨  [bold red]{FAIL_BANNER}[/bold red]")

    def _line(
        self, badge: str, index: int, item: ChecklistItem, suffix: str = ""
    ) -> None:
        self._console.print(f" {badge} {index:2d}. {escape(item.title)}{suffix}")

    def blank_item(self, index: int, item: ChecklistItem) -> None:
        self._line("[dim][    ][/dim]", index, item)

    def skip_item(self, index: int, item: ChecklistItem, reason: str) -> None:
        suffix = f" [yellow]({escape(reason)})[/yellow]"
        self._line("[yellow][SKIP][/yellow]", index, item, suffix)

    def pass_item(self, index: int, item: ChecklistItem, value: str) -> None:
        suffix = f" [dim]→ {escape(value)}[/dim]" if value else ""
        self._line("[green][ OK ][/green]", index, item, suffix)

    def fail_item(
        self, index: int, item: ChecklistItem, message: str, stderr: str
    ) -> None:
        self._line("[bold red][FAIL][/bold red]", index, item)
        for text in (message, stderr):
            for line in text.strip().splitlines():
                self._console.print(f"        [red]│[/red] {escape(line)}")

    def warn(self, message: str) -> None:
        self._err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    async def check_item(
        self, index: int, item: ChecklistItem, runner: CheckRunner
    ) -> InteractiveResult:
        """Ask the operator, or run the check and offer retries on failure."""
        self._console.print(f"[bold]{index:2d}. {escape(item.title)}[/bold]")

        if item.check is None:
            if _confirm("    Has this item been completed?"):
                return InteractiveResult(ok=True)
            return InteractiveResult(ok=False, message="Not confirmed by operator")

        while True:
            try:
                result = await runner.run_check(item)
            except ItemCheckError as e:
                failure = InteractiveResult(
                    ok=False, message=e.message, stdout=e.stdout, stderr=e.stderr
                )
            else:
                if result.passed:
                    return InteractiveResult(
                        ok=True,
                        value=result.value,
                        stdout=result.stdout,
                        stderr=result.stderr,
                    )
                failure = InteractiveResult(
                    ok=False,
                    message=result.value,
                    stdout=result.stdout,
                    stderr=result.stderr,
                )

            for line in (failure.message or "Check failed").splitlines():
                self._console.print(f"    [red]{escape(line)}[/red]")
            if not _confirm("    The check failed. Run it again?"):
                return failure
