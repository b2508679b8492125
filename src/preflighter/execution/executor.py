"""Sequential, fail-stop execution of the flattened checklist items.

Items before the skip index are rendered ``Blank`` without being attempted.
The remaining items run strictly in order; once one fails, every later item
becomes ``Skipped("ABORTED")`` and is never executed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from preflighter.checklist.models import ChecklistFile, ChecklistItem
from preflighter.constants import SKIP_REASON_ABORTED, SKIP_REASON_NO_CHECKS
from preflighter.exceptions import InvalidSkipCountError, ItemCheckError
from preflighter.execution.outcomes import (
    Blank,
    ExecutionReport,
    Failed,
    ItemOutcome,
    ItemResult,
    Passed,
    Skipped,
)
from preflighter.execution.protocols import CheckRunner
from preflighter.execution.ux import ChecklistUx
from preflighter.logging import get_logger
from preflighter.runbook.synchronizer import RunbookSynchronizer

__all__ = ["ItemExecutor", "flatten_items"]

logger = get_logger(__name__)


def flatten_items(checklists: Sequence[ChecklistFile]) -> list[ChecklistItem]:
    """Concatenate the items of every checklist, preserving order."""
    return [item for checklist in checklists for item in checklist.checklist]


class ItemExecutor:
    """Drives every item through the pass/fail/skip state machine.

    Args:
        runner: Executes automated checks.
        ux: Renders outcomes and, in interactive mode, takes decisions.
        runbook: Synchronizer for linked items, or None when no checklist
            uses the runbook service.
        unattended: Run checks without operator interaction.

    Example:
        ```python
        executor = ItemExecutor(runner, ConsoleUx(), runbook=None, unattended=True)
        report = await executor.run(flatten_items(checklists), skip=0)
        sys.exit(0 if report.success else 1)
        ```
    """

    def __init__(
        self,
        runner: CheckRunner,
        ux: ChecklistUx,
        *,
        runbook: RunbookSynchronizer | None = None,
        unattended: bool = False,
    ) -> None:
        self._runner = runner
        self._ux = ux
        self._runbook = runbook
        self._unattended = unattended

    async def run(
        self, items: Sequence[ChecklistItem], skip: int = 0
    ) -> ExecutionReport:
        """Execute ``items`` in order, leaving the first ``skip`` blank.

        Args:
            items: Flattened, ordered items of every checklist.
            skip: Number of leading items to leave blank.

        Returns:
            ExecutionReport with one result per item.

        Raises:
            InvalidSkipCountError: If ``skip`` is negative or exceeds the
                number of items.
        """
        if skip < 0 or skip > len(items):
            raise InvalidSkipCountError(skip, len(items))

        results: list[ItemResult] = []
        for position, item in enumerate(items[:skip]):
            index = position + 1
            self._ux.blank_item(index, item)
            results.append(ItemResult(index, item, Blank()))

        failure = False
        interrupted = False
        for position, item in enumerate(items[skip:], start=skip):
            index = position + 1
            outcome: ItemOutcome
            if failure:
                outcome = Skipped(SKIP_REASON_ABORTED)
                self._ux.skip_item(index, item, SKIP_REASON_ABORTED)
            else:
                try:
                    outcome = await self._execute(index, item)
                except (KeyboardInterrupt, asyncio.CancelledError):
                    logger.warning("run_interrupted", index=index, title=item.title)
                    interrupted = True
                    outcome = Skipped(SKIP_REASON_ABORTED)
                    self._ux.skip_item(index, item, SKIP_REASON_ABORTED)
                else:
                    # The outcome stands even if reporting it is interrupted
                    try:
                        await self._report(item, outcome)
                    except (KeyboardInterrupt, asyncio.CancelledError):
                        logger.warning(
                            "run_interrupted", index=index, title=item.title
                        )
                        interrupted = True
                if interrupted or isinstance(outcome, Failed):
                    failure = True
            results.append(ItemResult(index, item, outcome))

        report = ExecutionReport(results=tuple(results), interrupted=interrupted)
        logger.info(
            "run_finished",
            success=report.success,
            passed=report.passed,
            failed=report.failed,
            skipped=report.skipped,
            blank=report.blank,
            interrupted=interrupted,
        )
        return report

    async def _execute(self, index: int, item: ChecklistItem) -> ItemOutcome:
        if self._unattended:
            outcome = await self._execute_unattended(item)
        else:
            outcome = await self._execute_interactive(index, item)

        if isinstance(outcome, Passed):
            self._ux.pass_item(index, item, outcome.value)
        elif isinstance(outcome, Failed):
            self._ux.fail_item(index, item, outcome.message, outcome.stderr)
        elif isinstance(outcome, Skipped):
            self._ux.skip_item(index, item, outcome.reason)
        return outcome

    async def _execute_unattended(self, item: ChecklistItem) -> ItemOutcome:
        if item.check is None:
            return Skipped(SKIP_REASON_NO_CHECKS)
        try:
            result = await self._runner.run_check(item)
        except ItemCheckError as e:
            logger.warning("item_check_error", title=item.title, error=e.message)
            return Failed(e.message, e.stdout, e.stderr)
        if not result.passed:
            return Failed(result.value, result.stdout, result.stderr)
        return Passed(result.value)

    async def _execute_interactive(
        self, index: int, item: ChecklistItem
    ) -> ItemOutcome:
        decision = await self._ux.check_item(index, item, self._runner)
        if decision.ok:
            return Passed(decision.value)
        return Failed(decision.message, decision.stdout, decision.stderr)

    async def _report(self, item: ChecklistItem, outcome: ItemOutcome) -> None:
        if isinstance(outcome, Passed):
            await self._report_completed(item)
        elif isinstance(outcome, Failed):
            await self._report_failed(item, outcome)

    async def _report_completed(self, item: ChecklistItem) -> None:
        if self._runbook is None or not item.is_linked:
            return
        if not await self._runbook.report_completed(item):
            self._ux.warn(
                f"Could not report item {item.runbook_id} as completed "
                "to the runbook service"
            )

    async def _report_failed(self, item: ChecklistItem, outcome: Failed) -> None:
        if self._runbook is None or not item.is_linked:
            return
        if not await self._runbook.report_failed(item, outcome.stdout, outcome.stderr):
            self._ux.warn(
                f"Could not report item {item.runbook_id} as failed "
                "to the runbook service"
            )
