"""Bridge between loaded checklists and the runbook service.

The synchronizer expands runbook step references into concrete checklist
items before execution and reports outcomes of linked items afterwards.
It only exists when at least one checklist needs the service; callers hold
it as ``RunbookSynchronizer | None`` and branch on its presence.
"""

from __future__ import annotations

from collections.abc import Sequence

from preflighter.checklist.models import ChecklistFile, ChecklistItem
from preflighter.config import RunbookConfig
from preflighter.exceptions import RunbookUpdateError
from preflighter.logging import get_logger
from preflighter.runbook.client import RunbookClient
from preflighter.runbook.models import ItemStatus
from preflighter.runbook.protocols import RunbookService
from preflighter.utils.secrets import redact_secrets

__all__ = [
    "RunbookSynchronizer",
    "needs_runbook",
    "create_synchronizer",
    "format_failure_note",
]

logger = get_logger(__name__)


def needs_runbook(checklists: Sequence[ChecklistFile]) -> bool:
    """True if any checklist declares runbook steps or runbook-linked items."""
    return any(checklist.needs_runbook for checklist in checklists)


def format_failure_note(stdout: str, stderr: str) -> str:
    """Build the note attached to a failed item, with secrets redacted."""
    note = f"Script failed with:\n```\n{stdout}\n---\n{stderr}\n```\n"
    return redact_secrets(note)


class RunbookSynchronizer:
    """Expands runbook steps and reports item outcomes to a RunbookService.

    Args:
        service: The runbook service to talk to.
    """

    def __init__(self, service: RunbookService) -> None:
        self._service = service

    async def expand(self, checklists: Sequence[ChecklistFile]) -> int:
        """Append the items of every declared runbook step to its checklist.

        Checklists are processed in the order given and steps in their
        declared order, so the result keeps file-then-step ordering.

        Returns:
            Number of items appended across all checklists.

        Raises:
            RunbookFetchError: On the first step that cannot be fetched.
        """
        appended = 0
        for checklist in checklists:
            for step_id in checklist.runbook_steps:
                items = await self._service.checklist_from_runbook(step_id)
                checklist.checklist.extend(items)
                appended += len(items)
                logger.debug(
                    "runbook_step_expanded",
                    step_id=step_id,
                    checklist=checklist.filename,
                    items=len(items),
                )
        return appended

    async def report(
        self,
        item: ChecklistItem,
        status: ItemStatus,
        note: str = "",
    ) -> bool:
        """Report the outcome of a linked item.

        Delivery failures are logged and swallowed; the run carries on.

        Returns:
            True if the update was delivered, False if the item is not
            linked or delivery failed.
        """
        if not item.runbook_id or not item.runbook_step:
            return False
        try:
            await self._service.update_checklist_item(
                item.runbook_step, item.runbook_id, status, note
            )
        except RunbookUpdateError as e:
            logger.warning(
                "runbook_update_failed",
                step_id=item.runbook_step,
                item_id=item.runbook_id,
                status=status.value,
                error=e.message,
            )
            return False
        return True

    async def report_completed(self, item: ChecklistItem) -> bool:
        return await self.report(item, ItemStatus.COMPLETED)

    async def report_failed(
        self, item: ChecklistItem, stdout: str, stderr: str
    ) -> bool:
        return await self.report(
            item, ItemStatus.FAILED, format_failure_note(stdout, stderr)
        )


def create_synchronizer(
    checklists: Sequence[ChecklistFile],
    config: RunbookConfig,
) -> RunbookSynchronizer | None:
    """Create a synchronizer only if some checklist needs the runbook service.

    Returns:
        None when no checklist references the service, so no connection is
        ever attempted.

    Raises:
        RunbookConfigError: If the service is needed but not configured.
    """
    if not needs_runbook(checklists):
        return None
    client = RunbookClient.from_config(config)
    logger.info("runbook_client_created", base_url=client.base_url)
    return RunbookSynchronizer(client)
