"""Protocol for the remote runbook tracking service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from preflighter.checklist.models import ChecklistItem
    from preflighter.runbook.models import ItemStatus

__all__ = ["RunbookService"]


@runtime_checkable
class RunbookService(Protocol):
    """Remote service that owns runbook steps and their checklist items.

    ``RunbookClient`` implements this over HTTP; tests substitute fakes.
    """

    async def checklist_from_runbook(self, step_id: str) -> list[ChecklistItem]:
        """Fetch the ordered checklist items of a runbook step.

        Returned items carry ``runbook_id`` and ``runbook_step``.

        Raises:
            RunbookFetchError: If the items cannot be fetched.
        """
        ...

    async def update_checklist_item(
        self,
        step_id: str,
        item_id: str,
        status: ItemStatus,
        note: str = "",
    ) -> None:
        """Report the outcome of a checklist item.

        Raises:
            RunbookUpdateError: If the update cannot be delivered.
        """
        ...
