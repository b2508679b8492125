"""Remote runbook tracking service integration."""

from __future__ import annotations

from preflighter.runbook.client import RunbookClient
from preflighter.runbook.models import ItemStatus
from preflighter.runbook.protocols import RunbookService
from preflighter.runbook.synchronizer import (
    RunbookSynchronizer,
    create_synchronizer,
    format_failure_note,
    needs_runbook,
)

__all__ = [
    "ItemStatus",
    "RunbookService",
    "RunbookClient",
    "RunbookSynchronizer",
    "create_synchronizer",
    "format_failure_note",
    "needs_runbook",
]
