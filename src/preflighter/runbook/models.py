"""Data models for the runbook tracking service."""

from __future__ import annotations

from enum import Enum

__all__ = ["ItemStatus"]


class ItemStatus(str, Enum):
    """Outcome of a runbook-linked checklist item, as reported to the service.

    Attributes:
        COMPLETED: The item passed.
        FAILED: The item failed; the update carries a note with the output.
    """

    COMPLETED = "completed"
    FAILED = "failed"
