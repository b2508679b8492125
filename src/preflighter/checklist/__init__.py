"""Checklist models and loading."""

from __future__ import annotations

from preflighter.checklist.loader import (
    is_runbook_source,
    load_checklist,
    load_checklist_sources,
    runbook_checklist,
)
from preflighter.checklist.models import ChecklistFile, ChecklistItem, CheckSpec

__all__ = [
    "ChecklistFile",
    "ChecklistItem",
    "CheckSpec",
    "load_checklist",
    "load_checklist_sources",
    "runbook_checklist",
    "is_runbook_source",
]
