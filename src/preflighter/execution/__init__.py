"""Checklist execution: runner, tool gate, outcomes, and the item executor."""

from __future__ import annotations

from preflighter.execution.executor import ItemExecutor, flatten_items
from preflighter.execution.outcomes import (
    Blank,
    ExecutionReport,
    Failed,
    ItemOutcome,
    ItemResult,
    ItemState,
    Passed,
    Skipped,
)
from preflighter.execution.protocols import CheckRunner, ToolProvider
from preflighter.execution.runner import CheckResult, ChecklistRunner
from preflighter.execution.tools import ToolAvailabilityGate
from preflighter.execution.ux import ChecklistUx, ConsoleUx, InteractiveResult

__all__ = [
    "ItemExecutor",
    "flatten_items",
    "Blank",
    "Skipped",
    "Passed",
    "Failed",
    "ItemOutcome",
    "ItemResult",
    "ItemState",
    "ExecutionReport",
    "CheckRunner",
    "ToolProvider",
    "CheckResult",
    "ChecklistRunner",
    "ToolAvailabilityGate",
    "ChecklistUx",
    "ConsoleUx",
    "InteractiveResult",
]
