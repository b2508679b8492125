"""Protocols for the collaborators of the item executor."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from preflighter.checklist.models import ChecklistItem
    from preflighter.execution.runner import CheckResult

__all__ = ["CheckRunner", "ToolProvider"]


@runtime_checkable
class CheckRunner(Protocol):
    """Runs the automated check of a checklist item."""

    async def run_check(self, item: ChecklistItem) -> CheckResult:
        """Run the item's check.

        Raises:
            ItemCheckError: If the check could not be executed.
        """
        ...


@runtime_checkable
class ToolProvider(Protocol):
    """Knows which executables the loaded checks need and which are missing."""

    def get_missing_tools(self) -> set[str]: ...
