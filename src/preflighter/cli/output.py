"""Output formatting utilities for the Preflighter CLI."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape

from preflighter.checklist.models import ChecklistFile

__all__ = [
    "format_error",
    "format_listing",
    "print_listing",
]


def format_error(message: str, details: list[str] | None = None) -> str:
    """Format an error message with optional detail lines.

    Example:
        >>> print(format_error(
        ...     "There are missing executables from your path",
        ...     details=["‣ Did not find 'kubectl'"],
        ... ))
        Error: There are missing executables from your path
          ‣ Did not find 'kubectl'
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    return "\n".join(lines)


def format_listing(checklists: Sequence[ChecklistFile]) -> str:
    """Render every item with its running index, grouped by checklist.

    Example:
        >>> print(format_listing([checklist]))
        In upgrade.yaml (Cluster Upgrade):
          1. Backups verified
          2. Nodes drained
        <BLANKLINE>
        2 items in total
    """
    lines: list[str] = []
    index = 0
    for checklist in checklists:
        lines.append(f"In {checklist.filename} ({checklist.title}):")
        for item in checklist.checklist:
            index += 1
            lines.append(f" {index:2d}. {item.title}")
        lines.append("")
    lines.append(f"{index} items in total")
    return "\n".join(lines)


def print_listing(console: Console, checklists: Sequence[ChecklistFile]) -> None:
    console.print(escape(format_listing(checklists)), highlight=False)
