"""Checklist loading exceptions."""

from __future__ import annotations

from pathlib import Path

from preflighter.exceptions.base import PreflighterError

__all__ = ["ChecklistLoadError", "InvalidSkipCountError"]


class ChecklistLoadError(PreflighterError):
    """A checklist source could not be read or parsed.

    Loading is all-or-nothing: the run aborts before anything else happens.

    Attributes:
        message: Human-readable error message.
        path: The checklist source that failed to load.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize the ChecklistLoadError.

        Args:
            message: Human-readable error message.
            path: The checklist source that failed to load.
        """
        self.path = path
        super().__init__(message)


class InvalidSkipCountError(PreflighterError):
    """The requested skip count falls outside ``0..total``.

    Attributes:
        message: Human-readable error message.
        skip: The requested skip count.
        total: Number of items available.
    """

    def __init__(self, skip: int, total: int) -> None:
        self.skip = skip
        self.total = total
        super().__init__(
            f"Cannot skip {skip} items: the checklist has {total} items in total"
        )
