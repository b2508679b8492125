"""Remote runbook service exceptions."""

from __future__ import annotations

from preflighter.exceptions.base import PreflighterError

__all__ = [
    "RunbookError",
    "RunbookConfigError",
    "RunbookFetchError",
    "RunbookUpdateError",
]


class RunbookError(PreflighterError):
    """Base exception for runbook service operations.

    Attributes:
        message: Human-readable error message.
    """

    pass


class RunbookConfigError(RunbookError):
    """The runbook client could not be created from the configuration."""

    pass


class RunbookFetchError(RunbookError):
    """Failed to fetch the checklist items of a runbook step.

    Attributes:
        message: Human-readable error message.
        step_id: The runbook step whose items were requested.
    """

    def __init__(self, message: str, step_id: str | None = None) -> None:
        """Initialize the RunbookFetchError.

        Args:
            message: Human-readable error message.
            step_id: The runbook step whose items were requested.
        """
        self.step_id = step_id
        super().__init__(message)


class RunbookUpdateError(RunbookError):
    """Failed to report an item outcome back to the runbook service.

    Attributes:
        message: Human-readable error message.
        step_id: Runbook step of the item.
        item_id: Runbook identifier of the item.
    """

    def __init__(
        self,
        message: str,
        *,
        step_id: str | None = None,
        item_id: str | None = None,
    ) -> None:
        """Initialize the RunbookUpdateError.

        Args:
            message: Human-readable error message.
            step_id: Runbook step of the item.
            item_id: Runbook identifier of the item.
        """
        self.step_id = step_id
        self.item_id = item_id
        super().__init__(message)
