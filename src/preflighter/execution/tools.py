"""Gate that vetoes a run when executables needed by checks are missing."""

from __future__ import annotations

from preflighter.exceptions import MissingToolError, MissingToolsError
from preflighter.execution.protocols import ToolProvider
from preflighter.logging import get_logger

__all__ = ["ToolAvailabilityGate"]

logger = get_logger(__name__)


class ToolAvailabilityGate:
    """Verifies every executable required by the loaded checks exists.

    All missing executables are reported together so the operator can fix
    them in one pass.

    Example:
        ```python
        gate = ToolAvailabilityGate(runner)
        gate.ensure_available()  # raises MissingToolsError
        ```
    """

    def __init__(self, provider: ToolProvider) -> None:
        self._provider = provider

    def missing_tools(self) -> list[MissingToolError]:
        """One error per missing executable, sorted by name."""
        missing = sorted(self._provider.get_missing_tools())
        if missing:
            logger.warning("tools_missing", tools=missing)
        return [MissingToolError(name) for name in missing]

    def ensure_available(self) -> None:
        """Raise if any required executable is missing.

        Raises:
            MissingToolsError: Listing every missing executable.
        """
        errors = self.missing_tools()
        if errors:
            raise MissingToolsError(errors)
