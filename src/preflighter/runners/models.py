"""Data models for subprocess execution results."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["CommandResult"]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of executing a single command.

    Attributes:
        returncode: Exit code from the command (0 = success).
        stdout: Standard output captured from the command.
        stderr: Standard error captured from the command.
        duration_ms: Execution time in milliseconds.
        timed_out: True if the command exceeded its timeout limit.
    """

    returncode: int
    stdout: str
    stderr: str
    duration_ms: int
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """True if command completed successfully (returncode 0, no timeout)."""
        return self.returncode == 0 and not self.timed_out
