from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from preflighter.exceptions.base import PreflighterError


class RunnerError(PreflighterError):
    """Base exception for runner failures.

    Attributes:
        message: Human-readable error message.
    """

    pass


class WorkingDirectoryError(RunnerError):
    """Working directory does not exist or is not accessible.

    Attributes:
        message: Human-readable error message.
        path: The path that was not found.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize the WorkingDirectoryError.

        Args:
            message: Human-readable error message.
            path: The path that was not found.
        """
        self.path = path
        super().__init__(message)


class MissingToolError(RunnerError):
    """Executable required by a check was not found in PATH.

    Attributes:
        message: Human-readable error message.
        executable: The executable that was not found.
    """

    def __init__(self, executable: str) -> None:
        """Initialize the MissingToolError.

        Args:
            executable: The executable that was not found.
        """
        self.executable = executable
        super().__init__(f"Did not find '{executable}'")


class MissingToolsError(RunnerError):
    """One or more executables required by the loaded checks are missing.

    Attributes:
        message: Summary message.
        errors: One MissingToolError per absent executable, sorted by name.
    """

    def __init__(self, errors: Sequence[MissingToolError]) -> None:
        self.errors = tuple(errors)
        super().__init__("There are missing executables from your path")


class ItemCheckError(RunnerError):
    """An automated check could not be executed.

    Distinct from a check that ran and reported failure: this covers
    timeouts and errors preparing or launching the check.

    Attributes:
        message: Human-readable error message.
        item_title: Title of the checklist item.
        stdout: Output captured before the error, if any.
        stderr: Error output captured before the error, if any.
    """

    def __init__(
        self,
        message: str,
        item_title: str | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Initialize the ItemCheckError.

        Args:
            message: Human-readable error message.
            item_title: Title of the checklist item.
            stdout: Output captured before the error.
            stderr: Error output captured before the error.
        """
        self.item_title = item_title
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)
