from __future__ import annotations


class PreflighterError(Exception):
    """Base exception class for all Preflighter-specific errors.

    All custom exceptions in Preflighter inherit from this class. This allows
    catching every domain error at the CLI boundary while letting system
    exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            files = load_checklist_sources(sources)
        except PreflighterError as e:
            err_console.print(format_error(e.message))
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the PreflighterError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
