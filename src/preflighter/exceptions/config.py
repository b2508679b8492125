from __future__ import annotations

from typing import Any

from preflighter.exceptions.base import PreflighterError


class ConfigError(PreflighterError):
    """Exception for configuration loading, parsing, and validation errors.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "runbook.url").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError(
            "Invalid configuration value",
            field="execution.check_timeout",
            value=-1,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)
