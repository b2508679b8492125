"""Preflighter exception hierarchy.

All exceptions can be imported from this package:
    from preflighter.exceptions import ChecklistLoadError, RunbookFetchError
"""

from __future__ import annotations

# Base exception
from preflighter.exceptions.base import PreflighterError

# Checklist exceptions
from preflighter.exceptions.checklist import (
    ChecklistLoadError,
    InvalidSkipCountError,
)

# Configuration exceptions
from preflighter.exceptions.config import ConfigError

# Environment resolution exceptions
from preflighter.exceptions.environment import (
    EnvironmentResolutionFailed,
    EnvResolutionError,
)

# Runbook service exceptions
from preflighter.exceptions.runbook import (
    RunbookConfigError,
    RunbookError,
    RunbookFetchError,
    RunbookUpdateError,
)

# Runner exceptions
from preflighter.exceptions.runner import (
    ItemCheckError,
    MissingToolError,
    MissingToolsError,
    RunnerError,
    WorkingDirectoryError,
)

__all__ = [
    "PreflighterError",
    "ChecklistLoadError",
    "InvalidSkipCountError",
    "ConfigError",
    "EnvResolutionError",
    "EnvironmentResolutionFailed",
    "RunbookError",
    "RunbookConfigError",
    "RunbookFetchError",
    "RunbookUpdateError",
    "RunnerError",
    "WorkingDirectoryError",
    "MissingToolError",
    "MissingToolsError",
    "ItemCheckError",
]
