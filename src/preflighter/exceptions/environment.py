"""Environment requirement resolution exceptions.

Resolution failures are accumulated across every loaded checklist and
reported together, so the individual ``EnvResolutionError`` instances are
collected into a single ``EnvironmentResolutionFailed``.
"""

from __future__ import annotations

from collections.abc import Sequence

from preflighter.exceptions.base import PreflighterError

__all__ = ["EnvResolutionError", "EnvironmentResolutionFailed"]


class EnvResolutionError(PreflighterError):
    """A single environment requirement marker could not be resolved.

    Attributes:
        message: Human-readable error message.
        variable: Name of the environment variable being resolved.
        marker: The raw requirement marker from the checklist.
        source: Filename of the checklist that declared the variable.
    """

    def __init__(
        self,
        message: str,
        *,
        variable: str,
        marker: str,
        source: str | None = None,
    ) -> None:
        """Initialize the EnvResolutionError.

        Args:
            message: Human-readable error message.
            variable: Name of the environment variable being resolved.
            marker: The raw requirement marker.
            source: Filename of the declaring checklist.
        """
        self.variable = variable
        self.marker = marker
        self.source = source
        super().__init__(message)


class EnvironmentResolutionFailed(PreflighterError):
    """One or more environment requirements failed to resolve.

    Attributes:
        message: Summary message.
        errors: Every individual resolution failure, in encounter order.
    """

    def __init__(self, errors: Sequence[EnvResolutionError]) -> None:
        self.errors = tuple(errors)
        super().__init__(
            f"{len(self.errors)} environment requirement(s) could not be resolved"
        )
