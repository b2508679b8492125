"""Resolution of checklist environment requirements.

Every ``env`` entry of a checklist holds a requirement marker:

- ``${command}``: the value is the output of ``command`` run through a
  shell, with trailing whitespace removed. ``${}`` and a bare ``${``
  resolve to ``""``.
- ``<``: the variable must already be set to a non-empty value in the
  process environment; that value is used.
- anything else: the literal value is used as-is.

Resolving ``${...}`` markers executes operator-supplied text. The shell
execution is delegated to a ``ShellExecutor`` so that it can be replaced,
for example by a fake in tests.

Failures are accumulated across all checklists rather than raised on the
first one, so the operator can fix every broken requirement in one pass.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from preflighter.checklist.models import ChecklistFile
from preflighter.constants import (
    REQUIRED_MARKER,
    SHELL_MARKER_PREFIX,
    SHELL_MARKER_SUFFIX,
    SHELL_OUTPUT_TRAILING_CHARS,
)
from preflighter.exceptions import EnvironmentResolutionFailed, EnvResolutionError
from preflighter.logging import get_logger
from preflighter.runners.models import CommandResult

__all__ = [
    "ShellExecutor",
    "EnvironmentResolver",
    "shell_marker_command",
]

logger = get_logger(__name__)


@runtime_checkable
class ShellExecutor(Protocol):
    """Anything that can run a shell command line and capture its output.

    ``CommandRunner`` satisfies this protocol.
    """

    async def run_shell(
        self,
        command: str,
        *,
        timeout: float | None = None,
    ) -> CommandResult: ...


def shell_marker_command(marker: str) -> str | None:
    """Extract the command of a ``${command}`` marker.

    A bare ``${`` counts as an empty command.

    Returns:
        The command text (possibly empty), or None if ``marker`` is not a
        shell marker.
    """
    if marker == SHELL_MARKER_PREFIX:
        return ""
    if marker.startswith(SHELL_MARKER_PREFIX) and marker.endswith(
        SHELL_MARKER_SUFFIX
    ):
        return marker[len(SHELL_MARKER_PREFIX) : -len(SHELL_MARKER_SUFFIX)]
    return None


class EnvironmentResolver:
    """Resolves the ``env`` requirement markers of loaded checklists in place.

    Example:
        ```python
        resolver = EnvironmentResolver(CommandRunner(timeout=30.0))
        errors = await resolver.resolve(checklists)
        if errors:
            for error in errors:
                print(error.message)
            raise SystemExit(1)
        ```
    """

    def __init__(
        self,
        executor: ShellExecutor,
        *,
        timeout: float | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            executor: Runs ``${command}`` markers.
            timeout: Timeout per shell marker. None uses the executor default.
            environ: Process environment consulted for ``<`` markers.
                Defaults to ``os.environ`` at resolution time.
        """
        self._executor = executor
        self._timeout = timeout
        self._environ = environ

    async def resolve(
        self, checklists: Sequence[ChecklistFile]
    ) -> list[EnvResolutionError]:
        """Resolve every env entry of every checklist.

        Resolved values replace the markers in ``checklist.env``.

        Args:
            checklists: All loaded checklists.

        Returns:
            Every resolution failure, in encounter order. Empty on success.
        """
        errors: list[EnvResolutionError] = []
        for checklist in checklists:
            for variable, marker in list(checklist.env.items()):
                value, error = await self._resolve_one(
                    variable, marker, checklist.filename
                )
                checklist.env[variable] = value
                if error is not None:
                    logger.warning(
                        "env_resolution_failed",
                        variable=variable,
                        source=checklist.filename,
                        error=error.message,
                    )
                    errors.append(error)

        logger.info(
            "env_resolved",
            checklists=len(checklists),
            variables=sum(len(c.env) for c in checklists),
            failures=len(errors),
        )
        return errors

    async def resolve_or_raise(self, checklists: Sequence[ChecklistFile]) -> None:
        """Resolve all checklists, raising if anything failed.

        Raises:
            EnvironmentResolutionFailed: Carrying every individual failure.
        """
        errors = await self.resolve(checklists)
        if errors:
            raise EnvironmentResolutionFailed(errors)

    async def _resolve_one(
        self, variable: str, marker: str, source: str
    ) -> tuple[str, EnvResolutionError | None]:
        command = shell_marker_command(marker)
        if command is not None:
            return await self._resolve_command(variable, marker, command, source)

        if marker == REQUIRED_MARKER:
            environ = self._environ if self._environ is not None else os.environ
            value = environ.get(variable, "")
            if value == "":
                return marker, EnvResolutionError(
                    f"Missing required {variable} environment variable",
                    variable=variable,
                    marker=marker,
                    source=source,
                )
            return value, None

        return marker, None

    async def _resolve_command(
        self, variable: str, marker: str, command: str, source: str
    ) -> tuple[str, EnvResolutionError | None]:
        if not command.strip():
            return "", None

        try:
            result = await self._executor.run_shell(command, timeout=self._timeout)
        except OSError as e:
            return "", EnvResolutionError(
                f"Unable to execute '{command}': {e}",
                variable=variable,
                marker=marker,
                source=source,
            )

        value = result.stdout.rstrip(SHELL_OUTPUT_TRAILING_CHARS)
        if result.success:
            logger.debug("env_command_resolved", variable=variable, source=source)
            return value, None

        if result.timed_out:
            reason = "timed out"
        else:
            reason = f"exit status {result.returncode}"
            stderr = result.stderr.strip()
            if stderr:
                reason = f"{reason}: {stderr}"
        return value, EnvResolutionError(
            f"Unable to execute '{command}': {reason}",
            variable=variable,
            marker=marker,
            source=source,
        )
