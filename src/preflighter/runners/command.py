"""Command runner for safe async subprocess execution.

This module provides the CommandRunner class used for ``${command}``
requirement markers and automated checks. Every invocation is bounded by a
timeout with graceful termination.
"""

from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING

from preflighter.constants import DEFAULT_SHELL
from preflighter.exceptions import WorkingDirectoryError
from preflighter.logging import get_logger
from preflighter.runners.models import CommandResult

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__ = ["CommandRunner"]

logger = get_logger(__name__)

# Seconds between SIGTERM and SIGKILL for a timed-out process
TERMINATION_GRACE_PERIOD: float = 2.0


class CommandRunner:
    """Execute commands safely with timeout and environment control.

    Provides async command execution with:
    - Timeout handling with graceful termination (SIGTERM + grace period + SIGKILL)
    - Working directory validation
    - Environment variable inheritance and override
    - Duration measurement

    Example:
        ```python
        runner = CommandRunner(timeout=30.0)
        result = await runner.run_shell("kubectl config current-context")
        if result.success:
            print(result.stdout.strip())
        ```
    """

    def __init__(
        self,
        cwd: Path | None = None,
        timeout: float | None = 120.0,
        env: Mapping[str, str] | None = None,
        shell: str = DEFAULT_SHELL,
    ) -> None:
        """Initialize the CommandRunner.

        Args:
            cwd: Working directory for commands. If None, uses current directory.
            timeout: Default timeout in seconds. Use None for no timeout.
            env: Additional environment variables to merge with os.environ.
            shell: Shell used by run_shell().
        """
        self._cwd = cwd
        self._timeout = timeout
        self._extra_env = dict(env or {})
        self._shell = shell

    @property
    def cwd(self) -> Path | None:
        """Working directory for command execution."""
        return self._cwd

    @property
    def timeout(self) -> float | None:
        """Default timeout in seconds."""
        return self._timeout

    @property
    def shell(self) -> str:
        return self._shell

    def _validate_cwd(self, cwd: Path | None) -> None:
        """Validate working directory exists.

        Raises:
            WorkingDirectoryError: If directory does not exist.
        """
        if cwd is not None and not cwd.is_dir():
            raise WorkingDirectoryError(
                f"Working directory does not exist: {cwd}",
                path=cwd,
            )

    def build_env(self, extra_env: Mapping[str, str] | None = None) -> dict[str, str]:
        """Build environment by merging parent env with overrides.

        Args:
            extra_env: Additional variables to add/override.

        Returns:
            Complete environment dictionary.
        """
        env = os.environ.copy()
        env.update(self._extra_env)
        if extra_env:
            env.update(extra_env)
        return env

    async def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Execute a command and return the result.

        Args:
            command: Command and arguments as a sequence (no shell expansion).
            cwd: Override working directory for this command.
            timeout: Override timeout. Use 0 or negative for no timeout.
            env: Additional environment variables for this command.

        Returns:
            CommandResult with returncode, stdout, stderr, duration_ms, timed_out.

        Raises:
            WorkingDirectoryError: If working directory does not exist.
        """
        effective_cwd = cwd if cwd is not None else self._cwd
        self._validate_cwd(effective_cwd)

        effective_timeout = timeout if timeout is not None else self._timeout
        if effective_timeout is not None and effective_timeout <= 0:
            effective_timeout = None

        result = await self._execute_once(
            command, effective_cwd, effective_timeout, self.build_env(env)
        )
        logger.debug(
            "command_finished",
            command=command[0] if command else None,
            returncode=result.returncode,
            duration_ms=result.duration_ms,
            timed_out=result.timed_out,
        )
        return result

    async def run_shell(
        self,
        command: str,
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Execute a command string through the configured shell.

        This executes arbitrary operator-supplied text; callers are expected
        to only pass strings that come from trusted checklist files.

        Args:
            command: Shell command line.
            cwd: Override working directory for this command.
            timeout: Override timeout for this command.
            env: Additional environment variables for this command.

        Returns:
            CommandResult from the shell process.
        """
        return await self.run(
            [self._shell, "-c", command], cwd=cwd, timeout=timeout, env=env
        )

    async def _execute_once(
        self,
        command: Sequence[str],
        cwd: Path | None,
        timeout: float | None,
        env: dict[str, str],
    ) -> CommandResult:
        """Execute a command once.

        Returns:
            CommandResult with returncode, stdout, stderr, duration_ms, timed_out.
        """
        start_time = time.monotonic()
        timed_out = False
        returncode = 0
        stdout_str = ""
        stderr_str = ""

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
                cwd=cwd,
                env=env,
            )

            try:
                stdout_bytes, stderr_bytes = await asyncio.wait_for(
                    process.communicate(),
                    timeout=timeout,
                )
                returncode = process.returncode or 0
                stdout_str = stdout_bytes.decode("utf-8", errors="replace")
                stderr_str = stderr_bytes.decode("utf-8", errors="replace")

            except TimeoutError:
                timed_out = True
                returncode = -1
                await self._terminate(process)

            except asyncio.CancelledError:
                # Operator interrupt: do not leave the child running
                await self._terminate(process)
                raise

        except FileNotFoundError:
            returncode = 127
            stderr_str = f"Command not found: {command[0]}"
        except PermissionError:
            returncode = 126
            stderr_str = f"Permission denied: {command[0]}"

        duration_ms = int((time.monotonic() - start_time) * 1000)

        return CommandResult(
            returncode=returncode,
            stdout=stdout_str,
            stderr=stderr_str,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """SIGTERM the process, escalating to SIGKILL after the grace period."""
        if process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=TERMINATION_GRACE_PERIOD)
        except TimeoutError:
            process.kill()
            await process.wait()
