"""Prepared execution context for automated checks.

The ChecklistRunner owns the temporary directory used for check scripts
and the merged, resolved environment of every added checklist. Checks run
through the async CommandRunner with a bounded timeout.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from preflighter.checklist.models import ChecklistFile, ChecklistItem, CheckSpec
from preflighter.config import ExecutionConfig
from preflighter.exceptions import ItemCheckError, RunnerError
from preflighter.logging import get_logger
from preflighter.runners.command import CommandRunner

__all__ = ["CheckResult", "ChecklistRunner", "TEMP_DIR_ENV_VAR"]

logger = get_logger(__name__)

#: Variable exposing the run's temporary directory to checks
TEMP_DIR_ENV_VAR = "PREFLIGHTER_TEMP"


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of running one automated check.

    Attributes:
        passed: True if the check exited with status 0.
        value: Standard output with surrounding whitespace removed.
        stdout: Raw standard output.
        stderr: Raw standard error.
        duration_ms: Execution time in milliseconds.
    """

    passed: bool
    value: str
    stdout: str
    stderr: str
    duration_ms: int = 0


class ChecklistRunner:
    """Executes automated checks in a prepared environment.

    Use as a context manager so the temporary directory is created before
    the first check and removed afterwards (unless it was user-supplied).

    Example:
        ```python
        with ChecklistRunner(config.execution, temp_dir=None) as runner:
            for checklist in checklists:
                runner.add_checklist(checklist)
            missing = runner.get_missing_tools()
            result = await runner.run_check(item)
        ```
    """

    def __init__(
        self,
        config: ExecutionConfig,
        *,
        temp_dir: Path | None = None,
        command_runner: CommandRunner | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            config: Execution settings (timeouts, shell).
            temp_dir: Directory for temporary artifacts. Artifacts placed in a
                user-supplied directory are kept after the run.
            command_runner: Optional pre-configured CommandRunner.
        """
        self._config = config
        self._user_temp_dir = temp_dir or config.temp_dir
        self._command_runner = command_runner or CommandRunner(
            timeout=config.check_timeout, shell=config.shell
        )
        self._work_dir: Path | None = None
        self._owns_work_dir = False
        self._env: dict[str, str] = {}
        self._items: list[ChecklistItem] = []
        self._script_count = 0

    def __enter__(self) -> ChecklistRunner:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def work_dir(self) -> Path:
        """Directory holding temporary artifacts of this run."""
        if self._work_dir is None:
            raise RunnerError("Runner is not open. Use it as a context manager.")
        return self._work_dir

    @property
    def env(self) -> dict[str, str]:
        """Resolved variables exported to every check."""
        return dict(self._env)

    def open(self) -> Path:
        """Create (or adopt) the temporary directory.

        Raises:
            RunnerError: If the directory cannot be created.
        """
        if self._work_dir is not None:
            return self._work_dir
        try:
            if self._user_temp_dir is not None:
                self._user_temp_dir.mkdir(parents=True, exist_ok=True)
                self._work_dir = self._user_temp_dir
                self._owns_work_dir = False
            else:
                self._work_dir = Path(tempfile.mkdtemp(prefix="preflighter-"))
                self._owns_work_dir = True
        except OSError as e:
            raise RunnerError(
                f"Unable to prepare temporary directory: {e.strerror or e}"
            ) from e
        logger.debug(
            "runner_opened", work_dir=str(self._work_dir), owned=self._owns_work_dir
        )
        return self._work_dir

    def close(self) -> None:
        if self._work_dir is not None and self._owns_work_dir:
            shutil.rmtree(self._work_dir, ignore_errors=True)
        self._work_dir = None

    def add_checklist(self, checklist: ChecklistFile) -> None:
        """Register a checklist's resolved environment and items.

        Variables of later checklists override earlier ones.
        """
        self._env.update(checklist.env)
        self._items.extend(checklist.checklist)

    def _interpreter(self, check: CheckSpec) -> str:
        return check.interpreter or self._config.shell

    def required_tools(self) -> set[str]:
        """Executables needed by every registered item's automated check."""
        tools: set[str] = set()
        for item in self._items:
            if item.check is None:
                continue
            tools.add(self._interpreter(item.check))
            tools.update(t for t in item.check.tools if t)
        return tools

    def get_missing_tools(self) -> set[str]:
        """Required executables that cannot be found on the check PATH."""
        search_path = self._command_runner.build_env(self._env).get("PATH")
        return {
            tool
            for tool in self.required_tools()
            if shutil.which(tool, path=search_path) is None
        }

    def _write_script(self, script: str) -> Path:
        self._script_count += 1
        path = self.work_dir / f"check-{self._script_count:03d}"
        path.write_text(script, encoding="utf-8")
        os.chmod(path, 0o700)
        return path

    async def run_check(self, item: ChecklistItem) -> CheckResult:
        """Run the automated check of ``item``.

        Returns:
            CheckResult describing the finished check.

        Raises:
            ItemCheckError: If the item has no check, the script cannot be
                prepared, or the check times out.
        """
        check = item.check
        if check is None:
            raise ItemCheckError(
                f"Item '{item.title}' has no automated check", item_title=item.title
            )

        interpreter = self._interpreter(check)
        try:
            if check.script is not None:
                command = [interpreter, str(self._write_script(check.script))]
            else:
                command = [interpreter, "-c", check.run or ""]
        except (OSError, RunnerError) as e:
            raise ItemCheckError(
                f"Unable to prepare check script: {e}", item_title=item.title
            ) from e

        timeout = check.timeout or self._config.check_timeout
        env = {**self._env, TEMP_DIR_ENV_VAR: str(self.work_dir)}
        result = await self._command_runner.run(command, timeout=timeout, env=env)

        if result.timed_out:
            raise ItemCheckError(
                f"Check timed out after {timeout:g}s",
                item_title=item.title,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        logger.info(
            "item_check_finished",
            title=item.title,
            returncode=result.returncode,
            duration_ms=result.duration_ms,
        )
        return CheckResult(
            passed=result.success,
            value=result.stdout.strip(),
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=result.duration_ms,
        )
