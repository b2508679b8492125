"""Orchestration of one preflight run.

Load checklists, create the runbook synchronizer if needed, resolve
environment requirements, expand runbook steps, then either list the items
or verify tools and execute every item in order. Each startup phase aborts
the run on failure before any item executes.
"""

from __future__ import annotations

import uuid

from rich.console import Console
from rich.markup import escape

from preflighter.checklist.loader import load_checklist_sources
from preflighter.cli.console import console as default_console
from preflighter.cli.console import err_console as default_err_console
from preflighter.cli.context import ExitCode, RunOptions
from preflighter.cli.output import format_error, print_listing
from preflighter.config import PreflighterConfig
from preflighter.environment import EnvironmentResolver, ShellExecutor
from preflighter.exceptions import (
    ChecklistLoadError,
    EnvironmentResolutionFailed,
    InvalidSkipCountError,
    MissingToolsError,
    RunbookConfigError,
    RunbookFetchError,
    RunnerError,
)
from preflighter.execution.executor import ItemExecutor, flatten_items
from preflighter.execution.runner import ChecklistRunner
from preflighter.execution.tools import ToolAvailabilityGate
from preflighter.execution.ux import ChecklistUx, ConsoleUx
from preflighter.logging import bind_context, clear_context, get_logger
from preflighter.runbook.synchronizer import create_synchronizer
from preflighter.runners.command import CommandRunner

__all__ = ["run_preflight"]

logger = get_logger(__name__)


def _print_error(
    err_console: Console, message: str, details: list[str] | None = None
) -> None:
    err_console.print(escape(format_error(message, details=details)), highlight=False)


async def run_preflight(
    options: RunOptions,
    config: PreflighterConfig,
    *,
    console: Console | None = None,
    err_console: Console | None = None,
    ux: ChecklistUx | None = None,
    shell_executor: ShellExecutor | None = None,
) -> ExitCode:
    """Run the preflight checklists described by ``options``.

    Args:
        options: Sources and run flags from the command line.
        config: Loaded configuration.
        console: Console for checklist output.
        err_console: Console for errors.
        ux: Rendering/prompting surface. Defaults to a ConsoleUx.
        shell_executor: Runs ``${command}`` markers. Defaults to a
            CommandRunner bounded by ``execution.env_command_timeout``.

    Returns:
        The process exit code.
    """
    console = console or default_console
    err_console = err_console or default_err_console
    ux = ux or ConsoleUx(console, err_console)

    bind_context(run_id=uuid.uuid4().hex[:8])
    try:
        return await _run(options, config, console, err_console, ux, shell_executor)
    finally:
        clear_context()


async def _run(
    options: RunOptions,
    config: PreflighterConfig,
    console: Console,
    err_console: Console,
    ux: ChecklistUx,
    shell_executor: ShellExecutor | None,
) -> ExitCode:
    if not options.sources:
        _print_error(err_console, "Please specify one or more checklists to process")
        return ExitCode.FAILURE

    try:
        checklists = load_checklist_sources(options.sources)
    except ChecklistLoadError as e:
        _print_error(err_console, e.message)
        return ExitCode.FAILURE

    try:
        runbook = create_synchronizer(checklists, config.runbook)
    except RunbookConfigError as e:
        _print_error(err_console, f"Could not use runbook: {e.message}")
        return ExitCode.FAILURE

    executor = shell_executor or CommandRunner(
        timeout=config.execution.env_command_timeout,
        shell=config.execution.shell,
    )
    resolver = EnvironmentResolver(
        executor, timeout=config.execution.env_command_timeout
    )
    try:
        await resolver.resolve_or_raise(checklists)
    except EnvironmentResolutionFailed as e:
        for error in e.errors:
            _print_error(err_console, error.message)
        return ExitCode.FAILURE

    if runbook is not None:
        try:
            await runbook.expand(checklists)
        except RunbookFetchError as e:
            _print_error(err_console, e.message)
            return ExitCode.FAILURE

    if options.list_only:
        print_listing(console, checklists)
        return ExitCode.SUCCESS

    items = flatten_items(checklists)
    if options.skip < 0 or options.skip > len(items):
        error = InvalidSkipCountError(options.skip, len(items))
        _print_error(err_console, error.message)
        return ExitCode.FAILURE

    try:
        with ChecklistRunner(config.execution, temp_dir=options.temp_dir) as runner:
            for checklist in checklists:
                runner.add_checklist(checklist)

            try:
                ToolAvailabilityGate(runner).ensure_available()
            except MissingToolsError as e:
                _print_error(
                    err_console,
                    f"{e.message}:",
                    details=[f"‣ {error.message}" for error in e.errors],
                )
                return ExitCode.FAILURE

            ux.header(checklists[0].title)
            report = await ItemExecutor(
                runner, ux, runbook=runbook, unattended=options.unattended
            ).run(items, options.skip)
    except RunnerError as e:
        _print_error(err_console, e.message)
        return ExitCode.FAILURE

    ux.footer(report.success)
    if report.interrupted:
        return ExitCode.INTERRUPTED
    return ExitCode.SUCCESS if report.success else ExitCode.FAILURE
