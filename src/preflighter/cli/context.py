"""CLI context and utilities for Preflighter.

Exit codes, the type-safe options container, and the bridge from Click's
synchronous interface to the async orchestration.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any, TypeVar

from preflighter.config import PreflighterConfig

__all__ = [
    "ExitCode",
    "CLIContext",
    "RunOptions",
    "async_command",
]


class ExitCode(IntEnum):
    """Standard exit codes for the Preflighter CLI.

    - 0: every active item passed (or was skipped for lack of checks)
    - 1: an item failed, or startup was aborted
    - 130: interrupted by the operator (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options and loaded configuration.

    Attributes:
        config: Loaded Preflighter configuration.
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    config: PreflighterConfig
    verbosity: int = 0
    quiet: bool = False


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Options of one preflight run.

    Attributes:
        sources: Checklist files and ``runbook:<step>`` references, in order.
        skip: Number of leading items to leave blank.
        list_only: Print the item listing and exit.
        unattended: Run checks without operator interaction.
        temp_dir: Directory for temporary artifacts (kept after the run).
    """

    sources: tuple[str, ...]
    skip: int = 0
    list_only: bool = False
    unattended: bool = False
    temp_dir: Path | None = None


F = TypeVar("F", bound=Callable[..., Any])


def async_command(f: F) -> F:
    """Decorator to run async Click commands with asyncio.run().

    Example:
        >>> @click.command()
        >>> @async_command
        >>> async def cli(...) -> None:
        >>>     await run_preflight(...)
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(f(*args, **kwargs))

    return wrapper  # type: ignore[return-value]
