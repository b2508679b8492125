from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Generator

import click

from preflighter.cli.context import ExitCode
from preflighter.cli.output import format_error
from preflighter.exceptions import PreflighterError
from preflighter.logging import get_logger

__all__ = ["cli_error_handler"]


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for CLI error handling.

    - KeyboardInterrupt / task cancellation: exit with code 130
    - PreflighterError: print the message, exit with code 1
    - Anything else: log with traceback, print, exit with code 1

    Example:
        >>> with cli_error_handler():
        >>>     exit_code = await run_preflight(options, config)
    """
    logger = get_logger(__name__)

    try:
        yield
    except (KeyboardInterrupt, asyncio.CancelledError):
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except PreflighterError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("unexpected_error")
        click.echo(f"Error: {e!s}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e
