"""CLI entry point for Preflighter.

This module defines the Click-based command-line interface.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from preflighter import __version__
from preflighter.cli.common import cli_error_handler
from preflighter.cli.context import CLIContext, ExitCode, RunOptions, async_command
from preflighter.cli.output import format_error
from preflighter.cli.preflight import run_preflight
from preflighter.config import load_config
from preflighter.exceptions import ConfigError
from preflighter.logging import configure_logging

_VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="preflighter")
@click.argument("checklists", nargs=-1)
@click.option(
    "--temp",
    "temp_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Keep temporary files in the given directory.",
)
@click.option(
    "-s",
    "--skip",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="The number of items to skip.",
)
@click.option(
    "-l",
    "--list",
    "list_only",
    is_flag=True,
    default=False,
    help="List the items and exit.",
)
@click.option(
    "-a",
    "--unattended",
    is_flag=True,
    default=False,
    help="Run the checks unattended.",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config file (overrides ./preflighter.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Only log errors.",
)
@click.pass_context
@async_command
async def cli(
    ctx: click.Context,
    checklists: tuple[str, ...],
    temp_dir: Path | None,
    skip: int,
    list_only: bool,
    unattended: bool,
    config_file: Path | None,
    verbose: int,
    quiet: bool,
) -> None:
    """Run the pre-flight CHECKLISTS in order, stopping at the first failure.

    A checklist is a YAML file or runbook:<step-id> for a checklist fetched
    from the runbook service.
    """
    # .env values count as part of the process environment for "<" markers
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    try:
        config = load_config(config_file)
    except ConfigError as e:
        error_parts = [f"Error: {e.message}"]
        if e.field:
            error_parts.append(f"  Field: {e.field}")
        if e.value is not None:
            error_parts.append(f"  Value: {e.value}")
        click.echo("\n".join(error_parts), err=True)
        ctx.exit(ExitCode.FAILURE)

    cli_ctx = CLIContext(
        config=config,
        verbosity=verbose,
        quiet=quiet,
    )

    # Priority: quiet > verbose > config
    if cli_ctx.quiet:
        level = logging.ERROR
    elif cli_ctx.verbosity > 0:
        level = logging.INFO if cli_ctx.verbosity == 1 else logging.DEBUG
    else:
        level = _VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)
    configure_logging(level=level)

    if not checklists:
        click.echo(
            format_error("Please specify one or more checklists to process"),
            err=True,
        )
        ctx.exit(ExitCode.FAILURE)

    options = RunOptions(
        sources=checklists,
        skip=skip,
        list_only=list_only,
        unattended=unattended,
        temp_dir=temp_dir,
    )
    with cli_error_handler():
        exit_code = await run_preflight(options, cli_ctx.config)
    ctx.exit(int(exit_code))


if __name__ == "__main__":
    cli()
