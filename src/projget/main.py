"""CLI entry point for projget.

This module defines the Click-based command-line interface for projget.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from projget.logging import configure_logging

# Load environment variables from .env file in current directory.
# This must happen before the configuration reads PROJGET_* variables.
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

from projget import __version__  # noqa: E402
from projget.cli.commands.get import get  # noqa: E402
from projget.cli.context import CLIContext, ExitCode  # noqa: E402
from projget.cli.output import format_error  # noqa: E402
from projget.cli.validators import check_dependencies  # noqa: E402
from projget.config import load_config  # noqa: E402
from projget.exceptions import ConfigError  # noqa: E402

#: Commands that shell out to git.
COMMANDS_NEEDING_GIT = {"get", "project:get"}

VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="projget")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to config file (overrides project/user config).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.option(
    "-n",
    "--no-interaction",
    is_flag=True,
    default=False,
    help="Do not ask any interactive question.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
    no_interaction: bool,
) -> None:
    """projget - provision local working copies of hosted projects."""
    ctx.ensure_object(dict)

    config_path = Path(config_file) if config_file else None
    try:
        config = load_config(config_path)
    except ConfigError as e:
        # Logging is not configured yet
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details=details or None), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["cli_ctx"] = CLIContext(
        config=config,
        config_path=config_path,
        verbosity=verbose,
        quiet=quiet,
        no_interaction=no_interaction,
    )

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)

    configure_logging(level=level)

    if ctx.invoked_subcommand in COMMANDS_NEEDING_GIT:
        missing_deps = [dep for dep in check_dependencies(["git"]) if not dep.available]
        if missing_deps:
            for dep in missing_deps:
                suggestion = (
                    f"Install from {dep.install_url}" if dep.install_url else None
                )
                click.echo(
                    format_error(
                        dep.error or f"{dep.name} is not available",
                        suggestion=suggestion,
                    ),
                    err=True,
                )
            ctx.exit(ExitCode.FAILURE)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(get)
cli.add_command(get, name="project:get")

if __name__ == "__main__":
    cli()
